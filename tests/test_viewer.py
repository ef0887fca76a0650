"""Tests for the MuJoCo scene viewer.

MjSpec building and camera math run everywhere. Offscreen rendering needs
an OpenGL context and is skipped when one can't be created.
"""

import math

import mujoco
import numpy as np
import pytest

from config import Config, ViewerConfig
from room_gen.composer import compose
from room_gen.extractor import extract
from room_gen.primitives import CameraPose
from view import (
    KEY_EQUAL,
    KEY_KP_2,
    KEY_KP_4,
    KEY_KP_6,
    KEY_KP_8,
    KEY_LEFT,
    KEY_R,
    OrbitCamera,
    SceneViewer,
    build_spec,
    compile_scene,
    handle_key,
    mj_quat,
    to_mj,
)


@pytest.fixture(scope="module")
def bedroom():
    return compose(extract("A modern blue bedroom with a bed"))


@pytest.fixture(scope="module")
def viewer_cfg():
    return Config.for_tests().viewer


# ---------------------------------------------------------------------------
# Coordinate conversion
# ---------------------------------------------------------------------------


class TestConversion:
    """Y-up scene coordinates to Z-up MuJoCo coordinates."""

    def test_to_mj(self):
        assert to_mj((1.0, 2.0, 3.0)).tolist() == [1.0, -3.0, 2.0]

    def test_unrotated_box_quat(self):
        # A Y-up box becomes a Z-up box: +90 degrees about X
        q = mj_quat((0.0, 0.0, 0.0))
        s = math.sqrt(0.5)
        assert q == pytest.approx([s, s, 0.0, 0.0])

    def test_floor_quat_is_identity(self):
        # Floor plane is rotated -90 about X in Y-up, i.e. flat in Z-up
        q = mj_quat((-math.pi / 2, 0.0, 0.0))
        assert np.abs(q) == pytest.approx([1.0, 0.0, 0.0, 0.0], abs=1e-9)


# ---------------------------------------------------------------------------
# build_spec()
# ---------------------------------------------------------------------------


class TestBuildSpec:
    """Scene -> compiled MuJoCo model."""

    @pytest.fixture(scope="class")
    def model(self, bedroom, viewer_cfg):
        model, _ = compile_scene(bedroom, viewer_cfg)
        return model

    def test_one_geom_per_prim(self, model, bedroom):
        assert model.ngeom == len(bedroom.prims)

    def test_geom_types(self, model, bedroom):
        planes = [i for i, p in enumerate(bedroom.prims) if p.geom_type.value == "plane"]
        for i in range(model.ngeom):
            expected = (
                mujoco.mjtGeom.mjGEOM_PLANE if i in planes else mujoco.mjtGeom.mjGEOM_BOX
            )
            assert int(model.geom_type[i]) == int(expected)

    def test_half_sizes(self, model):
        # Floor: 10 x 10 plane
        assert model.geom_size[0][:2] == pytest.approx([5.0, 5.0])
        # Bed base: 3 x 0.4 x 4 box
        assert model.geom_size[4] == pytest.approx([1.5, 0.2, 2.0])

    def test_positions_converted(self, model):
        # Back wall at (0, 2, -5) Y-up
        assert model.geom_pos[1] == pytest.approx([0.0, 5.0, 2.0])
        # Bed base at (0, 0.2, -2) Y-up
        assert model.geom_pos[4] == pytest.approx([0.0, 2.0, 0.2])

    def test_directional_light(self, model):
        assert model.nlight == 1
        direction = model.light_dir[0]
        assert direction == pytest.approx(-to_mj((5.0, 5.0, 5.0)) / math.sqrt(75.0))

    def test_ambient_headlight(self, model):
        assert model.vis.headlight.ambient == pytest.approx([0.5, 0.5, 0.5])

    def test_smoother_is_shinier(self, model):
        # Floor (roughness 0.8) vs walls (0.9)
        floor_mat = model.geom_matid[0]
        wall_mat = model.geom_matid[1]
        assert model.mat_shininess[floor_mat] > model.mat_shininess[wall_mat]

    def test_offscreen_buffer_fits(self):
        cfg = ViewerConfig(width=1920, height=1080)
        spec = build_spec(compose(extract("an office")), cfg)
        assert spec.visual.global_.offwidth >= 1920
        assert spec.visual.global_.offheight >= 1080


# ---------------------------------------------------------------------------
# OrbitCamera
# ---------------------------------------------------------------------------


class TestOrbitCamera:
    """Spherical camera with distance and polar clamps."""

    def test_default_pose(self):
        cam = OrbitCamera()
        assert cam.position == pytest.approx([5.0, 3.0, 5.0])
        assert cam.target == pytest.approx([0.0, 1.0, 0.0])
        assert cam.distance == pytest.approx(math.sqrt(54.0))

    def test_zoom_clamped(self):
        cam = OrbitCamera()
        for _ in range(20):
            cam.zoom_in()
        assert cam.distance == pytest.approx(3.0)
        for _ in range(20):
            cam.zoom_out()
        assert cam.distance == pytest.approx(10.0)

    def test_initial_distance_clamped(self):
        cam = OrbitCamera(CameraPose(position=(0.0, 1.0, 1.0), look_at=(0.0, 1.0, 0.0)))
        assert cam.distance == pytest.approx(3.0)

    def test_never_below_floor(self):
        cam = OrbitCamera()
        cam.orbit(d_polar=math.pi)
        assert cam.polar == pytest.approx(math.pi / 2)
        assert cam.position[1] >= cam.target[1] - 1e-9
        cam.orbit(d_polar=-2 * math.pi)
        assert cam.polar == pytest.approx(0.0)

    def test_orbit_keeps_distance(self):
        cam = OrbitCamera()
        d = cam.distance
        cam.orbit(d_azimuth=1.0)
        assert np.linalg.norm(cam.position - cam.target) == pytest.approx(d)

    def test_reset(self):
        cam = OrbitCamera()
        cam.zoom_in()
        cam.orbit(0.5, 0.3)
        cam.pan(1.0, 1.0)
        cam.reset()
        assert cam.position == pytest.approx([5.0, 3.0, 5.0])
        assert cam.target == pytest.approx([0.0, 1.0, 0.0])

    def test_pan_right_is_horizontal(self):
        cam = OrbitCamera()
        cam.pan(dx=1.0)
        assert cam.target[1] == pytest.approx(1.0)
        assert np.linalg.norm(cam.target - [0.0, 1.0, 0.0]) == pytest.approx(1.0)

    def test_to_mjv(self):
        mjv = OrbitCamera().to_mjv()
        assert mjv.lookat == pytest.approx([0.0, 0.0, 1.0])
        assert mjv.distance == pytest.approx(math.sqrt(54.0))
        assert mjv.azimuth == pytest.approx(135.0)
        assert mjv.elevation == pytest.approx(-math.degrees(math.asin(2 / math.sqrt(54.0))))


# ---------------------------------------------------------------------------
# Viewer key bindings
# ---------------------------------------------------------------------------


class TestKeyBindings:
    """handle_key() maps viewer keys onto the orbit camera."""

    def test_numpad_6_pans_right(self):
        cam = OrbitCamera()
        distance = cam.distance
        assert handle_key(cam, KEY_KP_6)
        moved = np.linalg.norm(cam.target - [0.0, 1.0, 0.0])
        assert moved == pytest.approx(cam.cfg.pan_step)
        assert cam.target[1] == pytest.approx(1.0)
        assert cam.distance == pytest.approx(distance)

    def test_numpad_4_undoes_6(self):
        cam = OrbitCamera()
        handle_key(cam, KEY_KP_6)
        handle_key(cam, KEY_KP_4)
        assert cam.target == pytest.approx([0.0, 1.0, 0.0])

    def test_numpad_8_and_2_pan_vertically(self):
        cam = OrbitCamera()
        handle_key(cam, KEY_KP_8)
        assert cam.target[1] > 1.0
        handle_key(cam, KEY_KP_2)
        assert cam.target == pytest.approx([0.0, 1.0, 0.0])

    def test_orbit_and_zoom_keys(self):
        cam = OrbitCamera()
        azimuth, distance = cam.azimuth, cam.distance
        handle_key(cam, KEY_LEFT)
        handle_key(cam, KEY_EQUAL)
        assert cam.azimuth == pytest.approx(azimuth - cam.cfg.orbit_step)
        assert cam.distance == pytest.approx(distance * cam.cfg.zoom_step)

    def test_r_resets_after_pan(self):
        cam = OrbitCamera()
        handle_key(cam, KEY_KP_8)
        handle_key(cam, KEY_KP_6)
        handle_key(cam, KEY_R)
        assert cam.position == pytest.approx([5.0, 3.0, 5.0])

    def test_unbound_key_ignored(self):
        cam = OrbitCamera()
        assert not handle_key(cam, 32)
        assert cam.target == pytest.approx([0.0, 1.0, 0.0])


# ---------------------------------------------------------------------------
# Offscreen rendering
# ---------------------------------------------------------------------------


class TestSceneViewer:
    """Offscreen rendering (skipped without OpenGL)."""

    @pytest.fixture
    def viewer(self, viewer_cfg, bedroom):
        viewer = SceneViewer(viewer_cfg)
        try:
            viewer.render(bedroom)
        except Exception as e:
            pytest.skip(f"Offscreen rendering unavailable: {e}")
        yield viewer
        viewer.dispose()

    def test_render_shape(self, viewer, bedroom, viewer_cfg):
        pixels = viewer.render(bedroom)
        assert pixels.shape == (viewer_cfg.height, viewer_cfg.width, 3)
        assert pixels.dtype == np.uint8
        assert pixels.std() > 0

    def test_same_scene_reuses_model(self, viewer, bedroom):
        model = viewer._model
        viewer.render(bedroom)
        assert viewer._model is model

    def test_new_scene_replaces_model(self, viewer, bedroom):
        model = viewer._model
        viewer.render(compose(extract("a kitchen")))
        assert viewer._model is not model
        assert viewer.scene is not bedroom

    def test_camera_changes_image(self, viewer, bedroom):
        cam = OrbitCamera(bedroom.camera, viewer.cfg)
        near = viewer.render(bedroom, cam)
        cam.orbit(d_azimuth=math.pi / 2)
        far = viewer.render(bedroom, cam)
        assert not np.array_equal(near, far)

    def test_dispose(self, viewer):
        viewer.dispose()
        assert viewer.scene is None
        assert viewer._renderer is None

"""MuJoCo rendering for composed room scenes.

Scenes are Y-up with full-extent sizes; MuJoCo is Z-up with half sizes.
build_spec() does the conversion, SceneViewer renders offscreen, and
run_view() opens the interactive passive viewer.

Controls (run_view):
    Left/Right arrows: orbit around the target
    Up/Down arrows: raise/lower the camera (clamped above the floor)
    = / -: zoom in / out (clamped to 3-10m)
    Numpad 8/4/2/6: pan the target up/left/down/right
    R: reset to the scene's camera pose
    Mouse: MuJoCo's usual rotate/pan/zoom
"""

from __future__ import annotations

import logging
import math
import time

import mujoco
import mujoco.viewer
import numpy as np

from config import ViewerConfig
from room_gen.primitives import CameraPose, GeomType, LightKind, Scene, Vec3

log = logging.getLogger(__name__)

# GLFW key codes (passed through unchanged by MuJoCo). Letter keys other
# than R are left to the viewer's own render toggles.
KEY_RIGHT = 262
KEY_LEFT = 263
KEY_DOWN = 264
KEY_UP = 265
KEY_EQUAL = 61
KEY_MINUS = 45
KEY_R = 82
KEY_KP_2 = 322
KEY_KP_4 = 324
KEY_KP_6 = 326
KEY_KP_8 = 328

# Y-up (x, y, z) -> MuJoCo Z-up (x, -z, y)
Y_UP_TO_Z_UP = np.array(
    [
        [1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0],
        [0.0, 1.0, 0.0],
    ]
)

PLANE_GRID_SPACING = 1.0


def to_mj(v: Vec3) -> np.ndarray:
    """Y-up vector -> MuJoCo Z-up vector."""
    return Y_UP_TO_Z_UP @ np.asarray(v, dtype=np.float64)


def euler_matrix(rx: float, ry: float, rz: float) -> np.ndarray:
    """Rotation matrix for XYZ-ordered Euler angles (R = Rx @ Ry @ Rz)."""
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    rot_x = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    rot_y = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rot_z = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return rot_x @ rot_y @ rot_z


def mj_quat(euler: Vec3) -> np.ndarray:
    """MuJoCo (w, x, y, z) quaternion for a Y-up Euler rotation."""
    mat = Y_UP_TO_Z_UP @ euler_matrix(*euler)
    quat = np.zeros(4)
    mujoco.mju_mat2Quat(quat, mat.flatten())
    return quat


# ---------------------------------------------------------------------------
# Orbit camera
# ---------------------------------------------------------------------------


class OrbitCamera:
    """Spherical camera around a target point, in Y-up scene coordinates.

    polar is measured from straight up (+Y), azimuth around +Y starting at
    +Z. Distance and polar angle are clamped on every change, so the
    camera never goes closer than min_distance, further than
    max_distance, or below the floor.
    """

    def __init__(self, pose: CameraPose = CameraPose(), cfg: ViewerConfig | None = None):
        self.cfg = cfg or ViewerConfig()
        self.home = pose
        self.reset()

    def reset(self):
        """Return to the home pose (clamped)."""
        tx, ty, tz = self.home.look_at
        dx = self.home.position[0] - tx
        dy = self.home.position[1] - ty
        dz = self.home.position[2] - tz
        r = math.sqrt(dx * dx + dy * dy + dz * dz)
        self.target = np.array([tx, ty, tz], dtype=np.float64)
        self.azimuth = math.atan2(dx, dz)
        self.polar = math.acos(dy / r) if r > 0 else 0.0
        self.distance = r
        self._clamp()

    def _clamp(self):
        cfg = self.cfg
        self.distance = min(max(self.distance, cfg.min_distance), cfg.max_distance)
        self.polar = min(max(self.polar, cfg.min_polar), cfg.max_polar)

    @property
    def offset(self) -> np.ndarray:
        """Camera position relative to the target."""
        sp = math.sin(self.polar)
        return self.distance * np.array(
            [
                sp * math.sin(self.azimuth),
                math.cos(self.polar),
                sp * math.cos(self.azimuth),
            ]
        )

    @property
    def position(self) -> np.ndarray:
        return self.target + self.offset

    def orbit(self, d_azimuth: float = 0.0, d_polar: float = 0.0):
        self.azimuth += d_azimuth
        self.polar += d_polar
        self._clamp()

    def zoom_in(self):
        self.distance *= self.cfg.zoom_step
        self._clamp()

    def zoom_out(self):
        self.distance /= self.cfg.zoom_step
        self._clamp()

    def pan(self, dx: float = 0.0, dy: float = 0.0):
        """Move the target along the camera's screen-space right/up axes."""
        right = np.array([math.cos(self.azimuth), 0.0, -math.sin(self.azimuth)])
        cp = math.cos(self.polar)
        up = np.array(
            [
                -cp * math.sin(self.azimuth),
                math.sin(self.polar),
                -cp * math.cos(self.azimuth),
            ]
        )
        self.target = self.target + dx * right + dy * up

    def apply(self, cam: mujoco.MjvCamera):
        """Write this pose into a MuJoCo free camera."""
        lookat = to_mj(self.target)
        d = to_mj(self.offset)
        cam.type = mujoco.mjtCamera.mjCAMERA_FREE
        cam.lookat[:] = lookat
        cam.distance = self.distance
        cam.azimuth = math.degrees(math.atan2(-d[1], -d[0]))
        cam.elevation = math.degrees(math.asin(max(-1.0, min(1.0, -d[2] / self.distance))))

    def to_mjv(self) -> mujoco.MjvCamera:
        cam = mujoco.MjvCamera()
        self.apply(cam)
        return cam


# ---------------------------------------------------------------------------
# Scene -> MjSpec
# ---------------------------------------------------------------------------


def _add_background(spec: mujoco.MjSpec, color: tuple[float, float, float]):
    tex = spec.add_texture()
    tex.name = "background"
    tex.type = mujoco.mjtTexture.mjTEXTURE_SKYBOX
    tex.builtin = mujoco.mjtBuiltin.mjBUILTIN_FLAT
    tex.rgb1 = list(color)
    tex.rgb2 = list(color)
    tex.width = 32
    tex.height = 32


def _add_lights(spec: mujoco.MjSpec, scene: Scene):
    # Headlight keeps only a dim fill; ambient comes from the scene
    spec.visual.headlight.ambient = [0.0, 0.0, 0.0]
    spec.visual.headlight.diffuse = [0.2, 0.2, 0.2]
    spec.visual.headlight.specular = [0.0, 0.0, 0.0]

    for i, light in enumerate(scene.lights):
        rgb = [c * light.intensity for c in light.color]
        if light.kind == LightKind.AMBIENT:
            spec.visual.headlight.ambient = rgb
            continue
        pos = to_mj(light.pos)
        norm = np.linalg.norm(pos)
        mj_light = spec.worldbody.add_light()
        mj_light.name = f"light_{i}"
        mj_light.pos = pos.tolist()
        mj_light.dir = (-pos / norm).tolist() if norm > 0 else [0.0, 0.0, -1.0]
        mj_light.diffuse = rgb
        mj_light.specular = [0.3, 0.3, 0.3]
        mj_light.cutoff = 80.0
        mj_light.castshadow = True


def build_spec(scene: Scene, cfg: ViewerConfig | None = None) -> mujoco.MjSpec:
    """Build a MuJoCo spec holding every prim of a scene as a static geom.

    One material per (color, roughness) pair; smoother surfaces get more
    shininess and specular.
    """
    cfg = cfg or ViewerConfig()
    spec = mujoco.MjSpec()
    spec.modelname = "room"
    spec.visual.global_.offwidth = max(spec.visual.global_.offwidth, cfg.width)
    spec.visual.global_.offheight = max(spec.visual.global_.offheight, cfg.height)
    spec.visual.global_.fovy = cfg.fovy
    _add_background(spec, cfg.background)
    _add_lights(spec, scene)

    materials: dict[tuple, str] = {}
    for i, prim in enumerate(scene.prims):
        key = (prim.color, prim.roughness)
        if key not in materials:
            mat = spec.add_material()
            mat.name = f"mat_{len(materials)}"
            mat.rgba = [*prim.color, 1.0]
            mat.shininess = 1.0 - prim.roughness
            mat.specular = 0.5 * (1.0 - prim.roughness)
            materials[key] = mat.name

        geom = spec.worldbody.add_geom()
        geom.name = f"prim_{i}"
        if prim.geom_type == GeomType.PLANE:
            w, h = prim.size
            geom.type = mujoco.mjtGeom.mjGEOM_PLANE
            geom.size = [w / 2, h / 2, PLANE_GRID_SPACING]
        else:
            w, h, d = prim.size
            geom.type = mujoco.mjtGeom.mjGEOM_BOX
            geom.size = [w / 2, h / 2, d / 2]
        geom.pos = to_mj(prim.pos).tolist()
        geom.quat = mj_quat(prim.euler).tolist()
        geom.rgba = [*prim.color, 1.0]
        geom.material = materials[key]
        geom.contype = 0
        geom.conaffinity = 0

    return spec


def compile_scene(
    scene: Scene, cfg: ViewerConfig | None = None
) -> tuple[mujoco.MjModel, mujoco.MjData]:
    model = build_spec(scene, cfg).compile()
    data = mujoco.MjData(model)
    mujoco.mj_forward(model, data)
    return model, data


# ---------------------------------------------------------------------------
# Offscreen viewer
# ---------------------------------------------------------------------------


class SceneViewer:
    """Offscreen renderer that always shows exactly one scene.

    A new scene replaces the previous model and renderer wholesale;
    rendering the same scene again reuses them.
    """

    def __init__(self, cfg: ViewerConfig | None = None):
        self.cfg = cfg or ViewerConfig()
        self.scene: Scene | None = None
        self._model: mujoco.MjModel | None = None
        self._data: mujoco.MjData | None = None
        self._renderer: mujoco.Renderer | None = None

    def _load(self, scene: Scene):
        self.dispose()
        self._model, self._data = compile_scene(scene, self.cfg)
        self._renderer = mujoco.Renderer(
            self._model, height=self.cfg.height, width=self.cfg.width
        )
        self.scene = scene
        log.debug(
            "Loaded scene: %d geoms, %d lights", self._model.ngeom, self._model.nlight
        )

    def render(self, scene: Scene, camera: OrbitCamera | None = None) -> np.ndarray:
        """Render a scene to an (H, W, 3) uint8 array."""
        if scene is not self.scene or self._renderer is None:
            self._load(scene)
        camera = camera or OrbitCamera(scene.camera, self.cfg)
        self._renderer.update_scene(self._data, camera.to_mjv())
        return self._renderer.render().copy()

    def dispose(self):
        """Release the renderer and model."""
        if self._renderer is not None:
            self._renderer.close()
        self._renderer = None
        self._model = None
        self._data = None
        self.scene = None


# ---------------------------------------------------------------------------
# Interactive viewer
# ---------------------------------------------------------------------------


def handle_key(camera: OrbitCamera, keycode: int) -> bool:
    """Apply one viewer key to the camera. Returns False for unbound keys."""
    step = camera.cfg.orbit_step
    pan = camera.cfg.pan_step
    if keycode == KEY_LEFT:
        camera.orbit(d_azimuth=-step)
    elif keycode == KEY_RIGHT:
        camera.orbit(d_azimuth=step)
    elif keycode == KEY_UP:
        camera.orbit(d_polar=-step)
    elif keycode == KEY_DOWN:
        camera.orbit(d_polar=step)
    elif keycode == KEY_KP_8:
        camera.pan(dy=pan)
    elif keycode == KEY_KP_2:
        camera.pan(dy=-pan)
    elif keycode == KEY_KP_4:
        camera.pan(dx=-pan)
    elif keycode == KEY_KP_6:
        camera.pan(dx=pan)
    elif keycode == KEY_EQUAL:
        camera.zoom_in()
    elif keycode == KEY_MINUS:
        camera.zoom_out()
    elif keycode == KEY_R:
        camera.reset()
    else:
        return False
    return True


def run_view(scene: Scene, cfg: ViewerConfig | None = None):
    """Open the MuJoCo passive viewer on a scene until the window closes."""
    cfg = cfg or ViewerConfig()
    m, d = compile_scene(scene, cfg)
    camera = OrbitCamera(scene.camera, cfg)
    dirty = [True]

    def on_key(keycode):
        if handle_key(camera, keycode):
            dirty[0] = True

    log.info("Opening viewer (%d prims)", len(scene.prims))
    with mujoco.viewer.launch_passive(m, d, key_callback=on_key) as viewer:
        while viewer.is_running():
            if dirty[0]:
                with viewer.lock():
                    camera.apply(viewer.cam)
                dirty[0] = False
            viewer.sync()
            time.sleep(1 / 60)

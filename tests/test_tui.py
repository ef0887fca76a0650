"""Headless TUI tests driven through Textual's test pilot.

Each test runs the app with Config.for_tests() inside asyncio.run. Buttons
are dispatched through on_button_pressed so layout and screen size never
matter.
"""

import asyncio

import numpy as np
import pytest
from PIL import Image
from textual.widgets import Button, Input

from config import Config
from room_gen.extractor import EXAMPLE_DESCRIPTIONS, extract
from room_gen.session import SessionState
from tui import VisualizerApp


def _run(scenario):
    async def main():
        app = VisualizerApp(Config.for_tests())
        async with app.run_test(size=(200, 60)) as pilot:
            await scenario(app, pilot)

    asyncio.run(main())


def _press(app, button_id):
    app.on_button_pressed(Button.Pressed(app.query_one(f"#{button_id}", Button)))


async def _generate(app, pilot, text=EXAMPLE_DESCRIPTIONS[1]):
    app.query_one("#text-input", Input).value = text
    app._start_text()
    await app.workers.wait_for_complete()
    await pilot.pause()


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "room.png"
    Image.new("RGB", (60, 40), (120, 80, 40)).save(path)
    return path


class TestLivePreview:
    """Extraction preview while typing."""

    def test_example_fills_input_and_preview(self):
        async def scenario(app, pilot):
            _press(app, "example-0")
            await pilot.pause()
            assert app.query_one("#text-input", Input).value == EXAMPLE_DESCRIPTIONS[0]
            assert app.preview_record == extract(EXAMPLE_DESCRIPTIONS[0])

        _run(scenario)

    def test_short_text_has_no_preview(self):
        async def scenario(app, pilot):
            app.query_one("#text-input", Input).value = "A rustic bedroom"
            await pilot.pause()
            assert app.preview_record == extract("A rustic bedroom")
            app.query_one("#text-input", Input).value = "bedroom"
            await pilot.pause()
            assert app.preview_record is None

        _run(scenario)


class TestRemoveImage:
    """Dropping the loaded reference photo."""

    def test_remove_clears_photo(self, photo):
        async def scenario(app, pilot):
            app.query_one("#image-input", Input).value = str(photo)
            app._start_image()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.ctx.image is not None
            assert not app.query_one("#remove-image", Button).disabled

            _press(app, "remove-image")
            assert app.ctx.image is None
            assert app._image_path is None
            assert app.query_one("#image-input", Input).value == ""
            assert app.query_one("#remove-image", Button).disabled

        _run(scenario)

    def test_remove_keeps_scene(self, photo):
        async def scenario(app, pilot):
            await _generate(app, pilot)
            app.query_one("#image-input", Input).value = str(photo)
            app._start_image()
            await app.workers.wait_for_complete()
            await pilot.pause()
            scene = app.ctx.scene

            _press(app, "remove-image")
            assert app.ctx.scene is scene
            assert app.ctx.state == SessionState.READY

        _run(scenario)


class TestCameraButtons:
    """Orbit and pan buttons drive the TUI camera."""

    def test_disabled_without_scene(self):
        async def scenario(app, pilot):
            assert app.query_one("#pan-left", Button).disabled
            assert app.query_one("#orbit-left", Button).disabled

        _run(scenario)

    def test_pan_moves_target(self):
        async def scenario(app, pilot):
            await _generate(app, pilot)
            assert not app.query_one("#pan-right", Button).disabled
            start = app.camera.target.copy()
            _press(app, "pan-right")
            moved = np.linalg.norm(app.camera.target - start)
            assert moved == pytest.approx(app.cfg.viewer.pan_step)
            _press(app, "pan-left")
            assert app.camera.target == pytest.approx(start)

        _run(scenario)

    def test_orbit_turns_camera(self):
        async def scenario(app, pilot):
            await _generate(app, pilot)
            azimuth = app.camera.azimuth
            _press(app, "orbit-right")
            assert app.camera.azimuth == pytest.approx(azimuth + app.cfg.viewer.orbit_step)
            distance = app.camera.distance
            _press(app, "orbit-down")
            assert app.camera.distance == pytest.approx(distance)

        _run(scenario)

    def test_reset_after_pan(self):
        async def scenario(app, pilot):
            await _generate(app, pilot)
            _press(app, "pan-up")
            _press(app, "reset")
            assert app.camera.target == pytest.approx([0.0, 1.0, 0.0])

        _run(scenario)

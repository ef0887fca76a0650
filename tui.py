"""
Textual TUI for the interior visualizer.

Describe a room (or start from an example), optionally attach a reference
photo, and iterate on the composed scene: regenerate, orbit/pan/zoom the
camera, save renders, rate the result. Extracted attributes preview live
while typing. "Open viewer" leaves the TUI and opens the MuJoCo viewer on the
current description.

Usage:
    python main.py
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime
from pathlib import Path

from PIL import Image
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Input, RichLog, Static

from config import Config
from room_gen.composer import describe_scene
from room_gen.extractor import (
    EXAMPLE_DESCRIPTIONS,
    AttributeRecord,
    format_extracted_info,
    generate_prompt_from_info,
    preview,
)
from room_gen.primitives import Scene
from room_gen.session import (
    Session,
    SessionBusyError,
    SessionContext,
    SessionState,
)
from view import OrbitCamera, SceneViewer

log = logging.getLogger(__name__)

RENDER_DIR = Path("renders")

# Button labels for EXAMPLE_DESCRIPTIONS, same order
EXAMPLE_LABELS = ("Living room", "Bedroom", "Kitchen")

CAMERA_BUTTONS = (
    "orbit-left",
    "orbit-right",
    "orbit-up",
    "orbit-down",
    "pan-left",
    "pan-right",
    "pan-up",
    "pan-down",
    "zoom-in",
    "zoom-out",
    "reset",
)

STATE_LABELS = {
    SessionState.IDLE: "[dim]Waiting for a description[/dim]",
    SessionState.EXTRACTING: "[yellow]Extracting attributes...[/yellow]",
    SessionState.COMPOSING: "[yellow]Generating 3D model...[/yellow]",
    SessionState.READY: "[green]Ready[/green]",
    SessionState.ERROR: "[bold red]Error[/bold red]",
}


class TuiLogHandler(logging.Handler):
    """Routes Python log records into the TUI log panel.

    Session work runs as async workers on the app's event loop, so most
    records arrive on that thread and are written directly. Records from
    other threads (image decoding) go through ``call_from_thread``.
    """

    def __init__(self, app: "VisualizerApp"):
        super().__init__(level=logging.INFO)
        self._app = app
        self._event_loop_thread = threading.current_thread()
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            if record.levelno >= logging.ERROR:
                msg = f"[bold red]{msg}[/bold red]"
            elif record.levelno >= logging.WARNING:
                msg = f"[bold yellow]{msg}[/bold yellow]"
            if threading.current_thread() is self._event_loop_thread:
                self._app.log_message(msg)
            else:
                self._app.call_from_thread(self._app.log_message, msg)
        except Exception:
            self.handleError(record)


class VisualizerApp(App):
    """Interior visualizer Textual TUI application."""

    TITLE = "3D Interior Visualizer"
    SUB_TITLE = "Transform your space descriptions into interactive 3D models"

    BINDINGS = [
        Binding("ctrl+r", "regenerate", "Regenerate"),
        Binding("ctrl+s", "save_render", "Save render"),
        Binding("ctrl+o", "open_viewer", "Open viewer"),
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    CSS = """
    Screen {
        background: $surface;
        layout: vertical;
    }

    #body {
        height: 1fr;
    }

    #inputs {
        width: 1fr;
        padding: 0 1;
    }

    #output {
        width: 2fr;
        padding: 0 1;
    }

    .section-title {
        text-style: bold;
        color: $accent;
        margin-top: 1;
    }

    .button-row {
        height: auto;
    }

    .button-row Button {
        margin-right: 1;
    }

    #info, #scene {
        height: auto;
        max-height: 14;
        overflow-y: auto;
    }

    #log-area {
        height: 10;
        border-top: solid $primary-background;
    }
    """

    def __init__(self, cfg: Config | None = None, **kwargs):
        super().__init__(**kwargs)
        self.cfg = cfg or Config()
        self.ctx = SessionContext()
        self.session = Session(
            self.cfg.session,
            self.cfg.image,
            on_scene=self._on_scene,
            on_state=self._on_state,
        )
        self.camera = OrbitCamera(cfg=self.cfg.viewer)
        self._viewer: SceneViewer | None = None
        self._log_handler: TuiLogHandler | None = None
        # Set before exit() to dispatch after app.run() returns
        self.next_action: str | None = None
        self.next_text: str | None = None
        self.next_image: str | None = None
        self._image_path: str | None = None
        self.preview_record: AttributeRecord | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            with Vertical(id="inputs"):
                yield Static("Describe your space", classes="section-title")
                yield Input(
                    placeholder="A modern living room with a gray sofa, 15ft by 12ft",
                    id="text-input",
                )
                yield Button("Generate", id="generate", variant="primary")
                yield Static("Try an example", classes="section-title")
                with Horizontal(classes="button-row"):
                    for i, label in enumerate(EXAMPLE_LABELS):
                        yield Button(label, id=f"example-{i}")
                yield Static("Reference photo", classes="section-title")
                yield Input(placeholder="path/to/photo.jpg", id="image-input")
                with Horizontal(classes="button-row"):
                    yield Button("Load image", id="load-image")
                    yield Button("Remove image", id="remove-image")
                yield Static("Extracted information", classes="section-title")
                yield Static("", id="info")
            with Vertical(id="output"):
                yield Static(STATE_LABELS[SessionState.IDLE], id="status")
                yield Static("", id="scene")
                yield Static("View", classes="section-title")
                yield Static("", id="camera")
                with Horizontal(classes="button-row"):
                    yield Button("Orbit ←", id="orbit-left")
                    yield Button("Orbit →", id="orbit-right")
                    yield Button("Orbit ↑", id="orbit-up")
                    yield Button("Orbit ↓", id="orbit-down")
                with Horizontal(classes="button-row"):
                    yield Button("Pan ←", id="pan-left")
                    yield Button("Pan →", id="pan-right")
                    yield Button("Pan ↑", id="pan-up")
                    yield Button("Pan ↓", id="pan-down")
                with Horizontal(classes="button-row"):
                    yield Button("Zoom in", id="zoom-in")
                    yield Button("Zoom out", id="zoom-out")
                    yield Button("Reset", id="reset")
                    yield Button("Save render", id="save")
                    yield Button("Open viewer", id="viewer")
                yield Static("Feedback", classes="section-title")
                yield Input(placeholder="Comments (optional)", id="comment-input")
                with Horizontal(classes="button-row"):
                    yield Button("Like", id="like", variant="success")
                    yield Button("Dislike", id="dislike", variant="error")
                    yield Button("Regenerate", id="regenerate")
        yield RichLog(id="log-area", markup=True, wrap=True)
        yield Footer()

    def on_mount(self) -> None:
        self._log_handler = TuiLogHandler(self)
        logging.getLogger().addHandler(self._log_handler)
        self._update_camera()
        self._set_controls()

    def on_unmount(self) -> None:
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None
        if self._viewer is not None:
            self._viewer.dispose()

    # -- display -----------------------------------------------------------

    def log_message(self, text: str):
        ts = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-area", RichLog).write(f"[dim]{ts}[/dim]  {text}")

    def _on_state(self, state: SessionState):
        self.query_one("#status", Static).update(STATE_LABELS[state])
        self._set_controls()

    def _on_scene(self, scene: Scene):
        self.camera = OrbitCamera(scene.camera, self.cfg.viewer)
        self.query_one("#scene", Static).update(describe_scene(scene))
        self._update_camera()

    def _update_camera(self):
        c = self.camera
        tx, ty, tz = c.target
        self.query_one("#camera", Static).update(
            f"distance {c.distance:.2f}  azimuth {math.degrees(c.azimuth):+.0f}°"
            f"  polar {math.degrees(c.polar):.0f}°"
            f"  target ({tx:+.2f}, {ty:+.2f}, {tz:+.2f})"
        )

    def _show_info(self, record: AttributeRecord | None):
        lines = []
        if record is not None:
            lines.append(format_extracted_info(record))
            lines.append("")
            lines.append(f"[dim]{generate_prompt_from_info(record)}[/dim]")
        image = self.ctx.image
        if image is not None:
            swatches = " ".join(
                f"[on rgb({min(r, 255)},{min(g, 255)},{min(b, 255)})]    [/]"
                for r, g, b in image.dominant_colors
            )
            lines.append(f"Photo {image.width}x{image.height}  {swatches}")
        self.query_one("#info", Static).update("\n".join(lines))

    def _show_context(self, ctx: SessionContext):
        self.ctx = ctx
        self._on_state(ctx.state)
        if ctx.state == SessionState.ERROR:
            self.query_one("#status", Static).update(
                f"{STATE_LABELS[SessionState.ERROR]}  {ctx.message}"
            )
        self._show_info(ctx.record)
        self._set_controls()

    def _set_controls(self):
        busy = self.session.busy
        has_scene = self.ctx.scene is not None
        for button_id in ("generate", "load-image", "regenerate"):
            self.query_one(f"#{button_id}", Button).disabled = busy
        self.query_one("#remove-image", Button).disabled = busy or self.ctx.image is None
        for button_id in (*CAMERA_BUTTONS, "save", "viewer", "like", "dislike"):
            self.query_one(f"#{button_id}", Button).disabled = busy or not has_scene

    # -- session workers ---------------------------------------------------

    @work(exclusive=True, group="session")
    async def _submit_text(self, text: str) -> None:
        try:
            ctx = await self.session.submit_text(self.ctx, text)
        except SessionBusyError as e:
            log.warning("%s", e)
            return
        finally:
            self._set_controls()
        self._show_context(ctx)
        log.info(ctx.message)

    @work(exclusive=True, group="session")
    async def _submit_image(self, path: str) -> None:
        try:
            ctx = await self.session.submit_image(self.ctx, path)
        except SessionBusyError as e:
            log.warning("%s", e)
            return
        finally:
            self._set_controls()
        if ctx.state != SessionState.ERROR:
            self._image_path = path
            log.info(ctx.message)
        self._show_context(ctx)

    @work(exclusive=True, group="session")
    async def _regenerate(self) -> None:
        try:
            ctx = await self.session.regenerate(self.ctx)
        except SessionBusyError as e:
            log.warning("%s", e)
            return
        finally:
            self._set_controls()
        self._show_context(ctx)
        if ctx.state == SessionState.ERROR:
            log.warning(ctx.message)
        else:
            log.info(ctx.message)

    # -- events ------------------------------------------------------------

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "text-input":
            self._start_text()
        elif event.input.id == "image-input":
            self._start_image()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "text-input":
            return
        # Live preview; falls back to the last submitted description
        self.preview_record = preview(event.value)
        self._show_info(self.preview_record or self.ctx.record)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        orbit = self.cfg.viewer.orbit_step
        pan = self.cfg.viewer.pan_step
        actions = {
            "generate": self._start_text,
            "load-image": self._start_image,
            "remove-image": self.action_remove_image,
            "regenerate": self.action_regenerate,
            "orbit-left": lambda: self._move_camera(self.camera.orbit, d_azimuth=-orbit),
            "orbit-right": lambda: self._move_camera(self.camera.orbit, d_azimuth=orbit),
            "orbit-up": lambda: self._move_camera(self.camera.orbit, d_polar=-orbit),
            "orbit-down": lambda: self._move_camera(self.camera.orbit, d_polar=orbit),
            "pan-left": lambda: self._move_camera(self.camera.pan, dx=-pan),
            "pan-right": lambda: self._move_camera(self.camera.pan, dx=pan),
            "pan-up": lambda: self._move_camera(self.camera.pan, dy=pan),
            "pan-down": lambda: self._move_camera(self.camera.pan, dy=-pan),
            "zoom-in": self.action_zoom_in,
            "zoom-out": self.action_zoom_out,
            "reset": self.action_reset_view,
            "save": self.action_save_render,
            "viewer": self.action_open_viewer,
            "like": lambda: self._feedback("positive"),
            "dislike": lambda: self._feedback("negative"),
        }
        button_id = event.button.id or ""
        if button_id.startswith("example-"):
            self._use_example(int(button_id.removeprefix("example-")))
            return
        handler = actions.get(button_id)
        if handler is not None:
            handler()

    def _use_example(self, index: int):
        # Setting the value fires Input.Changed, which refreshes the preview
        text_input = self.query_one("#text-input", Input)
        text_input.value = EXAMPLE_DESCRIPTIONS[index]
        text_input.focus()

    def _move_camera(self, move, **kwargs):
        move(**kwargs)
        self._update_camera()

    def _start_text(self):
        text = self.query_one("#text-input", Input).value
        if self.session.busy:
            return
        self._submit_text(text)

    def _start_image(self):
        path = self.query_one("#image-input", Input).value.strip()
        if not path or self.session.busy:
            return
        self._submit_image(path)

    def _feedback(self, rating: str):
        comment_input = self.query_one("#comment-input", Input)
        self.session.submit_feedback(rating, comment_input.value)
        comment_input.value = ""
        log.info("Thank you for your feedback!")

    # -- actions -----------------------------------------------------------

    def action_regenerate(self) -> None:
        if self.session.busy:
            return
        self._regenerate()

    def action_remove_image(self) -> None:
        if self.session.busy or self.ctx.image is None:
            return
        self._image_path = None
        self.query_one("#image-input", Input).value = ""
        self._show_context(self.session.remove_image(self.ctx))
        log.info(self.ctx.message)

    def action_zoom_in(self) -> None:
        self.camera.zoom_in()
        self._update_camera()

    def action_zoom_out(self) -> None:
        self.camera.zoom_out()
        self._update_camera()

    def action_reset_view(self) -> None:
        self.camera.reset()
        self._update_camera()
        log.info("View reset")

    def action_save_render(self) -> None:
        if self.ctx.scene is None:
            return
        if self._viewer is None:
            self._viewer = SceneViewer(self.cfg.viewer)
        try:
            pixels = self._viewer.render(self.ctx.scene, self.camera)
        except Exception:
            log.exception("Render failed")
            return
        RENDER_DIR.mkdir(parents=True, exist_ok=True)
        path = RENDER_DIR / f"room_{datetime.now().strftime('%Y%m%d_%H%M%S')}.png"
        Image.fromarray(pixels).save(path)
        log.info("Current view saved to %s", path)

    def action_open_viewer(self) -> None:
        """Exit TUI, then main() will launch the MuJoCo viewer."""
        if not self.ctx.has_description:
            return
        self.next_action = "view"
        self.next_text = self.ctx.text
        self.next_image = self._image_path
        self.exit()

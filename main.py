"""
Interior visualizer: room descriptions and reference photos to 3D scenes.

Single entry point for all modes: interactive TUI, describe, compose,
analyze, normalize, render, and view.

Usage:
    python main.py                                   # Interactive TUI (default)
    python main.py describe "A modern living room with a sofa"
    python main.py compose TEXT [--image PATH]       # Textual scene listing
    python main.py analyze IMAGE                     # Size + dominant colors
    python main.py normalize IMAGE --out OUT.jpg [--width 512 --height 512]
    python main.py render TEXT [--image PATH] --out OUT.png [--width --height]
    mjpython main.py view TEXT [--image PATH]        # MuJoCo viewer

On macOS the interactive viewer needs mjpython (not plain python).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shutil
import os
import sys
from dataclasses import replace
from pathlib import Path

from config import Config
from room_gen.image_summary import ImageError

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure root logger level and install an excepthook.

    Handlers are attached by whoever owns the output: a stderr stream
    handler for CLI subcommands, the TUI log panel for the app. This
    function only sets the root level and installs an excepthook so
    unhandled exceptions are captured by whatever handlers are active at
    the time.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Capture unhandled exceptions to the log
    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _add_stderr_handler(verbose: bool = False) -> None:
    """Send log records to stderr for CLI subcommands (replaces prior handlers)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _is_mjpython() -> bool:
    """Check if we're running under mjpython."""
    return "MJPYTHON_BIN" in os.environ


def _check_mjpython():
    """Warn if the viewer is launched without mjpython where it's available."""
    if shutil.which("mjpython") is None:
        return  # mjpython not installed, nothing to check
    if not _is_mjpython():
        print(
            "Warning: the viewer should be launched with mjpython.\n"
            "  Use: mjpython main.py view ...\n",
            file=sys.stderr,
        )


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Interior visualizer - single entry point for all modes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # describe
    p_desc = sub.add_parser("describe", help="Print extracted attributes and prompt")
    p_desc.add_argument("text", help="Room description")

    # compose
    p_comp = sub.add_parser("compose", help="Print the composed scene")
    p_comp.add_argument("text", help="Room description")
    p_comp.add_argument("--image", type=str, default=None, help="Reference photo")

    # analyze
    p_an = sub.add_parser("analyze", help="Summarize a reference photo")
    p_an.add_argument("image", help="Image file")

    # normalize
    p_norm = sub.add_parser("normalize", help="Letterbox a photo onto a white canvas")
    p_norm.add_argument("image", help="Image file")
    p_norm.add_argument("--out", required=True, help="Output JPEG path")
    p_norm.add_argument("--width", type=int, default=None, help="Canvas width (default: 512)")
    p_norm.add_argument("--height", type=int, default=None, help="Canvas height (default: 512)")

    # render
    p_render = sub.add_parser("render", help="Render the composed scene to a PNG")
    p_render.add_argument("text", help="Room description")
    p_render.add_argument("--image", type=str, default=None, help="Reference photo")
    p_render.add_argument("--out", required=True, help="Output PNG path")
    p_render.add_argument("--width", type=int, default=None, help="Image width (default: 800)")
    p_render.add_argument("--height", type=int, default=None, help="Image height (default: 600)")

    # view
    p_view = sub.add_parser("view", help="Open the MuJoCo viewer on the composed scene")
    p_view.add_argument("text", help="Room description")
    p_view.add_argument("--image", type=str, default=None, help="Reference photo")

    return parser


async def _session_scene(cfg: Config, text: str, image: str | None):
    """Run a text (+ photo) submission through a session, as the TUI does."""
    from room_gen.session import Session, SessionContext, SessionState

    session = Session(replace(cfg.session, generate_latency_s=0.0), cfg.image)
    ctx = SessionContext()
    if image is not None:
        ctx = await session.submit_image(ctx, image)
        if ctx.state == SessionState.ERROR:
            raise ImageError(ctx.message)
    return await session.submit_text(ctx, text)


def _cmd_describe(args, cfg: Config):
    from room_gen.extractor import extract, format_extracted_info, generate_prompt_from_info

    record = extract(args.text)
    print(format_extracted_info(record))
    print()
    print(generate_prompt_from_info(record))


def _cmd_compose(args, cfg: Config):
    from room_gen.composer import describe_scene

    ctx = asyncio.run(_session_scene(cfg, args.text, args.image))
    print(describe_scene(ctx.scene))


def _cmd_analyze(args, cfg: Config):
    from room_gen.image_summary import summarize

    summary = asyncio.run(summarize(args.image, cfg.image))
    print(f"Size: {summary.width} x {summary.height}")
    print(f"Aspect ratio: {summary.aspect_ratio:.3f}")
    print(f"Dominant colors: {', '.join(summary.css_colors()) or '(none)'}")


def _cmd_normalize(args, cfg: Config):
    from room_gen.image_summary import normalize

    width = args.width or cfg.image.normalize_width
    height = args.height or cfg.image.normalize_height
    data = asyncio.run(normalize(args.image, width, height, cfg.image))
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    print(f"Saved {width}x{height} JPEG to {out}")


def _cmd_render(args, cfg: Config):
    from PIL import Image

    from view import SceneViewer

    viewer_cfg = replace(
        cfg.viewer,
        width=args.width or cfg.viewer.width,
        height=args.height or cfg.viewer.height,
    )
    ctx = asyncio.run(_session_scene(cfg, args.text, args.image))
    viewer = SceneViewer(viewer_cfg)
    try:
        pixels = viewer.render(ctx.scene)
    finally:
        viewer.dispose()
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(pixels).save(out)
    print(f"Saved {viewer_cfg.width}x{viewer_cfg.height} render to {out}")


def _cmd_view(args, cfg: Config):
    from view import run_view

    _check_mjpython()
    ctx = asyncio.run(_session_scene(cfg, args.text, args.image))
    run_view(ctx.scene, cfg.viewer)


COMMANDS = {
    "describe": _cmd_describe,
    "compose": _cmd_compose,
    "analyze": _cmd_analyze,
    "normalize": _cmd_normalize,
    "render": _cmd_render,
    "view": _cmd_view,
}


def _run_tui(cfg: Config):
    """Launch the interactive Textual TUI."""
    from tui import VisualizerApp

    app = VisualizerApp(cfg)
    app.run()

    # Re-exec for the viewer so GLFW starts from a clean process
    # (Textual's event loop leaves it in a bad state on macOS).
    if app.next_action == "view" and app.next_text:
        cmd = [sys.executable, str(Path(__file__).resolve()), "view", app.next_text]
        if app.next_image:
            cmd.extend(["--image", app.next_image])
        os.execv(sys.executable, cmd)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    cfg = Config()

    if args.command is None:
        # No subcommand → interactive TUI
        _run_tui(cfg)
        return 0

    _add_stderr_handler(args.verbose)
    try:
        COMMANDS[args.command](args, cfg)
    except (ImageError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

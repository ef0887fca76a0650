"""Scene composer — attribute record (+ optional photo summary) -> Scene.

compose() is a pure function: the same record always yields the same
Scene, prim for prim. There is no randomness and no I/O.

Composition order:
    1. Floor (brown if requested, otherwise off-white)
    2. Back, left and right walls in the resolved wall color
    3. The room archetype's pieces, gated on the requested furniture
    4. Storage pieces (shelf) when shelves or cabinets were requested
    5. Ambient + directional light, default camera pose

Usage:
    scene = compose(extract("A rustic bedroom with a bed"))
    print(describe_scene(scene))
"""

from __future__ import annotations

import logging

from room_gen import concepts
from room_gen.archetypes import STORAGE_PIECES, Palette, archetype_for
from room_gen.extractor import AttributeRecord
from room_gen.image_summary import ImageSummary
from room_gen.primitives import (
    MID_GRAY,
    NEAR_BLACK,
    OFF_WHITE,
    WALL_BEIGE,
    WALL_BLUE,
    WALL_GRAY,
    WALL_GREEN,
    WALL_WHITE,
    WHITE,
    WOOD_BROWN,
    CameraPose,
    Color,
    Light,
    LightKind,
    Prim,
    Scene,
    rgb_hex,
)
from room_gen.room import room_shell

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Color resolution
# ---------------------------------------------------------------------------

# Scanned in order; every requested color overrides the one before it, so
# the last requested entry in each table wins.
WALL_COLORS: tuple[tuple[str, Color], ...] = (
    ("white", WALL_WHITE),
    ("beige", WALL_BEIGE),
    ("gray", WALL_GRAY),
    ("blue", WALL_BLUE),
    ("green", WALL_GREEN),
)

FURNITURE_COLORS: tuple[tuple[str, Color], ...] = (
    ("brown", WOOD_BROWN),
    ("black", NEAR_BLACK),
    ("white", OFF_WHITE),
    ("gray", MID_GRAY),
)

MODERN_STYLES = frozenset({"modern", "contemporary", "minimalist"})

DEFAULT_CAMERA = CameraPose(position=(5.0, 3.0, 5.0), look_at=(0.0, 1.0, 0.0))

LIGHTS = (
    Light(LightKind.AMBIENT, WHITE, 0.5),
    Light(LightKind.DIRECTIONAL, WHITE, 0.8, (5.0, 5.0, 5.0)),
)


def _scan(table: tuple[tuple[str, Color], ...], colors: tuple[str, ...], default: Color) -> Color:
    resolved = default
    for name, color in table:
        if name in colors:
            resolved = color
    return resolved


def floor_color(colors: tuple[str, ...]) -> Color:
    return WOOD_BROWN if "brown" in colors else OFF_WHITE


def wall_color(colors: tuple[str, ...]) -> Color:
    return _scan(WALL_COLORS, colors, WALL_WHITE)


def furniture_color(colors: tuple[str, ...]) -> Color:
    return _scan(FURNITURE_COLORS, colors, WOOD_BROWN)


def palette_for(record: AttributeRecord) -> Palette:
    """Resolve the room palette from a record's colors and styles."""
    return Palette(
        primary=furniture_color(record.color_scheme),
        is_modern=bool(MODERN_STYLES.intersection(record.style_preferences)),
    )


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def compose(record: AttributeRecord, image: ImageSummary | None = None) -> Scene:
    """Build the Scene for a record. Never fails.

    The photo summary is accepted but does not influence geometry or
    colors.
    """
    colors = record.color_scheme
    prims: list[Prim] = list(room_shell(floor_color(colors), wall_color(colors)))

    palette = palette_for(record)
    furniture = record.furniture_items
    arch = archetype_for(record.room_type)

    for piece in (*arch.pieces, *STORAGE_PIECES):
        if not piece.wanted(furniture):
            continue
        mod = concepts.get(piece.concept)
        for prim in mod.generate(piece.style(palette)):
            prims.append(prim.moved(piece.origin))

    log.debug(
        "Composed %s: %d prims (furniture=%s, image=%s)",
        arch.name,
        len(prims),
        list(furniture),
        image is not None,
    )
    return Scene(prims=tuple(prims), lights=LIGHTS, camera=DEFAULT_CAMERA)


# ---------------------------------------------------------------------------
# Scene description
# ---------------------------------------------------------------------------


def _fmt_vec(v: tuple[float, ...]) -> str:
    return "(" + ", ".join(f"{c:+.2f}" for c in v) + ")"


def describe_prim(prim: Prim) -> str:
    """One-line description of a prim."""
    size = " x ".join(f"{s:g}" for s in prim.size)
    line = (
        f"{prim.geom_type.value:<5} {size:<16} at {_fmt_vec(prim.pos)}"
        f"  {rgb_hex(prim.color)} r={prim.roughness:.1f}"
    )
    if any(prim.euler):
        line += f"  rot {_fmt_vec(prim.euler)}"
    return line


def describe_scene(scene: Scene) -> str:
    """Multi-line textual description of a full scene.

    Example output:
        Scene  6 prims, 2 lights
          [0] plane 10 x 10          at (+0.00, -0.10, +0.00)  #EEEEEE r=0.8  rot (-1.57, +0.00, +0.00)
          ...
          camera (+5.00, +3.00, +5.00) -> (+0.00, +1.00, +0.00)
    """
    lines = [f"Scene  {len(scene.prims)} prims, {len(scene.lights)} lights"]
    for i, prim in enumerate(scene.prims):
        lines.append(f"  [{i}] {describe_prim(prim)}")
    for light in scene.lights:
        lines.append(
            f"  light {light.kind.value} {rgb_hex(light.color)} x{light.intensity:g}"
        )
    cam = scene.camera
    lines.append(f"  camera {_fmt_vec(cam.position)} -> {_fmt_vec(cam.look_at)}")
    return "\n".join(lines)

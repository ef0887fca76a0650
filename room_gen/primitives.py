"""Primitive geometry types for room scenes.

A Scene is a flat list of primitives plus lights and a camera pose. The
viewer maps these onto whatever mesh API it renders with; nothing here
depends on a rendering library.

Coordinate convention:
    - Y-up, right-handed (floor is the XZ plane)
    - The open side of the room faces +Z, where the camera sits
    - Positions are the center of the shape

Size convention (full extents, not half-extents):
    - BOX:   (width, height, depth) along local (X, Y, Z)
    - PLANE: (width, height) in the local XY plane, normal along local +Z
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Color = tuple[float, float, float]
Vec3 = tuple[float, float, float]


class GeomType(Enum):
    """Shape kinds a scene can contain."""

    BOX = "box"
    PLANE = "plane"


class LightKind(Enum):
    AMBIENT = "ambient"
    DIRECTIONAL = "directional"


def hex_rgb(value: int) -> Color:
    """0xRRGGBB -> (r, g, b) floats in [0, 1]."""
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def rgb_hex(color: Color) -> str:
    """(r, g, b) floats -> '#RRGGBB'."""
    r, g, b = (int(round(c * 255)) for c in color)
    return f"#{r:02X}{g:02X}{b:02X}"


@dataclass(frozen=True)
class Prim:
    """A single primitive shape in world coordinates.

    Attributes:
        geom_type: BOX or PLANE
        size: Full extents, 3 floats for BOX, 2 for PLANE (see module doc)
        color: Material color (r, g, b), values in [0, 1]
        roughness: Material roughness in [0, 1]
        pos: Center position (x, y, z)
        euler: Rotation in radians (x, y, z), applied in XYZ order
    """

    geom_type: GeomType
    size: tuple[float, ...]
    color: Color
    roughness: float
    pos: Vec3 = (0.0, 0.0, 0.0)
    euler: Vec3 = (0.0, 0.0, 0.0)

    def moved(self, offset: Vec3) -> Prim:
        """Copy of this prim translated by offset."""
        x, y, z = self.pos
        dx, dy, dz = offset
        return Prim(
            self.geom_type,
            self.size,
            self.color,
            self.roughness,
            (x + dx, y + dy, z + dz),
            self.euler,
        )


@dataclass(frozen=True)
class Light:
    """A light descriptor. AMBIENT lights ignore pos."""

    kind: LightKind
    color: Color
    intensity: float
    pos: Vec3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class CameraPose:
    position: Vec3 = (5.0, 3.0, 5.0)
    look_at: Vec3 = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Scene:
    """Everything the viewer needs to draw one composition.

    Scenes are rebuilt wholesale on every composition; prims carry no
    identity across scenes.
    """

    prims: tuple[Prim, ...]
    lights: tuple[Light, ...] = ()
    camera: CameraPose = CameraPose()


# ---------------------------------------------------------------------------
# Material colors used by the composer and concepts
# ---------------------------------------------------------------------------

WOOD_BROWN = hex_rgb(0x8B4513)
NEAR_BLACK = hex_rgb(0x222222)
OFF_WHITE = hex_rgb(0xEEEEEE)
MID_GRAY = hex_rgb(0x888888)
LIGHT_GRAY = hex_rgb(0xDDDDDD)
WHITE = hex_rgb(0xFFFFFF)

WALL_WHITE = WHITE
WALL_BEIGE = hex_rgb(0xF5F5DC)
WALL_GRAY = hex_rgb(0xD3D3D3)
WALL_BLUE = hex_rgb(0xADD8E6)
WALL_GREEN = hex_rgb(0x90EE90)

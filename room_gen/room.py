"""Room shell — the floor and three walls every scene starts from.

The room is a fixed 10 x 10 square centered on the origin. There is no
front wall: the camera looks in through the open +Z side.

Usage:
    prims = room_shell(floor_color=OFF_WHITE, wall_color=WALL_WHITE)
"""

from __future__ import annotations

import math

from room_gen.primitives import Color, GeomType, Prim

# Shell geometry constants
ROOM_SIZE = 10.0
HALF_SIZE = ROOM_SIZE / 2
WALL_HEIGHT = 4.0
FLOOR_Y = -0.1  # Just below the furniture bases at y=0

FLOOR_ROUGHNESS = 0.8
WALL_ROUGHNESS = 0.9


def floor(color: Color) -> Prim:
    """The floor plane, rotated from the XY plane onto XZ."""
    return Prim(
        GeomType.PLANE,
        (ROOM_SIZE, ROOM_SIZE),
        color,
        FLOOR_ROUGHNESS,
        (0.0, FLOOR_Y, 0.0),
        (-math.pi / 2, 0.0, 0.0),
    )


def walls(color: Color) -> tuple[Prim, ...]:
    """Back, left and right walls, each facing into the room."""
    size = (ROOM_SIZE, WALL_HEIGHT)
    y = WALL_HEIGHT / 2
    return (
        Prim(GeomType.PLANE, size, color, WALL_ROUGHNESS, (0.0, y, -HALF_SIZE)),
        Prim(
            GeomType.PLANE,
            size,
            color,
            WALL_ROUGHNESS,
            (-HALF_SIZE, y, 0.0),
            (0.0, math.pi / 2, 0.0),
        ),
        Prim(
            GeomType.PLANE,
            size,
            color,
            WALL_ROUGHNESS,
            (HALF_SIZE, y, 0.0),
            (0.0, -math.pi / 2, 0.0),
        ),
    )


def room_shell(floor_color: Color, wall_color: Color) -> tuple[Prim, ...]:
    """Floor followed by the three walls."""
    return (floor(floor_color), *walls(wall_color))

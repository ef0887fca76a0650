"""Desk — a thin work surface on four legs.

The legs are centered on the floor plane, so the lower half of each leg
sits below the floor and only the upper half shows.

Parameters:
    width:           Desktop width (X)
    depth:           Desktop depth (Z)
    top_y:           Height of the desktop's center above the floor
    top_thickness:   Desktop slab thickness
    leg_width:       Leg cross-section width
    leg_length:      Leg length
    leg_inset_x:     Leg center distance from the side edges
    leg_inset_z:     Leg center distance from the front/back edges
    top_color:       RGB for the desktop
    leg_color:       RGB for the legs
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 2.5
    depth: float = 1.2
    top_y: float = 0.75
    top_thickness: float = 0.1
    leg_width: float = 0.1
    leg_length: float = 1.5
    leg_inset_x: float = 0.05
    leg_inset_z: float = 0.1
    top_color: tuple[float, float, float] = WOOD_BROWN
    leg_color: tuple[float, float, float] = WOOD_BROWN
    roughness: float = 0.6


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a desk (top + 4 legs, 5 prims)."""
    r = params.roughness
    top = Prim(
        GeomType.BOX,
        (params.width, params.top_thickness, params.depth),
        params.top_color,
        r,
        (0.0, params.top_y, 0.0),
    )

    lw = params.leg_width
    lx = params.width / 2 - params.leg_inset_x
    lz = params.depth / 2 - params.leg_inset_z
    legs = tuple(
        Prim(
            GeomType.BOX,
            (lw, params.leg_length, lw),
            params.leg_color,
            r,
            (x, 0.0, z),
        )
        # Back pair first, then front pair
        for z in (-lz, lz)
        for x in (-lx, lx)
    )
    return (top, *legs)


VARIATIONS: dict[str, Params] = {
    "classic": Params(),
}

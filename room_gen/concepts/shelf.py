"""Shelf — a solid shelving block with evenly spaced divider slats.

Parameters:
    width:              Overall width (X)
    height:             Overall height (Y)
    depth:              Overall depth (Z)
    n_dividers:         Number of horizontal divider slats
    divider_thickness:  Slat thickness
    color:              RGB for body and slats
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 2.0
    height: float = 2.0
    depth: float = 0.5
    n_dividers: int = 2
    divider_thickness: float = 0.05
    color: tuple[float, float, float] = WOOD_BROWN
    roughness: float = 0.7


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a shelf (body + n_dividers slats)."""
    w, h, d = params.width, params.height, params.depth
    c, r = params.color, params.roughness

    prims = [Prim(GeomType.BOX, (w, h, d), c, r, (0.0, h / 2, 0.0))]

    # Slat i sits in the middle of band i of n equal bands
    n = params.n_dividers
    for i in range(n):
        y = (i + 0.5) * h / n
        prims.append(
            Prim(GeomType.BOX, (w, params.divider_thickness, d), c, r, (0.0, y, 0.0))
        )
    return tuple(prims)


VARIATIONS: dict[str, Params] = {
    "bookcase": Params(),
}

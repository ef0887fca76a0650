"""Bed — a base block, an inset mattress on top, and a headboard.

Parameters:
    width:              Base width (X)
    length:             Base length (Z)
    base_height:        Base block height
    mattress_thickness: Mattress thickness
    mattress_inset:     Gap between mattress edge and base edge, per side
    headboard_height:   Headboard height, standing on top of the base
    headboard_thickness: Headboard thickness (Z)
    frame_color:        RGB for base and headboard
    mattress_color:     RGB for mattress
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WHITE, WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 3.0
    length: float = 4.0
    base_height: float = 0.4
    mattress_thickness: float = 0.3
    mattress_inset: float = 0.1
    headboard_height: float = 1.2
    headboard_thickness: float = 0.2
    frame_color: tuple[float, float, float] = WOOD_BROWN
    mattress_color: tuple[float, float, float] = WHITE
    frame_roughness: float = 0.8
    mattress_roughness: float = 0.7


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a bed (base + mattress + headboard, 3 prims)."""
    w, l, bh = params.width, params.length, params.base_height
    fc, fr = params.frame_color, params.frame_roughness
    inset = 2 * params.mattress_inset

    base = Prim(GeomType.BOX, (w, bh, l), fc, fr, (0.0, bh / 2, 0.0))

    mt = params.mattress_thickness
    mattress = Prim(
        GeomType.BOX,
        (w - inset, mt, l - inset),
        params.mattress_color,
        params.mattress_roughness,
        (0.0, bh + mt / 2, 0.0),
    )

    # Headboard at the -Z end, resting on the base
    hh, ht = params.headboard_height, params.headboard_thickness
    headboard = Prim(
        GeomType.BOX,
        (w, hh, ht),
        fc,
        fr,
        (0.0, bh + hh / 2, -l / 2 + ht / 2),
    )
    return (base, mattress, headboard)


VARIATIONS: dict[str, Params] = {
    "double": Params(),
}

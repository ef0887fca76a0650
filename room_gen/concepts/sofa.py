"""Sofa — a seat block with a backrest along its rear edge.

Parameters:
    width:          Overall width (X)
    seat_height:    Seat block height (Y)
    seat_depth:     Seat block depth (Z)
    back_height:    Backrest height
    back_depth:     Backrest thickness
    color:          RGB for seat and backrest
    roughness:      Material roughness
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 3.0
    seat_height: float = 0.8
    seat_depth: float = 1.2
    back_height: float = 0.8
    back_depth: float = 0.3
    color: tuple[float, float, float] = WOOD_BROWN
    roughness: float = 0.8


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a sofa (seat + backrest, 2 prims)."""
    w = params.width
    c = params.color
    r = params.roughness

    seat = Prim(
        GeomType.BOX,
        (w, params.seat_height, params.seat_depth),
        c,
        r,
        (0.0, params.seat_height / 2, 0.0),
    )
    # Backrest straddles the seat's rear edge, centered at seat-top height
    back = Prim(
        GeomType.BOX,
        (w, params.back_height, params.back_depth),
        c,
        r,
        (0.0, params.seat_height, -params.seat_depth / 2),
    )
    return (seat, back)


VARIATIONS: dict[str, Params] = {
    "three-seater": Params(),
}

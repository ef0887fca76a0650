"""Chair — a seat slab with an upright back along its rear edge.

Parameters:
    seat_width:     Seat width (X)
    seat_depth:     Seat depth (Z)
    seat_y:         Height of the seat slab's center above the floor
    seat_thickness: Seat slab thickness
    back_height:    Backrest height, starting at seat_y
    back_thickness: Backrest thickness (Z)
    color:          RGB for seat and back
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import NEAR_BLACK, WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    seat_width: float = 0.6
    seat_depth: float = 0.6
    seat_y: float = 0.5
    seat_thickness: float = 0.1
    back_height: float = 0.8
    back_thickness: float = 0.1
    color: tuple[float, float, float] = WOOD_BROWN
    roughness: float = 0.7


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a chair (seat + back, 2 prims)."""
    sw, sd = params.seat_width, params.seat_depth
    c, r = params.color, params.roughness

    seat = Prim(
        GeomType.BOX,
        (sw, params.seat_thickness, sd),
        c,
        r,
        (0.0, params.seat_y, 0.0),
    )
    back = Prim(
        GeomType.BOX,
        (sw, params.back_height, params.back_thickness),
        c,
        r,
        (0.0, params.seat_y + params.back_height / 2, -sd / 2),
    )
    return (seat, back)


VARIATIONS: dict[str, Params] = {
    "dining": Params(),
    "office": Params(seat_width=0.8, seat_depth=0.8, back_height=1.0, color=NEAR_BLACK),
}

"""Kitchen counter — a counter run with base and upper cabinets behind it.

Parameters:
    width:          Run length (X), shared by all three blocks
    counter_height: Counter block height
    counter_depth:  Counter block depth (Z)
    cabinet_depth:  Depth of base and upper cabinets
    cabinet_offset: How far behind the counter's center the cabinets sit
    base_height:    Base cabinet height (centered on the floor plane)
    upper_height:   Upper cabinet height
    upper_y:        Height of the upper cabinet's center
    counter_color:  RGB for the counter
    cabinet_color:  RGB for both cabinet blocks
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 5.0
    counter_height: float = 1.0
    counter_depth: float = 1.0
    cabinet_depth: float = 0.6
    cabinet_offset: float = 0.2
    base_height: float = 1.0
    upper_height: float = 1.5
    upper_y: float = 3.0
    counter_color: tuple[float, float, float] = WOOD_BROWN
    cabinet_color: tuple[float, float, float] = WOOD_BROWN
    counter_roughness: float = 0.6
    cabinet_roughness: float = 0.7


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a kitchen run (counter + base cabinets + upper cabinets, 3 prims)."""
    w = params.width
    ch = params.counter_height
    cd = params.cabinet_depth
    cz = -params.cabinet_offset
    cc, cr = params.cabinet_color, params.cabinet_roughness

    counter = Prim(
        GeomType.BOX,
        (w, ch, params.counter_depth),
        params.counter_color,
        params.counter_roughness,
        (0.0, ch / 2, 0.0),
    )
    base = Prim(GeomType.BOX, (w, params.base_height, cd), cc, cr, (0.0, 0.0, cz))
    upper = Prim(
        GeomType.BOX,
        (w, params.upper_height, cd),
        cc,
        cr,
        (0.0, params.upper_y, cz),
    )
    return (counter, base, upper)


VARIATIONS: dict[str, Params] = {
    "classic": Params(),
}

"""Table — a single slab standing in for a table silhouette.

Thin slabs read as table tops; a slab as thick as it is tall reads as a
solid block (coffee table, bedside table).

Parameters:
    width:       Top width (X)
    depth:       Top depth (Z)
    top_y:       Height of the slab's center above the floor
    thickness:   Slab thickness (Y)
    color:       RGB
    roughness:   Material roughness
"""

from dataclasses import dataclass
from functools import lru_cache

from room_gen.primitives import WOOD_BROWN, GeomType, Prim


@dataclass(frozen=True)
class Params:
    width: float = 2.0
    depth: float = 1.0
    top_y: float = 0.75
    thickness: float = 0.1
    color: tuple[float, float, float] = WOOD_BROWN
    roughness: float = 0.7


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a table (1 prim)."""
    return (
        Prim(
            GeomType.BOX,
            (params.width, params.thickness, params.depth),
            params.color,
            params.roughness,
            (0.0, params.top_y, 0.0),
        ),
    )


VARIATIONS: dict[str, Params] = {
    "dining": Params(),
    "coffee": Params(width=1.5, depth=1.0, top_y=0.2, thickness=0.4, roughness=0.6),
    "bedside": Params(width=0.8, depth=0.8, top_y=0.4, thickness=0.8),
}

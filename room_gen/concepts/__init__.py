"""Concept registry — auto-discovers furniture modules in this package.

=== HOW TO ADD A NEW CONCEPT ===

Each concept is a single Python file in this directory. It must define:

1. A frozen dataclass called `Params` with sensible defaults
2. A function `generate(params: Params) -> tuple[Prim, ...]`
   decorated with @lru_cache
3. A `VARIATIONS` dict of named Params that archetypes can start from

That's it. Drop the file here and it's auto-discovered.

Example (room_gen/concepts/crate.py):

    from dataclasses import dataclass
    from functools import lru_cache

    from room_gen.primitives import WOOD_BROWN, GeomType, Prim

    @dataclass(frozen=True)
    class Params:
        width: float = 0.8
        height: float = 0.6
        depth: float = 0.6
        color: tuple[float, float, float] = WOOD_BROWN
        roughness: float = 0.7

    @lru_cache(maxsize=128)
    def generate(params: Params = Params()) -> tuple[Prim, ...]:
        w, h, d = params.width, params.height, params.depth
        return (
            Prim(GeomType.BOX, (w, h, d), params.color, params.roughness,
                 (0, h / 2, 0)),
        )

=== CONVENTIONS ===

Coordinate system:
    - Y-up, origin on the floor under the object's anchor point
    - The object's back faces -Z (towards the back wall)

Sizes are full extents (width, height, depth), see room_gen.primitives.

Colors:
    - Params carry plain colors; archetypes decide them from the room
      palette, so generate() never looks at styles or color tags.
"""

from __future__ import annotations

import importlib
import pkgutil

_registry: dict[str, object] = {}


def _discover():
    """Auto-discover concept modules that define Params + generate."""
    for info in pkgutil.iter_modules(__path__):
        mod = importlib.import_module(f".{info.name}", __package__)
        if hasattr(mod, "generate") and hasattr(mod, "Params"):
            _registry[info.name] = mod


_discover()


def get(name: str):
    """Get a concept module by name. Raises KeyError if not found."""
    return _registry[name]


def list_concepts() -> list[str]:
    """List all available concept names."""
    return sorted(_registry.keys())

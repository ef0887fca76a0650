"""Room archetypes — which furniture each room type gets, and where.

Each archetype is a fixed list of pieces. A piece names a concept, the
floor point its origin sits on, how to derive its Params from the room
palette, and which furniture tags gate it.

Gating:
    - A piece with no tags is always placed
    - A tagged piece is placed when any of its tags was requested
    - When no furniture was requested at all, tagged pieces fall back to
      `when_unrequested` (room defaults on, storage extras off)

Usage:
    arch = archetype_for("bedroom")
    for piece in arch.pieces:
        if piece.wanted(record.furniture_items):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from room_gen.concepts import bed, chair, desk, kitchen_counter, shelf, sofa, table
from room_gen.primitives import (
    LIGHT_GRAY,
    MID_GRAY,
    WHITE,
    WOOD_BROWN,
    Color,
    Vec3,
)


@dataclass(frozen=True)
class Palette:
    """Room-wide material choices resolved from the attribute record.

    Attributes:
        primary: Main furniture color
        is_modern: Modern/contemporary/minimalist style requested
    """

    primary: Color = WOOD_BROWN
    is_modern: bool = False

    def accent(self, modern: Color) -> Color:
        """`modern` for modern rooms, plain wood otherwise."""
        return modern if self.is_modern else WOOD_BROWN


@dataclass(frozen=True)
class Piece:
    """A concept placed at a fixed spot in an archetype.

    Attributes:
        concept: Module name in room_gen/concepts/
        origin: World position of the concept's origin
        style: Palette -> concept Params
        tags: Furniture tags that request this piece (empty = always placed)
        when_unrequested: Placed when no furniture tags were given at all
    """

    concept: str
    origin: Vec3
    style: Callable[[Palette], object]
    tags: tuple[str, ...] = ()
    when_unrequested: bool = True

    def wanted(self, furniture: tuple[str, ...]) -> bool:
        if not self.tags:
            return True
        if not furniture:
            return self.when_unrequested
        return any(tag in furniture for tag in self.tags)


@dataclass(frozen=True)
class Archetype:
    """A room template: its name and its pieces, in placement order."""

    name: str
    pieces: tuple[Piece, ...] = ()


# ---------------------------------------------------------------------------
# Room definitions
# ---------------------------------------------------------------------------

GENERIC = "generic"

ARCHETYPES: dict[str, Archetype] = {
    "living room": Archetype(
        name="Living room",
        pieces=(
            Piece(
                "sofa",
                (0.0, 0.0, -3.0),
                lambda p: replace(sofa.VARIATIONS["three-seater"], color=p.primary),
                tags=("sofa",),
            ),
            Piece(
                "table",
                (0.0, 0.0, -1.5),
                lambda p: replace(table.VARIATIONS["coffee"], color=p.accent(LIGHT_GRAY)),
                tags=("table",),
            ),
        ),
    ),
    "bedroom": Archetype(
        name="Bedroom",
        pieces=(
            Piece(
                "bed",
                (0.0, 0.0, -2.0),
                lambda p: replace(bed.VARIATIONS["double"], frame_color=p.primary),
                tags=("bed",),
            ),
            Piece(
                "table",
                (-2.0, 0.0, -2.0),
                lambda p: replace(table.VARIATIONS["bedside"], color=p.primary),
                tags=("table",),
            ),
        ),
    ),
    "office": Archetype(
        name="Office",
        pieces=(
            Piece(
                "desk",
                (0.0, 0.0, -3.0),
                lambda p: replace(
                    desk.VARIATIONS["classic"],
                    top_color=p.accent(WHITE),
                    leg_color=p.accent(MID_GRAY),
                ),
                tags=("desk",),
            ),
            Piece(
                "chair",
                (0.0, 0.0, -2.0),
                lambda p: chair.VARIATIONS["office"],
                tags=("chair",),
            ),
        ),
    ),
    "kitchen": Archetype(
        name="Kitchen",
        pieces=(
            Piece(
                "kitchen_counter",
                (0.0, 0.0, -4.0),
                lambda p: replace(
                    kitchen_counter.VARIATIONS["classic"],
                    counter_color=p.accent(WHITE),
                    cabinet_color=p.primary,
                ),
            ),
        ),
    ),
    GENERIC: Archetype(
        name="Generic",
        pieces=(
            Piece(
                "table",
                (0.0, 0.0, -2.0),
                lambda p: replace(table.VARIATIONS["dining"], color=p.primary),
            ),
            Piece(
                "chair",
                (-1.0, 0.0, -2.0),
                lambda p: replace(chair.VARIATIONS["dining"], color=p.primary),
                tags=("chair",),
            ),
        ),
    ),
}

# Placed after the room's own pieces, whatever the room type
STORAGE_PIECES: tuple[Piece, ...] = (
    Piece(
        "shelf",
        (3.0, 0.0, -4.7),
        lambda p: replace(shelf.VARIATIONS["bookcase"], color=p.primary),
        tags=("shelf", "cabinet"),
        when_unrequested=False,
    ),
)


def archetype_for(room_type: str) -> Archetype:
    """Archetype for a room type; unknown types (bathroom, dining room) are generic."""
    return ARCHETYPES.get(room_type, ARCHETYPES[GENERIC])


def list_archetypes() -> list[str]:
    """List all archetype keys."""
    return sorted(ARCHETYPES.keys())

"""Attribute extraction — free-text room description -> AttributeRecord.

Keyword matching against static vocabularies. Every probe is a substring
test on the lower-cased text, so "bedrooms" matches "bedroom" and
"tablecloth" matches "table".

Usage:
    record = extract("A modern living room with a sofa, 15ft by 12ft")
    print(format_extracted_info(record))
    prompt = generate_prompt_from_info(record)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Vocabularies (declared order matters, see extract())
# ---------------------------------------------------------------------------

GENERIC_ROOM = "generic"

ROOM_TYPES = (
    "living room",
    "bedroom",
    "kitchen",
    "bathroom",
    "office",
    "dining room",
)

STYLES = (
    "modern",
    "contemporary",
    "minimalist",
    "traditional",
    "rustic",
    "industrial",
    "scandinavian",
)

COLORS = (
    "blue",
    "red",
    "green",
    "yellow",
    "white",
    "black",
    "gray",
    "brown",
    "beige",
)

FURNITURE = (
    "sofa",
    "table",
    "chair",
    "bed",
    "desk",
    "shelf",
    "cabinet",
    "wardrobe",
)

LIGHT_REQUEST = "Consider window placement and natural light"
STORAGE_REQUEST = "Optimize for storage and space efficiency"

# (trigger keywords, advisory string)
_REQUEST_TRIGGERS = (
    (("window", "natural light"), LIGHT_REQUEST),
    (("storage", "space saving"), STORAGE_REQUEST),
)

# Canned starting points offered next to the description input
EXAMPLE_DESCRIPTIONS = (
    "A modern living room with a sofa, coffee table, and large windows. "
    "About 15ft by 12ft with white walls and wooden floors.",
    "A minimalist bedroom with a queen-sized bed, bedside tables, and a wardrobe. "
    "I prefer neutral colors and clean lines.",
    "A small kitchen with an island, white cabinets, and stainless steel appliances. "
    "About 10ft by 8ft with gray countertops.",
)

PREVIEW_MIN_CHARS = 15

_UNIT = r"(?:feet|foot|ft|meters|meter|m)"
_NUM = r"(\d+(?:\.\d+)?)"
_DIMENSION_RE = re.compile(
    rf"{_NUM}\s*{_UNIT}\s*(?:by|x)\s*{_NUM}\s*{_UNIT}"
    rf"(?:\s*(?:by|x)\s*{_NUM}\s*{_UNIT})?",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Dimensions:
    """Room dimensions as written. Units are not converted."""

    width: float | None = None
    length: float | None = None
    height: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.width is None and self.length is None


@dataclass(frozen=True)
class AttributeRecord:
    """Structured attributes pulled out of a room description.

    Attributes:
        room_type: One of ROOM_TYPES, or GENERIC_ROOM when none matched
        dimensions: Parsed "W x L [x H]" phrase, empty if absent
        style_preferences: STYLES members found, in declared order
        color_scheme: COLORS members found, in declared order
        furniture_items: FURNITURE members found, in declared order
        special_requests: Fixed advisory strings triggered by keywords
    """

    room_type: str = GENERIC_ROOM
    dimensions: Dimensions = field(default_factory=Dimensions)
    style_preferences: tuple[str, ...] = ()
    color_scheme: tuple[str, ...] = ()
    furniture_items: tuple[str, ...] = ()
    special_requests: tuple[str, ...] = ()


def _matches(vocabulary: tuple[str, ...], lowered: str) -> tuple[str, ...]:
    return tuple(term for term in vocabulary if term in lowered)


def _room_type(lowered: str) -> str:
    # Later declared entries overwrite earlier ones: "office ... kitchen" and
    # "kitchen ... office" both resolve to "office".
    room_type = GENERIC_ROOM
    for candidate in ROOM_TYPES:
        if candidate in lowered:
            room_type = candidate
    return room_type


def _dimensions(text: str) -> Dimensions:
    match = _DIMENSION_RE.search(text)
    if match is None:
        return Dimensions()
    width, length, height = match.groups()
    return Dimensions(
        width=float(width),
        length=float(length),
        height=float(height) if height is not None else None,
    )


def extract(text: str) -> AttributeRecord:
    """Extract an AttributeRecord from free text. Never fails."""
    lowered = text.lower()
    requests = tuple(
        request
        for keywords, request in _REQUEST_TRIGGERS
        if any(k in lowered for k in keywords)
    )
    return AttributeRecord(
        room_type=_room_type(lowered),
        dimensions=_dimensions(text),
        style_preferences=_matches(STYLES, lowered),
        color_scheme=_matches(COLORS, lowered),
        furniture_items=_matches(FURNITURE, lowered),
        special_requests=requests,
    )


def preview(text: str) -> AttributeRecord | None:
    """Live-preview extraction: None until the text exceeds PREVIEW_MIN_CHARS."""
    if len(text) <= PREVIEW_MIN_CHARS:
        return None
    return extract(text)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _num(value: float) -> str:
    """15.0 -> '15', 10.5 -> '10.5'."""
    return f"{value:g}"


def format_extracted_info(record: AttributeRecord) -> str:
    """Human-readable multi-line summary of a record.

    Example:
        Room Type: Living room
        Dimensions: Width: 15ft, Length: 12ft
        Style Preferences: modern
        Furniture: sofa, table
    """
    room = record.room_type
    sections = [f"Room Type: {room[:1].upper()}{room[1:]}"]

    # Zero sizes are treated as absent
    dims = record.dimensions
    if dims.width or dims.length:
        parts = []
        if dims.width:
            parts.append(f"Width: {_num(dims.width)}ft")
        if dims.length:
            parts.append(f"Length: {_num(dims.length)}ft")
        if dims.height:
            parts.append(f"Height: {_num(dims.height)}ft")
        sections.append(f"Dimensions: {', '.join(parts)}")

    for label, values in (
        ("Style Preferences", record.style_preferences),
        ("Color Scheme", record.color_scheme),
        ("Furniture", record.furniture_items),
        ("Special Considerations", record.special_requests),
    ):
        if values:
            sections.append(f"{label}: {', '.join(values)}")

    return "\n".join(sections)


def generate_prompt_from_info(record: AttributeRecord) -> str:
    """Single-sentence generation prompt built from a record."""
    prompt = (
        f"Generate a 3D model of a {' '.join(record.style_preferences)} "
        f"{record.room_type}"
    )

    dims = record.dimensions
    if dims.width and dims.length:
        prompt += (
            f" with approximate dimensions of "
            f"{_num(dims.width)}ft x {_num(dims.length)}ft"
        )
        if dims.height:
            prompt += f" x {_num(dims.height)}ft"

    if record.color_scheme:
        prompt += f" featuring {', '.join(record.color_scheme)} colors"

    if record.furniture_items:
        prompt += f" with {', '.join(record.furniture_items)}"

    if record.special_requests:
        prompt += f". Special considerations: {', '.join(record.special_requests)}"

    return prompt

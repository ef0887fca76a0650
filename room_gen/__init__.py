"""Room scene generation from free-text descriptions and reference photos.

A description is reduced to an AttributeRecord by keyword matching, and
the record is composed into a Scene of box and plane primitives. Each
furniture concept (sofa, bed, desk, etc.) is a pure function: frozen
params -> primitives, cached via @lru_cache.

Usage:
    from room_gen import compose, describe_scene, extract

    record = extract("A modern living room with a gray sofa")
    scene = compose(record)
    print(describe_scene(scene))
"""

from room_gen.composer import compose, describe_scene
from room_gen.extractor import (
    AttributeRecord,
    Dimensions,
    extract,
    format_extracted_info,
    generate_prompt_from_info,
)
from room_gen.image_summary import (
    DecodeError,
    FileReadError,
    ImageError,
    ImageSummary,
    normalize,
    summarize,
)
from room_gen.primitives import CameraPose, GeomType, Light, LightKind, Prim, Scene

__all__ = [
    "AttributeRecord",
    "CameraPose",
    "DecodeError",
    "Dimensions",
    "FileReadError",
    "GeomType",
    "ImageError",
    "ImageSummary",
    "Light",
    "LightKind",
    "Prim",
    "Scene",
    "compose",
    "describe_scene",
    "extract",
    "format_extracted_info",
    "generate_prompt_from_info",
    "normalize",
    "summarize",
]

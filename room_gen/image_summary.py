"""Reference photo analysis — size, aspect ratio, dominant colors.

The photo is drawn into a small analysis buffer (100px wide, aspect
preserved), every 4th pixel is sampled, and colors are bucketed after
rounding each channel to the nearest multiple of 10. The most frequent
buckets become the dominant colors.

Decoding runs in a worker thread so the caller's event loop keeps going.

Usage:
    summary = await summarize(Path("room.jpg"))
    summary.dominant_colors     # ((120, 80, 40), (250, 250, 250), ...)
    jpeg = await normalize(summary.source_data, 512, 512)
"""

from __future__ import annotations

import asyncio
import io
import logging
import math
import os
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from config import ImageConfig

log = logging.getLogger(__name__)

ImageSource = bytes | str | os.PathLike


class ImageError(Exception):
    """Base class for reference photo failures."""


class FileReadError(ImageError):
    """The raw input could not be read at all."""


class DecodeError(ImageError):
    """The bytes are not a readable raster image."""


@dataclass(frozen=True)
class ImageSummary:
    """Summary of a decoded reference photo.

    Attributes:
        source_data: Encoded bytes exactly as read
        width: Natural width in pixels
        height: Natural height in pixels
        aspect_ratio: width / height
        dominant_colors: Up to top_k quantized (r, g, b) triples, most
            frequent first
    """

    source_data: bytes
    width: int
    height: int
    aspect_ratio: float
    dominant_colors: tuple[tuple[int, int, int], ...] = ()

    def css_colors(self) -> list[str]:
        return [f"rgb({r},{g},{b})" for r, g, b in self.dominant_colors]


# ---------------------------------------------------------------------------
# Reading and decoding
# ---------------------------------------------------------------------------


# Pillow modes holding more than 8 bits per sample
_HIGH_BIT_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


def _read(source: ImageSource) -> bytes:
    if isinstance(source, bytes):
        return source
    try:
        with open(source, "rb") as f:
            return f.read()
    except OSError as e:
        raise FileReadError(f"Failed to read file: {e}") from e


def _to_8bit(img: Image.Image) -> Image.Image:
    """Rescale 16-bit grayscale to 8-bit; convert() would clip instead."""
    samples = np.asarray(img).astype(np.int64)
    return Image.fromarray((np.clip(samples, 0, 0xFFFF) >> 8).astype(np.uint8))


def _decode(data: bytes) -> Image.Image:
    """Decode to an upright image with 8-bit samples."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        # Phone photos store rotation in EXIF; the pixels are sideways
        img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to load image: {e}") from e
    if img.width <= 0 or img.height <= 0:
        raise DecodeError("Failed to load image: empty raster")
    if img.mode in _HIGH_BIT_MODES:
        img = _to_8bit(img)
    return img


# ---------------------------------------------------------------------------
# Dominant colors
# ---------------------------------------------------------------------------


def quantize(values: np.ndarray, step: int = 10) -> np.ndarray:
    """Round each value half-up to the nearest multiple of step.

    Half-up on purpose: 255 -> 260, 5 -> 10.
    """
    return (np.floor(values.astype(np.float64) / step + 0.5) * step).astype(np.int64)


def dominant_colors(
    img: Image.Image, cfg: ImageConfig | None = None
) -> tuple[tuple[int, int, int], ...]:
    """Top-k quantized colors of an image, most frequent first.

    Ties keep the order in which the buckets were first seen while
    scanning the analysis buffer row by row.
    """
    cfg = cfg or ImageConfig()
    aspect = img.width / img.height
    analyze_w = cfg.analyze_width
    analyze_h = math.floor(analyze_w / aspect)
    if analyze_h <= 0:
        return ()

    buffer = img.convert("RGBA").resize(
        (analyze_w, analyze_h), Image.Resampling.BILINEAR
    )
    pixels = np.asarray(buffer, dtype=np.uint8).reshape(-1, 4)

    sampled = pixels[:: cfg.sample_every]
    opaque = sampled[sampled[:, 3] >= cfg.alpha_threshold]
    if len(opaque) == 0:
        return ()

    keys = quantize(opaque[:, :3], cfg.quantize_step)
    buckets, first_seen, counts = np.unique(
        keys, axis=0, return_index=True, return_counts=True
    )
    # Primary key: count descending. Secondary: first occurrence.
    order = np.lexsort((first_seen, -counts))[: cfg.top_k]
    return tuple(tuple(int(c) for c in buckets[i]) for i in order)


def _summarize_sync(source: ImageSource, cfg: ImageConfig) -> ImageSummary:
    data = _read(source)
    img = _decode(data)
    colors = dominant_colors(img, cfg)
    summary = ImageSummary(
        source_data=data,
        width=img.width,
        height=img.height,
        aspect_ratio=img.width / img.height,
        dominant_colors=colors,
    )
    log.debug(
        "Summarized %dx%d image, %d dominant colors",
        summary.width,
        summary.height,
        len(colors),
    )
    return summary


async def summarize(
    source: ImageSource, cfg: ImageConfig | None = None
) -> ImageSummary:
    """Decode an image and summarize it.

    Raises:
        FileReadError: source is a path that cannot be read
        DecodeError: the bytes are not a readable raster image
    """
    return await asyncio.to_thread(_summarize_sync, source, cfg or ImageConfig())


# ---------------------------------------------------------------------------
# Letterbox normalization
# ---------------------------------------------------------------------------


def letterbox_box(
    src_w: int, src_h: int, target_w: int, target_h: int
) -> tuple[float, float, float, float]:
    """Where a src_w x src_h image lands on a target canvas.

    Landscape sources fit the width and are centered vertically; portrait
    and square sources fit the height and are centered horizontally.

    Returns:
        (offset_x, offset_y, draw_w, draw_h)
    """
    aspect = src_w / src_h
    if aspect > 1:
        draw_w = float(target_w)
        draw_h = target_w / aspect
        return (0.0, (target_h - draw_h) / 2, draw_w, draw_h)
    draw_h = float(target_h)
    draw_w = target_h * aspect
    return ((target_w - draw_w) / 2, 0.0, draw_w, draw_h)


def _normalize_sync(
    source: ImageSource, target_w: int, target_h: int, cfg: ImageConfig
) -> bytes:
    img = _decode(_read(source))
    x, y, w, h = letterbox_box(img.width, img.height, target_w, target_h)

    canvas = Image.new("RGB", (target_w, target_h), "white")
    draw_size = (max(1, round(w)), max(1, round(h)))
    scaled = img.convert("RGBA").resize(draw_size, Image.Resampling.BILINEAR)
    canvas.paste(scaled, (round(x), round(y)), mask=scaled)

    out = io.BytesIO()
    canvas.save(out, format="JPEG", quality=cfg.jpeg_quality)
    return out.getvalue()


async def normalize(
    source: ImageSource,
    target_w: int = 512,
    target_h: int = 512,
    cfg: ImageConfig | None = None,
) -> bytes:
    """Letterbox an image onto a white target_w x target_h canvas, as JPEG.

    Raises the same errors as summarize().
    """
    return await asyncio.to_thread(
        _normalize_sync, source, target_w, target_h, cfg or ImageConfig()
    )

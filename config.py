"""
Centralized configuration for the interior visualizer.

All tunables in one place. Tests use Config.for_tests() to drop the
artificial generation delay and shrink renders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass
class ImageConfig:
    """Reference photo analysis and normalization."""

    analyze_width: int = 100  # Analysis buffer width (height keeps aspect)
    sample_every: int = 4  # Sample every Nth pixel of the buffer
    alpha_threshold: int = 128  # Skip samples more transparent than this
    quantize_step: int = 10  # Channel rounding step for color buckets
    top_k: int = 5  # Dominant colors to keep

    normalize_width: int = 512
    normalize_height: int = 512
    jpeg_quality: int = 90


@dataclass
class SessionConfig:
    """Generation session behavior."""

    generate_latency_s: float = 3.0  # Simulated generation time (0 = none)


@dataclass
class ViewerConfig:
    """Offscreen render and orbit camera settings."""

    width: int = 800
    height: int = 600
    fovy: float = 75.0  # Vertical field of view (degrees)
    background: tuple[float, float, float] = (0.973, 0.976, 0.980)  # #F8F9FA

    # Orbit clamps
    min_distance: float = 3.0
    max_distance: float = 10.0
    min_polar: float = 0.0  # Radians from straight up
    max_polar: float = math.pi / 2  # Never look from below the floor

    zoom_step: float = 0.8  # Distance multiplier per zoom_in()
    orbit_step: float = math.radians(10)  # Per keypress
    pan_step: float = 0.25  # Meters per keypress


@dataclass
class Config:
    """Complete application configuration."""

    image: ImageConfig = field(default_factory=ImageConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)

    @classmethod
    def for_tests(cls) -> Config:
        """No artificial delay, small renders."""
        return cls(
            session=SessionConfig(generate_latency_s=0.0),
            viewer=ViewerConfig(width=160, height=120),
        )

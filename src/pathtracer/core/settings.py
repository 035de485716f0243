"""Render settings.

All tunables of a render in one validated dataclass. The core takes these as
plain values; parsing text into them is the CLI's job.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of a single render.

    Attributes:
        width: Image width in pixels.
        aspect_ratio: Width divided by height; the height is derived.
        samples_per_pixel: Independent samples averaged per pixel.
        max_depth: Maximum number of scattering bounces per path.
        seed: Base seed for reproducible renders, or None to draw one from
            OS entropy.
        gamma: Display gamma. 2.0 applies a square root, 1.0 leaves the
            image linear.
        rows_per_batch: Rows rendered per kernel launch; progress is
            reported between batches.
    """

    width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    seed: int | None = None
    gamma: float = 2.0
    rows_per_batch: int = 16

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError(f"Image width must be at least 1, got {self.width}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.height < 1:
            raise ValueError(
                f"Aspect ratio {self.aspect_ratio} gives an empty image at width {self.width}"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(f"Samples per pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 1:
            raise ValueError(f"Max depth must be at least 1, got {self.max_depth}")
        if self.gamma <= 0.0:
            raise ValueError(f"Gamma must be positive, got {self.gamma}")
        if self.rows_per_batch < 1:
            raise ValueError(f"Rows per batch must be at least 1, got {self.rows_per_batch}")

    @property
    def height(self) -> int:
        """Image height in pixels, int(width / aspect_ratio)."""
        return int(self.width / self.aspect_ratio)

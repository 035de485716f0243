"""Image export utilities for rendered images.

This module writes the 8-bit RGB arrays produced by the renderer to disk.

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and anything else Pillow recognises from the file extension

The plain PPM layout is::

    P3
    <width> <height>
    255
    <r> <g> <b>        one line per pixel, top row first

Example:
    >>> from src.pathtracer.preview.export import save_image
    >>>
    >>> image = renderer.render(scene, camera)
    >>> save_image(image, "output.ppm")
    >>> save_image(image, "output.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Maximum channel value written to the PPM header
PPM_MAX_VALUE = 255


def _check_image(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    return np.asarray(image, dtype=np.uint8)


def write_ppm(image: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an image to a text stream in plain PPM (P3) format.

    Args:
        image: (H, W, 3) uint8 array, row 0 at the top.
        stream: Writable text stream.

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    image = _check_image(image)
    height, width, _ = image.shape

    stream.write(f"P3\n{width} {height}\n{PPM_MAX_VALUE}\n")
    for r, g, b in image.reshape(-1, 3):
        stream.write(f"{r} {g} {b}\n")


def save_ppm(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an image as a plain PPM file.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f)


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an image as a PNG file using Pillow.

    Args:
        image: (H, W, 3) uint8 array, row 0 at the top.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(_check_image(image))
    pil_image.save(filepath)


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an image, choosing the format from the file extension.

    ``.ppm`` files are written as plain-text P3. Any other extension is
    handed to Pillow; a file with no extension is written as PPM.

    Args:
        image: (H, W, 3) uint8 array, row 0 at the top.
        filepath: Output file path.

    Raises:
        OSError: If the file cannot be written.
        ValueError: If Pillow does not know the extension.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix in ("", ".ppm"):
        save_ppm(image, filepath)
    else:
        save_png(image, filepath)


def load_image(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load an image file (any Pillow format, including PPM) as (H, W, 3) uint8."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
) -> float:
    """Compute root mean squared error between two 8-bit images.

    Args:
        image_a: First image array (H, W, 3).
        image_b: Second image array (H, W, 3).

    Returns:
        RMSE in byte units.

    Raises:
        ValueError: If the images have different shapes.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Shape mismatch: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

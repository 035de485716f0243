"""Tests for image export.

Tests cover:
- Exact plain PPM output
- Format choice by file extension
- Files readable back through Pillow
- Shape validation
- RMSE computation
"""

import io

import numpy as np
import pytest
from PIL import Image as PILImage


@pytest.fixture
def small_image():
    """A 2 x 3 image with distinct pixels."""
    return np.array(
        [
            [[255, 0, 0], [0, 255, 0], [0, 0, 255]],
            [[0, 0, 0], [128, 64, 32], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )


class TestWritePpm:
    """Tests for plain PPM output."""

    def test_exact_text(self, small_image):
        from src.pathtracer.preview.export import write_ppm

        stream = io.StringIO()
        write_ppm(small_image, stream)

        assert stream.getvalue() == (
            "P3\n"
            "3 2\n"
            "255\n"
            "255 0 0\n"
            "0 255 0\n"
            "0 0 255\n"
            "0 0 0\n"
            "128 64 32\n"
            "255 255 255\n"
        )

    def test_one_line_per_pixel(self):
        from src.pathtracer.preview.export import write_ppm

        image = np.zeros((4, 5, 3), dtype=np.uint8)
        stream = io.StringIO()
        write_ppm(image, stream)

        lines = stream.getvalue().splitlines()
        assert lines[:3] == ["P3", "5 4", "255"]
        assert len(lines) == 3 + 4 * 5

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 4), (4, 4, 1)])
    def test_bad_shape_raises(self, shape):
        from src.pathtracer.preview.export import write_ppm

        with pytest.raises(ValueError, match="Expected an"):
            write_ppm(np.zeros(shape, dtype=np.uint8), io.StringIO())


class TestSaveImage:
    """Tests for saving and loading files."""

    def test_ppm_file(self, small_image, tmp_path):
        from src.pathtracer.preview.export import load_image, save_image

        filepath = tmp_path / "out.ppm"
        save_image(small_image, filepath)

        assert filepath.read_text(encoding="ascii").startswith("P3\n3 2\n255\n")
        np.testing.assert_array_equal(load_image(filepath), small_image)

    def test_no_extension_writes_ppm(self, small_image, tmp_path):
        from src.pathtracer.preview.export import save_image

        filepath = tmp_path / "out"
        save_image(small_image, filepath)

        assert filepath.read_text(encoding="ascii").startswith("P3\n")

    def test_png_file(self, small_image, tmp_path):
        from src.pathtracer.preview.export import load_image, save_image

        filepath = tmp_path / "out.png"
        save_image(small_image, str(filepath))

        with PILImage.open(filepath) as img:
            assert img.format == "PNG"
            assert img.size == (3, 2)
            assert img.mode == "RGB"
        np.testing.assert_array_equal(load_image(filepath), small_image)

    def test_unknown_extension_raises(self, small_image, tmp_path):
        from src.pathtracer.preview.export import save_image

        with pytest.raises(ValueError):
            save_image(small_image, tmp_path / "out.notaformat")

    def test_missing_directory_raises(self, small_image, tmp_path):
        from src.pathtracer.preview.export import save_image

        with pytest.raises(OSError):
            save_image(small_image, tmp_path / "missing" / "out.ppm")


class TestComputeRmse:
    """Tests for compute_rmse."""

    def test_identical_images(self, small_image):
        from src.pathtracer.preview.export import compute_rmse

        assert compute_rmse(small_image, small_image) == 0.0

    def test_constant_offset(self):
        from src.pathtracer.preview.export import compute_rmse

        image_a = np.full((4, 4, 3), 10, dtype=np.uint8)
        image_b = np.full((4, 4, 3), 13, dtype=np.uint8)

        # Computed in floating point, no uint8 wraparound
        assert np.isclose(compute_rmse(image_a, image_b), 3.0)
        assert np.isclose(compute_rmse(image_b, image_a), 3.0)

    def test_shape_mismatch_raises(self):
        from src.pathtracer.preview.export import compute_rmse

        with pytest.raises(ValueError, match="Shape mismatch"):
            compute_rmse(np.zeros((2, 2, 3), dtype=np.uint8), np.zeros((3, 2, 3), dtype=np.uint8))

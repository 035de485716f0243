"""Unit tests for axis-aligned bounding boxes.

Tests cover:
- Host-side validation, union and containment
- Device-side slab test, including axis-parallel rays
- Module import in a fresh interpreter
"""

import subprocess
import sys
from pathlib import Path

import pytest
import taichi as ti

REPO_ROOT = Path(__file__).resolve().parent.parent


class TestModuleImport:
    """Tests that the Taichi dataclass modules load in a fresh interpreter."""

    @pytest.mark.parametrize(
        "module",
        [
            "src.pathtracer.geometry",
            "src.pathtracer.geometry.aabb",
            "src.pathtracer.scene",
            "src.pathtracer.core.renderer",
            "src.pathtracer.cli",
        ],
    )
    def test_import(self, module):
        result = subprocess.run(
            [sys.executable, "-c", f"import {module}"],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
            timeout=300,
        )
        assert result.returncode == 0, result.stderr


class TestHostAABB:
    """Tests for the host AABB dataclass."""

    def test_invalid_bounds_raise(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.geometry.aabb import AABB

        with pytest.raises(ValueError, match="minimum.y"):
            AABB(WorldPoint(0.0, 2.0, 0.0), WorldPoint(1.0, 1.0, 1.0))

    def test_surrounding_takes_min_and_max(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.geometry.aabb import AABB

        a = AABB(WorldPoint(-1.0, 0.0, 2.0), WorldPoint(1.0, 1.0, 3.0))
        b = AABB(WorldPoint(0.0, -2.0, -1.0), WorldPoint(4.0, 0.5, 2.5))
        box = a.surrounding(b)
        assert box.minimum == WorldPoint(-1.0, -2.0, -1.0)
        assert box.maximum == WorldPoint(4.0, 1.0, 3.0)
        assert b.surrounding(a) == box

    def test_contains(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.geometry.aabb import AABB

        box = AABB(WorldPoint(0.0, 0.0, 0.0), WorldPoint(1.0, 1.0, 1.0))
        assert box.contains(WorldPoint(0.5, 0.5, 0.5))
        assert box.contains(WorldPoint(1.0, 0.0, 1.0))
        assert not box.contains(WorldPoint(1.5, 0.5, 0.5))


class TestSlabTest:
    """Tests for hit_aabb."""

    @staticmethod
    def _run(origin, direction, t_min=0.001, t_max=1e10):
        from src.pathtracer.core.ray import Ray, vec3
        from src.pathtracer.geometry.aabb import Aabb, hit_aabb

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            box = Aabb(minimum=vec3(-1.0, -1.0, -1.0), maximum=vec3(1.0, 1.0, 1.0))
            ray = Ray(
                origin=vec3(origin[0], origin[1], origin[2]),
                direction=vec3(direction[0], direction[1], direction[2]),
                time=0.0,
            )
            result[None] = hit_aabb(box, ray, t_min, t_max)

        test_kernel()
        return result[None]

    def test_ray_through_box(self):
        assert self._run((0.0, 0.0, 5.0), (0.0, 0.1, -1.0)) == 1

    def test_ray_missing_box(self):
        assert self._run((0.0, 3.0, 5.0), (0.0, 0.0, -1.0)) == 0

    def test_box_behind_ray(self):
        assert self._run((0.0, 0.0, 5.0), (0.0, 0.0, 1.0)) == 0

    def test_negative_direction_components(self):
        assert self._run((5.0, 5.0, 5.0), (-1.0, -1.0, -1.0)) == 1

    def test_axis_parallel_inside_slab(self):
        """Test a ray with zero x and y components inside those slabs."""
        assert self._run((0.5, 0.5, 5.0), (0.0, 0.0, -1.0)) == 1

    def test_axis_parallel_outside_slab(self):
        """Test a ray with a zero x component outside the x slab."""
        assert self._run((2.0, 0.0, 5.0), (0.0, 0.0, -1.0)) == 0

    def test_interval_limits_hit(self):
        """Test that a box beyond t_max is rejected."""
        assert self._run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_max=3.0) == 0

    def test_ray_along_z_through_unit_box(self):
        """Test a ray from (0, 0, -5) along +z entering the box at t = 4."""
        assert self._run((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)) == 1
        assert self._run((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), t_min=3.9, t_max=4.1) == 1

    def test_parallel_ray_beside_unit_box(self):
        """Test a +z ray at x = 5, parallel to the box, misses it."""
        assert self._run((5.0, 0.0, -5.0), (0.0, 0.0, 1.0)) == 0

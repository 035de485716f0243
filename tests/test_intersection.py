"""Unit tests for scene-level intersection and material dispatch.

Tests cover:
- Nearest hit across several primitives
- Ties go to the first inserted primitive
- material_id is the primitive's index
- Empty scenes always miss
- Moving spheres are hit where they are at the ray's time
- Scatter dispatch by material type
"""

import numpy as np
import taichi as ti


def _gray():
    from src.pathtracer.materials.material import Lambertian

    return Lambertian((0.5, 0.5, 0.5))


def _trace(scene, origin, direction, time=0.0, t_min=0.001, t_max=1e10):
    """Run SceneData.hit for one ray and return (hit, t, material_id)."""
    from src.pathtracer.core.ray import Ray, vec3
    from src.pathtracer.scene.intersection import SceneData

    data = SceneData(scene)
    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(world: ti.template()):
        # Outer single-iteration loop keeps the primitive scan serial
        for _ in range(1):
            ray = Ray(
                origin=vec3(origin[0], origin[1], origin[2]),
                direction=vec3(direction[0], direction[1], direction[2]),
                time=time,
            )
            rec = world.hit(ray, t_min, t_max)
            hit[None] = rec.hit
            t_val[None] = rec.t
            material_id[None] = rec.material_id

    test_kernel(data)
    return hit[None], t_val[None], material_id[None]


class TestSceneData:
    """Tests for the device-side scene upload."""

    def test_len(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.scene.intersection import SceneData
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, 0.0), 1.0, _gray())
        assert len(SceneData(scene)) == 1
        assert len(SceneData(Scene())) == 0

    def test_fields_follow_scene_order(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.materials.material import Dielectric, MaterialType, Metal
        from src.pathtracer.scene.intersection import SceneData
        from src.pathtracer.scene.scene import PrimitiveType, Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.2))
        scene.add_moving_sphere(
            WorldPoint(1.0, 0.0, 0.0), WorldPoint(1.0, 1.0, 0.0), 0.0, 1.0, 0.5, Dielectric(1.5)
        )
        data = SceneData(scene)

        assert data.kind.to_numpy().tolist() == [PrimitiveType.SPHERE, PrimitiveType.MOVING_SPHERE]
        assert data.material_type.to_numpy().tolist() == [
            MaterialType.METAL,
            MaterialType.DIELECTRIC,
        ]
        np.testing.assert_allclose(data.radius.to_numpy(), [1.0, 0.5])
        np.testing.assert_allclose(data.albedo.to_numpy()[0], [0.7, 0.6, 0.5], rtol=1e-6)
        np.testing.assert_allclose(data.fuzz.to_numpy()[0], 0.2, rtol=1e-6)
        np.testing.assert_allclose(data.ior.to_numpy()[1], 1.5)
        np.testing.assert_allclose(data.center1.to_numpy()[1], [1.0, 1.0, 0.0])


class TestNearestHit:
    """Tests for SceneData.hit."""

    def test_empty_scene_misses(self):
        from src.pathtracer.scene.scene import Scene

        hit, _, _ = _trace(Scene(), (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_nearest_wins_regardless_of_order(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, -10.0), 1.0, _gray())
        scene.add_sphere(WorldPoint(0.0, 0.0, -3.0), 1.0, _gray())
        scene.add_sphere(WorldPoint(0.0, 0.0, -6.0), 1.0, _gray())

        hit, t, material_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert material_id == 1

    def test_tie_goes_to_first_inserted(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.materials.material import Metal
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, -5.0), 1.0, _gray())
        scene.add_sphere(WorldPoint(0.0, 0.0, -5.0), 1.0, Metal((0.9, 0.9, 0.9)))

        hit, t, material_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert material_id == 0

    def test_t_max_excludes_far_primitives(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, -10.0), 1.0, _gray())

        hit, _, _ = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=5.0)
        assert hit == 0

    def test_moving_sphere_uses_ray_time(self):
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_moving_sphere(
            WorldPoint(0.0, 0.0, -5.0), WorldPoint(0.0, 3.0, -5.0), 0.0, 1.0, 1.0, _gray()
        )

        assert _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), time=0.0)[0] == 1
        assert _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), time=1.0)[0] == 0
        assert _trace(scene, (0.0, 3.0, 0.0), (0.0, 0.0, -1.0), time=1.0)[0] == 1


class TestScatterDispatch:
    """Tests for SceneData.scatter."""

    @staticmethod
    def _scatter(material):
        """Hit a single sphere of the given material and scatter once."""
        from src.pathtracer.core.ray import Ray, vec3
        from src.pathtracer.core.rng import seed_sample
        from src.pathtracer.core.vector import WorldPoint
        from src.pathtracer.scene.intersection import SceneData
        from src.pathtracer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere(WorldPoint(0.0, 0.0, -5.0), 1.0, material)
        data = SceneData(scene)

        did = ti.field(dtype=ti.i32, shape=())
        attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())
        origin = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(world: ti.template()):
            for _ in range(1):
                ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0), time=0.0)
                rec = world.hit(ray, 0.001, 1e10)
                d, a, s, _st = world.scatter(ray, rec, seed_sample(ti.u32(3), 0, 0, 0))
                did[None] = d
                attenuation[None] = a
                direction[None] = s.direction
                origin[None] = s.origin

        test_kernel(data)
        return did[None], attenuation.to_numpy(), direction.to_numpy(), origin.to_numpy()

    def test_lambertian(self):
        from src.pathtracer.materials.material import Lambertian

        did, attenuation, direction, origin = self._scatter(Lambertian((0.1, 0.2, 0.3)))
        assert did == 1
        np.testing.assert_allclose(attenuation, [0.1, 0.2, 0.3], rtol=1e-6)
        np.testing.assert_allclose(origin, [0.0, 0.0, -4.0], atol=1e-5)
        # Scattered back toward the camera side of the sphere
        assert direction[2] >= -1e-6

    def test_metal_mirror(self):
        from src.pathtracer.materials.material import Metal

        did, attenuation, direction, _ = self._scatter(Metal((0.8, 0.8, 0.8), 0.0))
        assert did == 1
        np.testing.assert_allclose(attenuation, [0.8, 0.8, 0.8], rtol=1e-6)
        np.testing.assert_allclose(direction, [0.0, 0.0, 1.0], atol=1e-5)

    def test_dielectric(self):
        from src.pathtracer.materials.material import Dielectric

        did, attenuation, _, _ = self._scatter(Dielectric(1.5))
        assert did == 1
        np.testing.assert_allclose(attenuation, [1.0, 1.0, 1.0])

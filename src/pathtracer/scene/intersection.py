"""Scene-level primitive intersection and material dispatch.

SceneData is the device-side copy of a :class:`Scene`. It stores every
primitive in Structure-of-Arrays Taichi fields, one slot per primitive in
scene order, with the primitive kind and its material parameters alongside
the geometry. Kernels receive it as a ``ti.template()`` argument and call
:meth:`SceneData.hit` and :meth:`SceneData.scatter`.

The fields are written once at construction and only read by kernels
afterwards.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.presets import create_demo_scene
    >>> scene, _ = create_demo_scene()
    >>> data = SceneData(scene)
    >>> @ti.kernel
    ... def first_material(world: ti.template()) -> ti.i32:
    ...     ray = Ray(origin=vec3(0, 0, 0), direction=vec3(0, 0, -1), time=0.0)
    ...     return world.hit(ray, 0.001, 1e10).material_id
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.moving_sphere import MovingSphere, hit_moving_sphere
from src.pathtracer.geometry.sphere import HitRecord, hit_sphere_at, make_miss_record
from src.pathtracer.materials.dielectric import scatter_dielectric
from src.pathtracer.materials.lambertian import scatter_lambertian
from src.pathtracer.materials.material import Dielectric, Lambertian, MaterialType, Metal
from src.pathtracer.materials.metal import scatter_metal
from src.pathtracer.scene.scene import MovingSphereInfo, PrimitiveType, Scene

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

_SPHERE = int(PrimitiveType.SPHERE)
_LAMBERTIAN = int(MaterialType.LAMBERTIAN)
_METAL = int(MaterialType.METAL)


@ti.data_oriented
class SceneData:
    """Immutable device-side copy of a scene.

    Attributes:
        count: Number of primitives.
        kind: PrimitiveType per primitive.
        center0: Center (static spheres) or center at time0 (moving spheres).
        center1: Center at time1; equals center0 for static spheres.
        time0: Start of the motion interval.
        time1: End of the motion interval.
        radius: Sphere radius.
        material_type: MaterialType per primitive.
        albedo: Lambertian/metal reflectance.
        fuzz: Metal fuzz.
        ior: Dielectric index of refraction.
    """

    def __init__(self, scene: Scene) -> None:
        self.count = len(scene)
        # Taichi fields cannot be empty; an empty scene keeps one unused slot
        capacity = max(self.count, 1)

        kind = np.zeros(capacity, dtype=np.int32)
        center0 = np.zeros((capacity, 3), dtype=np.float32)
        center1 = np.zeros((capacity, 3), dtype=np.float32)
        time0 = np.zeros(capacity, dtype=np.float32)
        time1 = np.ones(capacity, dtype=np.float32)
        radius = np.ones(capacity, dtype=np.float32)
        material_type = np.zeros(capacity, dtype=np.int32)
        albedo = np.ones((capacity, 3), dtype=np.float32)
        fuzz = np.zeros(capacity, dtype=np.float32)
        ior = np.ones(capacity, dtype=np.float32)

        for i, primitive in enumerate(scene):
            kind[i] = int(primitive.primitive_type)
            radius[i] = primitive.radius
            if isinstance(primitive, MovingSphereInfo):
                center0[i] = primitive.center0.to_tuple()
                center1[i] = primitive.center1.to_tuple()
                time0[i] = primitive.time0
                time1[i] = primitive.time1
            else:
                center0[i] = primitive.center.to_tuple()
                center1[i] = primitive.center.to_tuple()

            material = primitive.material
            material_type[i] = int(material.material_type)
            if isinstance(material, (Lambertian, Metal)):
                albedo[i] = material.albedo
            if isinstance(material, Metal):
                fuzz[i] = material.fuzz
            if isinstance(material, Dielectric):
                ior[i] = material.index_of_refraction

        self.kind = ti.field(dtype=ti.i32, shape=capacity)
        self.center0 = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.center1 = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.time0 = ti.field(dtype=ti.f32, shape=capacity)
        self.time1 = ti.field(dtype=ti.f32, shape=capacity)
        self.radius = ti.field(dtype=ti.f32, shape=capacity)
        self.material_type = ti.field(dtype=ti.i32, shape=capacity)
        self.albedo = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.fuzz = ti.field(dtype=ti.f32, shape=capacity)
        self.ior = ti.field(dtype=ti.f32, shape=capacity)

        self.kind.from_numpy(kind)
        self.center0.from_numpy(center0)
        self.center1.from_numpy(center1)
        self.time0.from_numpy(time0)
        self.time1.from_numpy(time1)
        self.radius.from_numpy(radius)
        self.material_type.from_numpy(material_type)
        self.albedo.from_numpy(albedo)
        self.fuzz.from_numpy(fuzz)
        self.ior.from_numpy(ior)

    def __len__(self) -> int:
        return self.count

    @ti.func
    def hit_primitive(self, i: ti.i32, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
        """Intersect one primitive, dispatching on its kind."""
        rec = make_miss_record()
        if self.kind[i] == _SPHERE:
            rec = hit_sphere_at(ray, self.center0[i], self.radius[i], t_min, t_max)
        else:
            moving = MovingSphere(
                center0=self.center0[i],
                center1=self.center1[i],
                time0=self.time0[i],
                time1=self.time1[i],
                radius=self.radius[i],
            )
            rec = hit_moving_sphere(ray, moving, t_min, t_max)
        return rec

    @ti.func
    def hit(self, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
        """Find the nearest hit along the ray.

        Primitives are scanned in scene order. A later primitive replaces the
        current best only if its t is strictly smaller, so ties go to the
        primitive inserted first. The winner's index is stored as the
        record's material_id.

        Args:
            ray: The ray to trace.
            t_min: Smallest accepted ray parameter.
            t_max: Largest accepted ray parameter.

        Returns:
            The nearest HitRecord, or a miss record (hit == 0).
        """
        result = make_miss_record()
        closest = t_max
        for i in range(self.count):
            rec = self.hit_primitive(i, ray, t_min, closest)
            if rec.hit == 1 and (result.hit == 0 or rec.t < closest):
                closest = rec.t
                result = rec
                result.material_id = i
        return result

    @ti.func
    def scatter(self, ray_in: Ray, rec: HitRecord, rng: ti.u32):
        """Scatter a ray with the material of the primitive that was hit.

        Args:
            ray_in: The incoming ray.
            rec: The hit, with material_id naming the primitive.
            rng: Generator state.

        Returns:
            A tuple (did_scatter, attenuation, scattered, new_state).
        """
        i = rec.material_id
        mat_type = self.material_type[i]

        did_scatter = 0
        attenuation = vec3(0.0, 0.0, 0.0)
        scattered = Ray(origin=rec.point, direction=rec.normal, time=ray_in.time)
        state = rng

        if mat_type == _LAMBERTIAN:
            d, a, s, st = scatter_lambertian(ray_in, rec, self.albedo[i], rng)
            did_scatter = d
            attenuation = a
            scattered = s
            state = st
        elif mat_type == _METAL:
            d, a, s, st = scatter_metal(ray_in, rec, self.albedo[i], self.fuzz[i], rng)
            did_scatter = d
            attenuation = a
            scattered = s
            state = st
        else:
            d, a, s, st = scatter_dielectric(ray_in, rec, self.ior[i], rng)
            did_scatter = d
            attenuation = a
            scattered = s
            state = st

        return did_scatter, attenuation, scattered, state

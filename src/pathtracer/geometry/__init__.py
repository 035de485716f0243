"""Geometry module for ray-primitive intersection.

Components:
    sphere: Static sphere intersection and the shared HitRecord
    moving_sphere: Sphere whose center moves linearly over a time interval
    aabb: Axis-aligned bounding boxes and the slab test
"""

from src.pathtracer.geometry.aabb import AABB, Aabb, hit_aabb
from src.pathtracer.geometry.moving_sphere import (
    MovingSphere,
    hit_moving_sphere,
    moving_sphere_center,
)
from src.pathtracer.geometry.sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    hit_sphere_at,
    make_miss_record,
    make_sphere,
    set_face_normal,
)

__all__ = [
    "HitRecord",
    "Sphere",
    "hit_sphere",
    "hit_sphere_at",
    "make_miss_record",
    "make_sphere",
    "set_face_normal",
    "MovingSphere",
    "hit_moving_sphere",
    "moving_sphere_center",
    "AABB",
    "Aabb",
    "hit_aabb",
]

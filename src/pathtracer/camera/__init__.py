"""Camera module.

Components:
    thin_lens: Thin-lens camera with depth of field and shutter time
"""

from src.pathtracer.camera.thin_lens import Camera, CameraConfig

__all__ = ["Camera", "CameraConfig"]

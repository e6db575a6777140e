"""Camera module.

Components:
    pinhole: Perspective pinhole camera and its per-resolution frame
"""

from .pinhole import CameraFrame, PinholeCamera

__all__ = ["PinholeCamera", "CameraFrame"]

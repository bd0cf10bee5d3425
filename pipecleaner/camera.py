"""The camera whose parameters are handed to the line shader."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field

from pipecleaner.geo import Point
from pipecleaner.visual import TransformMatrix

_UNIFORMS = struct.Struct("=12f3f1f")

DEFAULT_FAR_Z = 20.0


@dataclass
class Camera:
    """A camera looking down the pipe from ``pos``.

    ``vfov`` is the vertical field of view in radians.
    """

    vfov: float
    w_h_ratio: float
    pixel_height: float
    far_z: float = DEFAULT_FAR_Z
    pos: Point = field(default=(0.0, 0.0, 0.0))

    @classmethod
    def for_window(cls, width: int, height: int, vfov_degrees: float) -> Camera:
        """Build a camera at the origin for a window of the given size."""
        if height <= 0:
            raise ValueError("window height must be positive")
        return cls(
            vfov=math.radians(vfov_degrees),
            w_h_ratio=width / height,
            pixel_height=float(height),
        )

    def world_to_screen(self) -> TransformMatrix:
        """Row-major 3x4 matrix translating world space to camera space."""
        x, y, z = self.pos
        return (
            1.0, 0.0, 0.0, -x,
            0.0, 1.0, 0.0, -y,
            0.0, 0.0, 1.0, -z,
        )

    def scale(self) -> tuple[float, float, float]:
        """Per-axis factors mapping camera space onto the view volume."""
        half_h = math.tan(self.vfov / 2.0)
        half_w = self.w_h_ratio * half_h
        return (1.0 / half_w, 1.0 / half_h, 1.0 / self.far_z)

    def to_bytes(self) -> bytes:
        """Pack matrix, scale and pixel height as native 32-bit floats."""
        return _UNIFORMS.pack(
            *self.world_to_screen(), *self.scale(), self.pixel_height
        )

    def update_width_height(self, w: float, h: float) -> None:
        """Adapt the aspect ratio and pixel height to a new window size."""
        if h == 0:
            raise ValueError("height must not be zero")
        self.w_h_ratio = w / h
        self.pixel_height = h
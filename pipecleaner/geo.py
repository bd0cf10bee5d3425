"""Line-segment geometry for the models drawn in the pipe."""

from __future__ import annotations

import math

Point = tuple[float, float, float]

_CUBE_HALF = 0.05


def circle_pts(vert_count: int, radius: float) -> list[Point]:
    """Return ``vert_count`` points evenly spaced on a circle in the XY plane."""
    points = []
    for i in range(vert_count):
        angle = i / vert_count * math.tau
        points.append((radius * math.cos(angle), radius * math.sin(angle), 0.0))
    return points


def loop_indices(vert_count: int) -> list[int]:
    """Return segment indices joining ``vert_count`` points into a closed loop."""
    indices = []
    for idx in range(vert_count):
        indices.extend((idx, (idx + 1) % vert_count))
    return indices


def path_indices(vert_count: int) -> list[int]:
    """Return segment indices joining ``vert_count`` points into an open path."""
    if vert_count < 1:
        raise ValueError("a path needs at least one vertex")
    indices = []
    for idx in range(vert_count - 1):
        indices.extend((idx, idx + 1))
    return indices


def cube_pts() -> list[Point]:
    """Return the eight corners of the small cube model."""
    h = _CUBE_HALF
    return [
        (-h, -h, -h),
        (-h, -h, h),
        (-h, h, -h),
        (-h, h, h),
        (h, -h, -h),
        (h, -h, h),
        (h, h, -h),
        (h, h, h),
    ]


def cube_indices() -> list[int]:
    """Return segment indices for the twelve cube edges."""
    return [
        0, 1, 0, 2, 0, 4, 1, 3, 1, 5, 2, 3,
        2, 6, 3, 7, 4, 5, 4, 6, 5, 7, 6, 7,
    ]


def bullet_pts(length: float) -> list[Point]:
    """Return the two end points of a bullet of the given length along Z."""
    return [(0.0, 0.0, -length / 2.0), (0.0, 0.0, length / 2.0)]


def bullet_indices() -> list[int]:
    """Return the single segment of a bullet."""
    return [0, 1]
"""
Pose Geometry
=============

Joint angle and visibility helpers.
"""

from typing import Iterable, Optional

import numpy as np

from .keypoints import Keypoint

# Minimum keypoint score (exclusive) for a landmark to count as visible
VISIBILITY_THRESHOLD = 0.3


def calculate_angle(a, b, c) -> float:
    """
    Calculate the angle at vertex b formed by points a and c.

    Args:
        a: First point, a Keypoint or [x, y]
        b: Middle point (vertex), a Keypoint or [x, y]
        c: Third point, a Keypoint or [x, y]

    Returns:
        Angle in degrees, in [0, 180]
    """
    a = _as_xy(a)
    b = _as_xy(b)
    c = _as_xy(c)
    radians = np.arctan2(c[1] - b[1], c[0] - b[0]) - np.arctan2(
        a[1] - b[1], a[0] - b[0]
    )
    angle = np.abs(radians * 180.0 / np.pi)
    if angle > 180.0:
        angle = 360 - angle
    return float(angle)


def _as_xy(point) -> np.ndarray:
    if isinstance(point, Keypoint):
        return np.array([point.x, point.y], dtype=float)
    return np.array(point[:2], dtype=float)


def is_visible(
    keypoints: Iterable[Optional[Keypoint]],
    threshold: float = VISIBILITY_THRESHOLD,
) -> bool:
    """Check that every keypoint is present and scored above threshold."""
    return all(
        kp is not None and kp.score is not None and kp.score > threshold
        for kp in keypoints
    )


def min_confidence(keypoints: Iterable[Optional[Keypoint]]) -> float:
    """Lowest score among keypoints; missing ones count as 0."""
    scores = [
        kp.score if kp is not None and kp.score is not None else 0.0
        for kp in keypoints
    ]
    return min(scores) if scores else 0.0

"""
Pose Module
===========

Keypoint data model and joint angle geometry.
"""

from .geometry import calculate_angle, is_visible, min_confidence
from .keypoints import (
    KEYPOINT_NAMES,
    SKELETON_CONNECTIONS,
    Keypoint,
    Pose,
    PoseFormatError,
    pose_from_dict,
    pose_from_mediapipe,
)

__all__ = [
    "calculate_angle",
    "is_visible",
    "min_confidence",
    "KEYPOINT_NAMES",
    "SKELETON_CONNECTIONS",
    "Keypoint",
    "Pose",
    "PoseFormatError",
    "pose_from_dict",
    "pose_from_mediapipe",
]

"""
Keypoint Model
==============

Pose and keypoint types shared by the form rules and the frame coach.

Keypoint names follow the MoveNet/COCO convention used by the mobile client
(``left_hip``, ``right_knee``, ...). Poses arrive either as JSON payloads in
the TensorFlow.js pose-detection format or as MediaPipe landmark results.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


KEYPOINT_NAMES: Tuple[str, ...] = (
    "nose",
    "left_eye",
    "right_eye",
    "left_ear",
    "right_ear",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
)

SKELETON_CONNECTIONS: Tuple[Tuple[str, str], ...] = (
    ("nose", "left_eye"),
    ("nose", "right_eye"),
    ("left_eye", "left_ear"),
    ("right_eye", "right_ear"),
    ("left_shoulder", "right_shoulder"),
    ("left_shoulder", "left_elbow"),
    ("right_shoulder", "right_elbow"),
    ("left_elbow", "left_wrist"),
    ("right_elbow", "right_wrist"),
    ("left_shoulder", "left_hip"),
    ("right_shoulder", "right_hip"),
    ("left_hip", "right_hip"),
    ("left_hip", "left_knee"),
    ("right_hip", "right_knee"),
    ("left_knee", "left_ankle"),
    ("right_knee", "right_ankle"),
)

# BlazePose landmark indices for the MoveNet keypoints
MEDIAPIPE_LANDMARK_INDEX: Dict[str, int] = {
    "nose": 0,
    "left_eye": 2,
    "right_eye": 5,
    "left_ear": 7,
    "right_ear": 8,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
    "left_ankle": 27,
    "right_ankle": 28,
}


class PoseFormatError(ValueError):
    """Raised when a pose payload cannot be converted into a Pose."""


@dataclass(frozen=True)
class Keypoint:
    """
    A named anatomical landmark in image coordinates.

    Attributes:
        name (str): MoveNet keypoint name
        x (float): Horizontal position
        y (float): Vertical position (grows downward)
        score (Optional[float]): Detection confidence in [0, 1], if reported
    """
    name: str
    x: float
    y: float
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "x": self.x, "y": self.y, "score": self.score}


@dataclass(frozen=True)
class Pose:
    """All keypoints for one detected body in one frame."""
    keypoints: Tuple[Keypoint, ...] = ()
    score: Optional[float] = None

    def get(self, name: str) -> Optional[Keypoint]:
        """Return the first keypoint with the given name, or None."""
        for keypoint in self.keypoints:
            if keypoint.name == name:
                return keypoint
        return None

    def __iter__(self) -> Iterator[Keypoint]:
        return iter(self.keypoints)

    def __len__(self) -> int:
        return len(self.keypoints)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keypoints": [kp.to_dict() for kp in self.keypoints],
            "score": self.score,
        }


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise PoseFormatError(f"Keypoint field '{field}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise PoseFormatError(f"Keypoint field '{field}' must be a number") from None


def pose_from_dict(payload: Any) -> Pose:
    """
    Build a Pose from a TensorFlow.js pose-detection style payload.

    Args:
        payload: ``{"keypoints": [{"name", "x", "y", "score"?}], "score"?}``

    Returns:
        Parsed Pose

    Raises:
        PoseFormatError: If the payload is not shaped like a pose
    """
    if not isinstance(payload, dict):
        raise PoseFormatError("Pose must be a JSON object")

    raw_keypoints = payload.get("keypoints")
    if not isinstance(raw_keypoints, list):
        raise PoseFormatError("Pose must contain a 'keypoints' list")

    keypoints: List[Keypoint] = []
    for raw in raw_keypoints:
        if not isinstance(raw, dict):
            raise PoseFormatError("Each keypoint must be a JSON object")
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            # Unnamed keypoints cannot be matched by any rule
            continue
        score = raw.get("score")
        keypoints.append(Keypoint(
            name=name,
            x=_as_float(raw.get("x"), "x"),
            y=_as_float(raw.get("y"), "y"),
            score=None if score is None else _as_float(score, "score"),
        ))

    pose_score = payload.get("score")
    return Pose(
        keypoints=tuple(keypoints),
        score=None if pose_score is None else _as_float(pose_score, "score"),
    )


def pose_from_mediapipe(landmarks: Sequence[Any], width: int, height: int) -> Pose:
    """
    Convert MediaPipe pose landmarks into a Pose in pixel coordinates.

    Args:
        landmarks: ``results.pose_landmarks.landmark`` (normalized x, y, visibility)
        width: Frame width in pixels
        height: Frame height in pixels

    Returns:
        Pose with MoveNet keypoint names and visibility as score
    """
    keypoints = []
    for name, index in MEDIAPIPE_LANDMARK_INDEX.items():
        if index >= len(landmarks):
            continue
        lm = landmarks[index]
        keypoints.append(Keypoint(
            name=name,
            x=float(lm.x) * width,
            y=float(lm.y) * height,
            score=float(lm.visibility),
        ))
    return Pose(keypoints=tuple(keypoints))

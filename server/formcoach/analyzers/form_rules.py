"""
Exercise Form Rules
===================

Per-exercise form checks that turn a single pose into coaching feedback.

Each rule is a static, immutable description of an exercise (tracked
keypoints, visibility gate, confidence keypoints). ``check_form`` dispatches on
the rule's ``ExerciseKind`` and applies the angle thresholds for that exercise.
Poor visibility never raises; it yields the rule's "reposition" feedback with
zero confidence.

Usage:
    rule = get_form_rule_for_exercise("Barbell Squat")
    if rule is not None:
        feedback = rule.check_form(pose)
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..pose import Pose, calculate_angle, is_visible, min_confidence
from ..pose.geometry import VISIBILITY_THRESHOLD

# Feedback confidence above which the client shows a "high confidence" badge
HIGH_CONFIDENCE_THRESHOLD = 0.7


class ExerciseKind(Enum):
    """Exercises with live form tracking."""
    SQUAT = "squat"
    PUSH_UP = "push-up"
    PLANK = "plank"
    LUNGE = "lunge"


@dataclass(frozen=True)
class FormFeedback:
    """
    Coaching verdict for one pose sample.

    Attributes:
        is_correct (bool): Whether the current position is acceptable
        message (str): Short headline shown over the camera preview
        tip (str): Follow-up cue for the athlete
        confidence (float): Lowest score among the keypoints used
    """
    is_correct: bool
    message: str
    tip: str
    confidence: float

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence > HIGH_CONFIDENCE_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isCorrect": self.is_correct,
            "message": self.message,
            "tip": self.tip,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ExerciseFormRule:
    """
    Static form rule for one exercise.

    Attributes:
        kind (ExerciseKind): Which evaluator applies
        name (str): Display name
        key_points (tuple): Landmarks the exercise tracks
        description (str): One-line form cue
        required_keypoints (tuple): Landmarks that must be visible to evaluate
        confidence_keypoints (tuple): Landmarks whose lowest score is reported
        reposition (FormFeedback): Feedback returned when visibility fails
    """
    kind: ExerciseKind
    name: str
    key_points: Tuple[str, ...]
    description: str
    required_keypoints: Tuple[str, ...]
    confidence_keypoints: Tuple[str, ...]
    reposition: FormFeedback

    def check_form(self, pose: Pose, threshold: float = VISIBILITY_THRESHOLD) -> FormFeedback:
        """Evaluate this rule against a pose."""
        return check_form(self, pose, threshold)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "keyPoints": list(self.key_points),
            "description": self.description,
        }


def _reposition(message: str, tip: str) -> FormFeedback:
    return FormFeedback(is_correct=False, message=message, tip=tip, confidence=0.0)


SQUAT_FORM = ExerciseFormRule(
    kind=ExerciseKind.SQUAT,
    name="Squat",
    key_points=("left_hip", "left_knee", "left_ankle", "right_hip", "right_knee", "right_ankle"),
    description="Keep your back straight, knees over toes, and go deep",
    required_keypoints=("left_hip", "left_knee", "left_ankle", "right_hip", "right_knee", "right_ankle"),
    confidence_keypoints=("left_knee", "right_knee", "left_hip", "right_hip"),
    reposition=_reposition(
        "Position yourself so your full body is visible",
        "Stand side-on to the camera for best tracking",
    ),
)

PUSHUP_FORM = ExerciseFormRule(
    kind=ExerciseKind.PUSH_UP,
    name="Push-up",
    key_points=("left_shoulder", "left_elbow", "left_wrist", "left_hip", "left_ankle"),
    description="Keep your body in a straight line from head to heels",
    required_keypoints=("left_shoulder", "left_elbow", "left_wrist", "left_hip", "left_ankle"),
    confidence_keypoints=("left_shoulder", "left_elbow", "left_hip"),
    reposition=_reposition(
        "Position yourself side-on to the camera",
        "Your full body should be visible in the frame",
    ),
)

PLANK_FORM = ExerciseFormRule(
    kind=ExerciseKind.PLANK,
    name="Plank",
    key_points=("left_shoulder", "left_hip", "left_ankle", "left_elbow"),
    description="Hold a straight line from shoulders to ankles",
    required_keypoints=("left_shoulder", "left_hip", "left_ankle"),
    confidence_keypoints=("left_shoulder", "left_hip", "left_ankle"),
    reposition=_reposition(
        "Position yourself side-on to the camera",
        "Your full body should be visible",
    ),
)

LUNGE_FORM = ExerciseFormRule(
    kind=ExerciseKind.LUNGE,
    name="Lunge",
    key_points=("left_hip", "left_knee", "left_ankle", "right_hip", "right_knee", "right_ankle"),
    description="Front knee over ankle, back knee toward ground",
    required_keypoints=("left_hip", "left_knee", "left_ankle", "right_knee"),
    confidence_keypoints=("left_knee", "right_knee", "left_hip"),
    reposition=_reposition(
        "Position yourself so both legs are visible",
        "Stand at a slight angle to the camera",
    ),
)

# Lookup order matters for the substring fallback in get_form_rule_for_exercise
EXERCISE_FORMS: Mapping[str, ExerciseFormRule] = MappingProxyType({
    "squat": SQUAT_FORM,
    "barbell squat": SQUAT_FORM,
    "goblet squat": SQUAT_FORM,
    "front squat": SQUAT_FORM,
    "push-up": PUSHUP_FORM,
    "pushup": PUSHUP_FORM,
    "push up": PUSHUP_FORM,
    "plank": PLANK_FORM,
    "forearm plank": PLANK_FORM,
    "lunge": LUNGE_FORM,
    "walking lunge": LUNGE_FORM,
    "reverse lunge": LUNGE_FORM,
    "forward lunge": LUNGE_FORM,
})

FORM_RULES: Tuple[ExerciseFormRule, ...] = (SQUAT_FORM, PUSHUP_FORM, PLANK_FORM, LUNGE_FORM)

GENERAL_FORM_TIPS: Tuple[str, ...] = (
    "Keep your core engaged throughout the movement",
    "Control the movement - avoid using momentum",
    "Breathe steadily - exhale on exertion",
    "Maintain proper alignment of your joints",
)


def get_form_rule_for_exercise(exercise_name: str) -> Optional[ExerciseFormRule]:
    """
    Resolve an exercise name to its form rule.

    Tries a case-insensitive exact match first, then the first table key
    (in table order) that contains the name or is contained by it.

    Args:
        exercise_name: Free-form exercise name, e.g. "Barbell Squat"

    Returns:
        Matching rule, or None if no rule applies
    """
    normalized_name = exercise_name.lower().strip()

    rule = EXERCISE_FORMS.get(normalized_name)
    if rule is not None:
        return rule

    # TODO: names matching several keys resolve to whichever comes first;
    # rank candidates by overlap length once more exercise families exist.
    for key, rule in EXERCISE_FORMS.items():
        if key in normalized_name or normalized_name in key:
            return rule

    return None


def has_form_rule(exercise_name: str) -> bool:
    """Check whether live tracking is offered for this exercise name."""
    return exercise_name.lower() in {kind.value for kind in ExerciseKind}


def aliases_for(rule: ExerciseFormRule) -> Tuple[str, ...]:
    """Table names that resolve to the given rule."""
    return tuple(name for name, candidate in EXERCISE_FORMS.items() if candidate is rule)


def check_form(
    rule: ExerciseFormRule,
    pose: Pose,
    threshold: float = VISIBILITY_THRESHOLD,
) -> FormFeedback:
    """
    Evaluate a pose against a form rule.

    Args:
        rule: Exercise form rule
        pose: Detected pose for one frame
        threshold: Minimum keypoint score (exclusive) for visibility

    Returns:
        Coaching feedback; the rule's reposition feedback when any required
        keypoint is missing or not confidently detected
    """
    required = [pose.get(name) for name in rule.required_keypoints]
    if not is_visible(required, threshold):
        return rule.reposition

    confidence = min_confidence(pose.get(name) for name in rule.confidence_keypoints)

    if rule.kind is ExerciseKind.SQUAT:
        return _check_squat(pose, confidence)
    if rule.kind is ExerciseKind.PUSH_UP:
        return _check_pushup(pose, confidence)
    if rule.kind is ExerciseKind.PLANK:
        return _check_plank(pose, confidence)
    if rule.kind is ExerciseKind.LUNGE:
        return _check_lunge(pose, confidence)
    raise ValueError(f"Unsupported exercise kind: {rule.kind}")


def _check_squat(pose: Pose, confidence: float) -> FormFeedback:
    left_knee_angle = calculate_angle(
        pose.get("left_hip"), pose.get("left_knee"), pose.get("left_ankle")
    )
    right_knee_angle = calculate_angle(
        pose.get("right_hip"), pose.get("right_knee"), pose.get("right_ankle")
    )
    avg_knee_angle = (left_knee_angle + right_knee_angle) / 2

    if avg_knee_angle > 160:
        return FormFeedback(False, "Go lower - aim for parallel or below",
                            "Push your hips back as you descend", confidence)
    if avg_knee_angle < 70:
        return FormFeedback(True, "Great depth! Full range of motion",
                            "Drive through your heels to stand up", confidence)
    if 70 <= avg_knee_angle <= 100:
        return FormFeedback(True, "Good form! Parallel squat achieved",
                            "Keep your chest up and core tight", confidence)
    return FormFeedback(False, "Almost there - go a bit deeper",
                        "Keep your weight on your heels", confidence)


def _check_pushup(pose: Pose, confidence: float) -> FormFeedback:
    shoulder = pose.get("left_shoulder")
    elbow_angle = calculate_angle(shoulder, pose.get("left_elbow"), pose.get("left_wrist"))
    body_angle = calculate_angle(shoulder, pose.get("left_hip"), pose.get("left_ankle"))

    # Body line is checked first: a broken line fails at any elbow angle
    if body_angle < 160:
        return FormFeedback(False, "Keep your hips in line - avoid sagging or piking",
                            "Engage your core to maintain a straight line", confidence)
    if elbow_angle > 160:
        return FormFeedback(True, "Good starting position - arms extended",
                            "Lower your chest toward the ground", confidence)
    if elbow_angle < 100:
        return FormFeedback(True, "Great depth! Full range of motion",
                            "Push through your palms to return to start", confidence)
    return FormFeedback(False, "Go lower - aim for 90 degrees at the elbows",
                        "Keep your elbows at 45 degrees from your body", confidence)


def _check_plank(pose: Pose, confidence: float) -> FormFeedback:
    shoulder = pose.get("left_shoulder")
    hip = pose.get("left_hip")
    ankle = pose.get("left_ankle")
    body_angle = calculate_angle(shoulder, hip, ankle)

    if body_angle > 175:
        return FormFeedback(True, "Perfect plank position!",
                            "Keep breathing and engage your core", confidence)
    if body_angle < 160:
        # Image y grows downward, so a smaller y means the hip sits higher
        if hip.y < (shoulder.y + ankle.y) / 2:
            return FormFeedback(False, "Hips too high - lower them slightly",
                                "Think about pushing your hips toward the ground", confidence)
        return FormFeedback(False, "Hips sagging - lift them up",
                            "Squeeze your glutes and tighten your abs", confidence)
    return FormFeedback(True, "Good form - keep holding!",
                        "Focus on keeping your body rigid", confidence)


def _check_lunge(pose: Pose, confidence: float) -> FormFeedback:
    front_knee_angle = calculate_angle(
        pose.get("left_hip"), pose.get("left_knee"), pose.get("left_ankle")
    )

    if 100 < front_knee_angle < 120:
        return FormFeedback(True, "Excellent lunge form!",
                            "Push through your front heel to stand", confidence)
    if front_knee_angle > 120:
        return FormFeedback(False, "Go deeper - lower your back knee",
                            "Your front thigh should be parallel to the ground", confidence)
    if front_knee_angle < 80:
        return FormFeedback(False, "Knee too far forward - step out more",
                            "Keep your front knee above your ankle", confidence)
    return FormFeedback(True, "Good lunge depth",
                        "Keep your torso upright", confidence)

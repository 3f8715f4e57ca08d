"""
Unit tests for exercise form rules.

Tests for the visibility gate, per-exercise angle thresholds, the
confidence floor and exercise name resolution.
"""

import math
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from formcoach.analyzers import (
    EXERCISE_FORMS,
    LUNGE_FORM,
    PLANK_FORM,
    PUSHUP_FORM,
    SQUAT_FORM,
    ExerciseKind,
    FormFeedback,
    aliases_for,
    check_form,
    get_form_rule_for_exercise,
    has_form_rule,
)
from formcoach.analyzers import form_rules
from formcoach.pose import Keypoint, Pose


def _third(vertex, first, angle, length=100.0):
    """Point that forms the given angle at vertex together with first."""
    phi = math.atan2(first[1] - vertex[1], first[0] - vertex[0]) + math.radians(angle)
    return (vertex[0] + length * math.cos(phi), vertex[1] + length * math.sin(phi))


def _pose(points, score=0.9, scores=None):
    scores = scores or {}
    return Pose(keypoints=tuple(
        Keypoint(name, x, y, scores.get(name, score)) for name, (x, y) in points.items()
    ))


def squat_pose(left_angle, right_angle=None, **kwargs):
    right_angle = left_angle if right_angle is None else right_angle
    points = {
        "left_hip": (100, 100),
        "left_knee": (100, 200),
        "right_hip": (300, 100),
        "right_knee": (300, 200),
    }
    points["left_ankle"] = _third(points["left_knee"], points["left_hip"], left_angle)
    points["right_ankle"] = _third(points["right_knee"], points["right_hip"], right_angle)
    return _pose(points, **kwargs)


def pushup_pose(body_angle, elbow_angle, **kwargs):
    points = {
        "left_shoulder": (100, 200),
        "left_hip": (200, 200),
        "left_elbow": (100, 260),
    }
    points["left_ankle"] = _third(points["left_hip"], points["left_shoulder"], body_angle, 200)
    points["left_wrist"] = _third(points["left_elbow"], points["left_shoulder"], elbow_angle, 60)
    return _pose(points, **kwargs)


def plank_pose(hip_y, **kwargs):
    return _pose({
        "left_shoulder": (0, 100),
        "left_elbow": (0, 160),
        "left_hip": (100, hip_y),
        "left_ankle": (200, 100),
    }, **kwargs)


def plank_pose_at(body_angle, **kwargs):
    points = {
        "left_shoulder": (0, 100),
        "left_elbow": (0, 160),
        "left_hip": (100, 100),
    }
    points["left_ankle"] = _third(points["left_hip"], points["left_shoulder"], body_angle)
    return _pose(points, **kwargs)


def lunge_pose(front_angle, **kwargs):
    points = {
        "left_hip": (100, 100),
        "left_knee": (150, 200),
        "right_hip": (110, 100),
        "right_knee": (60, 250),
        "right_ankle": (10, 260),
    }
    points["left_ankle"] = _third(points["left_knee"], points["left_hip"], front_angle)
    return _pose(points, **kwargs)


@pytest.fixture
def fixed_angle(monkeypatch):
    """Make every joint angle come out as exactly the given value."""
    def fix(angle):
        monkeypatch.setattr(form_rules, "calculate_angle", lambda a, b, c: angle)
    return fix


class TestVisibilityGate:
    """Poor visibility never raises and always yields reposition feedback."""

    @pytest.mark.parametrize("rule, pose", [
        (SQUAT_FORM, squat_pose(95)),
        (PUSHUP_FORM, pushup_pose(175, 170)),
        (PLANK_FORM, plank_pose(100)),
        (LUNGE_FORM, lunge_pose(110)),
    ])
    def test_low_score_on_required_keypoint(self, rule, pose):
        """A required keypoint at the threshold fails the gate."""
        name = rule.required_keypoints[0]
        degraded = Pose(keypoints=tuple(
            Keypoint(kp.name, kp.x, kp.y, 0.3) if kp.name == name else kp for kp in pose
        ))
        feedback = check_form(rule, degraded)
        assert feedback.is_correct is False
        assert feedback.confidence == 0
        assert feedback == rule.reposition

    @pytest.mark.parametrize("rule, pose", [
        (SQUAT_FORM, squat_pose(95)),
        (PUSHUP_FORM, pushup_pose(175, 170)),
        (PLANK_FORM, plank_pose(100)),
        (LUNGE_FORM, lunge_pose(110)),
    ])
    def test_missing_required_keypoint(self, rule, pose):
        """Dropping any required keypoint fails the gate."""
        for name in rule.required_keypoints:
            partial = Pose(keypoints=tuple(kp for kp in pose if kp.name != name))
            feedback = rule.check_form(partial)
            assert feedback.is_correct is False
            assert feedback.confidence == 0

    def test_empty_pose(self):
        feedback = check_form(SQUAT_FORM, Pose())
        assert feedback.message == "Position yourself so your full body is visible"
        assert feedback.tip == "Stand side-on to the camera for best tracking"

    def test_unscored_keypoints(self):
        pose = Pose(keypoints=tuple(Keypoint(kp.name, kp.x, kp.y) for kp in squat_pose(95)))
        assert check_form(SQUAT_FORM, pose).confidence == 0

    def test_custom_threshold(self):
        feedback = check_form(SQUAT_FORM, squat_pose(95, score=0.5), threshold=0.6)
        assert feedback == SQUAT_FORM.reposition

    def test_plank_elbow_not_required(self):
        """The plank tracks the elbow but does not gate on it."""
        pose = Pose(keypoints=tuple(kp for kp in plank_pose(100) if kp.name != "left_elbow"))
        assert check_form(PLANK_FORM, pose).is_correct is True

    def test_lunge_back_ankle_not_required(self):
        pose = Pose(keypoints=tuple(kp for kp in lunge_pose(110) if kp.name != "right_ankle"))
        assert check_form(LUNGE_FORM, pose).message == "Excellent lunge form!"


class TestSquat:
    """Test suite for squat depth classification."""

    def test_parallel_squat(self):
        """Average knee angle of 95 with confident keypoints is correct."""
        feedback = check_form(SQUAT_FORM, squat_pose(95))
        assert feedback == FormFeedback(
            is_correct=True,
            message="Good form! Parallel squat achieved",
            tip="Keep your chest up and core tight",
            confidence=0.9,
        )

    def test_standing_is_too_shallow(self):
        feedback = check_form(SQUAT_FORM, squat_pose(175))
        assert feedback.is_correct is False
        assert feedback.message == "Go lower - aim for parallel or below"

    def test_full_depth(self):
        feedback = check_form(SQUAT_FORM, squat_pose(60))
        assert feedback.is_correct is True
        assert feedback.message == "Great depth! Full range of motion"

    def test_almost_there(self):
        feedback = check_form(SQUAT_FORM, squat_pose(130))
        assert feedback.is_correct is False
        assert feedback.message == "Almost there - go a bit deeper"

    def test_uses_average_of_both_knees(self):
        """One bent knee is not enough when the other leg stays straight."""
        feedback = check_form(SQUAT_FORM, squat_pose(150, 175))
        assert feedback.message == "Go lower - aim for parallel or below"

        feedback = check_form(SQUAT_FORM, squat_pose(80, 110))
        assert feedback.message == "Good form! Parallel squat achieved"

    def test_confidence_is_floor_of_hips_and_knees(self):
        pose = squat_pose(95, scores={"left_knee": 0.6, "left_ankle": 0.4, "right_ankle": 0.4})
        assert check_form(SQUAT_FORM, pose).confidence == pytest.approx(0.6)

    @pytest.mark.parametrize("angle,message", [
        (69.99, "Great depth! Full range of motion"),
        (70.01, "Good form! Parallel squat achieved"),
        (99.99, "Good form! Parallel squat achieved"),
        (100.01, "Almost there - go a bit deeper"),
        (159.99, "Almost there - go a bit deeper"),
        (160.01, "Go lower - aim for parallel or below"),
    ])
    def test_threshold_edges(self, angle, message):
        assert check_form(SQUAT_FORM, squat_pose(angle)).message == message

    @pytest.mark.parametrize("angle,message", [
        (70.0, "Good form! Parallel squat achieved"),
        (100.0, "Good form! Parallel squat achieved"),
        (160.0, "Almost there - go a bit deeper"),
    ])
    def test_exact_thresholds(self, fixed_angle, angle, message):
        """Parallel is inclusive at both ends; standing starts above 160."""
        fixed_angle(angle)
        assert check_form(SQUAT_FORM, squat_pose(95)).message == message


class TestPushup:
    """Test suite for push-up classification."""

    def test_sagging_body_fails_regardless_of_elbow(self):
        for elbow_angle in (170, 130, 80):
            feedback = check_form(PUSHUP_FORM, pushup_pose(150, elbow_angle))
            assert feedback.is_correct is False
            assert feedback.message == "Keep your hips in line - avoid sagging or piking"

    def test_top_position(self):
        feedback = check_form(PUSHUP_FORM, pushup_pose(175, 170))
        assert feedback.is_correct is True
        assert feedback.message == "Good starting position - arms extended"

    def test_bottom_position(self):
        feedback = check_form(PUSHUP_FORM, pushup_pose(175, 85))
        assert feedback.is_correct is True
        assert feedback.message == "Great depth! Full range of motion"
        assert feedback.tip == "Push through your palms to return to start"

    def test_half_rep(self):
        feedback = check_form(PUSHUP_FORM, pushup_pose(178, 130))
        assert feedback.is_correct is False
        assert feedback.message == "Go lower - aim for 90 degrees at the elbows"

    def test_confidence_ignores_wrist_and_ankle(self):
        pose = pushup_pose(175, 170, scores={"left_wrist": 0.35, "left_ankle": 0.35, "left_hip": 0.8})
        assert check_form(PUSHUP_FORM, pose).confidence == pytest.approx(0.8)

    def test_body_line_edge(self):
        sagging = check_form(PUSHUP_FORM, pushup_pose(159.99, 170))
        assert sagging.message == "Keep your hips in line - avoid sagging or piking"

        straight = check_form(PUSHUP_FORM, pushup_pose(160.01, 170))
        assert straight.message == "Good starting position - arms extended"

    @pytest.mark.parametrize("elbow_angle,message", [
        (160.01, "Good starting position - arms extended"),
        (159.99, "Go lower - aim for 90 degrees at the elbows"),
        (100.01, "Go lower - aim for 90 degrees at the elbows"),
        (99.99, "Great depth! Full range of motion"),
    ])
    def test_elbow_edges(self, elbow_angle, message):
        assert check_form(PUSHUP_FORM, pushup_pose(175, elbow_angle)).message == message

    def test_exact_body_threshold_is_not_sagging(self, fixed_angle):
        """At exactly 160 the body line passes and the elbow decides."""
        fixed_angle(160.0)
        feedback = check_form(PUSHUP_FORM, pushup_pose(175, 170))
        assert feedback.message == "Go lower - aim for 90 degrees at the elbows"


class TestPlank:
    """Test suite for plank body line classification."""

    def test_straight_line(self):
        feedback = check_form(PLANK_FORM, plank_pose(100))
        assert feedback.is_correct is True
        assert feedback.message == "Perfect plank position!"

    def test_slight_bend_is_acceptable(self):
        feedback = check_form(PLANK_FORM, plank_pose(108))
        assert feedback.is_correct is True
        assert feedback.message == "Good form - keep holding!"

    def test_hips_too_high(self):
        """Smaller image y means the hip is above the shoulder-ankle line."""
        feedback = check_form(PLANK_FORM, plank_pose(60))
        assert feedback.is_correct is False
        assert feedback.message == "Hips too high - lower them slightly"

    def test_hips_sagging(self):
        feedback = check_form(PLANK_FORM, plank_pose(140))
        assert feedback.is_correct is False
        assert feedback.message == "Hips sagging - lift them up"

    def test_collinear_is_straight(self):
        pose = plank_pose(100)
        angle = form_rules.calculate_angle(
            pose.get("left_shoulder"), pose.get("left_hip"), pose.get("left_ankle")
        )
        assert angle == pytest.approx(180.0)
        assert check_form(PLANK_FORM, pose).message == "Perfect plank position!"

    @pytest.mark.parametrize("angle,is_correct,message", [
        (175.01, True, "Perfect plank position!"),
        (174.99, True, "Good form - keep holding!"),
        (160.01, True, "Good form - keep holding!"),
        (159.99, False, "Hips sagging - lift them up"),
    ])
    def test_threshold_edges(self, angle, is_correct, message):
        feedback = check_form(PLANK_FORM, plank_pose_at(angle))
        assert feedback.is_correct is is_correct
        assert feedback.message == message

    @pytest.mark.parametrize("angle", [175.0, 160.0])
    def test_exact_thresholds_hold(self, fixed_angle, angle):
        fixed_angle(angle)
        assert check_form(PLANK_FORM, plank_pose(100)).message == "Good form - keep holding!"


class TestLunge:
    """Test suite for lunge front knee classification."""

    def test_excellent(self):
        feedback = check_form(LUNGE_FORM, lunge_pose(110))
        assert feedback.is_correct is True
        assert feedback.message == "Excellent lunge form!"

    def test_too_shallow(self):
        feedback = check_form(LUNGE_FORM, lunge_pose(150))
        assert feedback.is_correct is False
        assert feedback.message == "Go deeper - lower your back knee"

    def test_knee_too_far_forward(self):
        feedback = check_form(LUNGE_FORM, lunge_pose(65))
        assert feedback.is_correct is False
        assert feedback.message == "Knee too far forward - step out more"

    def test_between_thresholds_is_acceptable(self):
        feedback = check_form(LUNGE_FORM, lunge_pose(90))
        assert feedback.is_correct is True
        assert feedback.message == "Good lunge depth"

    def test_confidence(self):
        pose = lunge_pose(110, scores={"right_knee": 0.55})
        assert check_form(LUNGE_FORM, pose).confidence == pytest.approx(0.55)

    @pytest.mark.parametrize("angle,message", [
        (79.99, "Knee too far forward - step out more"),
        (80.01, "Good lunge depth"),
        (99.99, "Good lunge depth"),
        (100.01, "Excellent lunge form!"),
        (119.99, "Excellent lunge form!"),
        (120.01, "Go deeper - lower your back knee"),
    ])
    def test_threshold_edges(self, angle, message):
        assert check_form(LUNGE_FORM, lunge_pose(angle)).message == message

    @pytest.mark.parametrize("angle", [80.0, 100.0, 120.0])
    def test_exact_thresholds_are_good_depth(self, fixed_angle, angle):
        """The excellent band is open at both ends."""
        fixed_angle(angle)
        feedback = check_form(LUNGE_FORM, lunge_pose(110))
        assert feedback.is_correct is True
        assert feedback.message == "Good lunge depth"


class TestExerciseLookup:
    """Test suite for exercise name resolution."""

    def test_exact_match_is_case_insensitive(self):
        assert get_form_rule_for_exercise("Barbell Squat") is SQUAT_FORM
        assert get_form_rule_for_exercise("  PUSH-UP ") is PUSHUP_FORM

    def test_substring_fallback(self):
        assert get_form_rule_for_exercise("Bulgarian Split Squat") is SQUAT_FORM
        assert get_form_rule_for_exercise("Side Plank") is PLANK_FORM
        assert get_form_rule_for_exercise("Lunges") is LUNGE_FORM

    def test_name_contained_in_key(self):
        assert get_form_rule_for_exercise("push") is PUSHUP_FORM
        assert get_form_rule_for_exercise("goblet") is SQUAT_FORM

    def test_no_match(self):
        assert get_form_rule_for_exercise("banana") is None
        assert get_form_rule_for_exercise("deadlift") is None

    def test_table_is_immutable(self):
        with pytest.raises(TypeError):
            EXERCISE_FORMS["deadlift"] = SQUAT_FORM

    def test_rules_are_tagged(self):
        assert {rule.kind for rule in EXERCISE_FORMS.values()} == set(ExerciseKind)

    def test_aliases(self):
        assert aliases_for(PLANK_FORM) == ("plank", "forearm plank")

    def test_has_form_rule(self):
        assert has_form_rule("Squat")
        assert has_form_rule("push-up")
        assert not has_form_rule("barbell squat")
        assert not has_form_rule("deadlift")


class TestFormFeedback:
    """Test suite for FormFeedback serialization."""

    def test_to_dict_uses_client_field_names(self):
        feedback = FormFeedback(True, "Perfect plank position!", "Keep breathing", 0.85)
        assert feedback.to_dict() == {
            "isCorrect": True,
            "message": "Perfect plank position!",
            "tip": "Keep breathing",
            "confidence": 0.85,
        }

    def test_high_confidence(self):
        assert FormFeedback(True, "", "", 0.71).is_high_confidence
        assert not FormFeedback(True, "", "", 0.7).is_high_confidence


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

"""
Exercise Analyzers Module
=========================

Contains exercise form rules and the frame-level form coach.
"""

from .form_rules import (
    EXERCISE_FORMS,
    FORM_RULES,
    GENERAL_FORM_TIPS,
    LUNGE_FORM,
    PLANK_FORM,
    PUSHUP_FORM,
    SQUAT_FORM,
    ExerciseFormRule,
    ExerciseKind,
    FormFeedback,
    aliases_for,
    check_form,
    get_form_rule_for_exercise,
    has_form_rule,
)
from .form_coach import FormCoachMobile

__all__ = [
    "EXERCISE_FORMS",
    "FORM_RULES",
    "GENERAL_FORM_TIPS",
    "LUNGE_FORM",
    "PLANK_FORM",
    "PUSHUP_FORM",
    "SQUAT_FORM",
    "ExerciseFormRule",
    "ExerciseKind",
    "FormFeedback",
    "aliases_for",
    "check_form",
    "get_form_rule_for_exercise",
    "has_form_rule",
    "FormCoachMobile",
]

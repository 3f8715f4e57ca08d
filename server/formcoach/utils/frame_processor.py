"""
Mobile Frame Processor Module
=============================

Thread-safe processor for handling frames from mobile devices.
"""

import logging
import threading
from typing import Dict, List, Optional

from config import AnalyzerConfig, get_analyzer_config
from ..analyzers import ExerciseFormRule, ExerciseKind, FormCoachMobile

logger = logging.getLogger(__name__)


class MobileFrameProcessor:
    """
    Thread-safe processor for mobile camera frames.

    Manages lazy initialization and access to one form coach per
    tracked exercise kind.

    Usage:
        processor = MobileFrameProcessor()
        coach = processor.get_coach(SQUAT_FORM)
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        """Initialize the mobile frame processor."""
        self._config = config
        self._coaches: Dict[ExerciseKind, FormCoachMobile] = {}
        self._lock = threading.Lock()

    def get_coach(self, rule: ExerciseFormRule) -> FormCoachMobile:
        """
        Get or create the form coach for a rule.

        Args:
            rule: Exercise form rule to track

        Returns:
            Form coach instance for the rule's exercise kind
        """
        with self._lock:
            coach = self._coaches.get(rule.kind)
            if coach is None:
                if self._config is None:
                    self._config = get_analyzer_config()
                coach = FormCoachMobile(rule, self._config)
                self._coaches[rule.kind] = coach
                logger.info("Created form coach for %s", rule.name)
            return coach

    def reset_coach(self, rule: ExerciseFormRule) -> bool:
        """
        Reset the form coach for a rule, if one was created.

        Returns:
            True if a coach was reset, False if none existed yet
        """
        with self._lock:
            coach = self._coaches.get(rule.kind)
        if coach is None:
            return False
        coach.reset()
        logger.info("Reset form coach for %s", rule.name)
        return True

    def active_exercises(self) -> List[str]:
        """Names of exercises with a live form coach."""
        with self._lock:
            return [coach.rule.name for coach in self._coaches.values()]

    def release(self) -> None:
        """Release all pose detectors."""
        with self._lock:
            coaches = list(self._coaches.values())
            self._coaches.clear()
        for coach in coaches:
            coach.release()

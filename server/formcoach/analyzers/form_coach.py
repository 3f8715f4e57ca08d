"""
Form Coach Module
=================

Real-time exercise form feedback on mobile camera frames using MediaPipe
pose detection.

Classes:
    FormCoachMobile: Frame processor that evaluates one exercise form rule

Usage:
    coach = FormCoachMobile(SQUAT_FORM)
    processed, feedback = coach.process_frame(frame)
    print(feedback.message)
"""

import logging
import threading
from typing import Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

from config import AnalyzerConfig, get_analyzer_config
from ..pose import SKELETON_CONNECTIONS, Pose, pose_from_mediapipe
from .form_rules import ExerciseFormRule, FormFeedback

logger = logging.getLogger(__name__)

# BGR colors matching the mobile client overlay
CORRECT_COLOR = (128, 222, 74)    # #4ADE80
INCORRECT_COLOR = (107, 107, 255)  # #FF6B6B
OUTLINE_COLOR = (255, 255, 255)
HEADER_COLOR = (221, 78, 157)      # #9D4EDD


class FormCoachMobile:
    """
    Form coach for processing mobile camera frames.

    This version doesn't use a camera directly - it processes
    individual frames sent from a mobile device and keeps only the
    latest feedback for display.

    Attributes:
        rule (ExerciseFormRule): Form rule being tracked
        feedback (FormFeedback): Latest feedback, or None before the first frame
        pose (Pose): Latest detected pose, or None
    """

    def __init__(self, rule: ExerciseFormRule, config: Optional[AnalyzerConfig] = None):
        """
        Initialize the mobile form coach.

        Args:
            rule: Exercise form rule to evaluate
            config: Analyzer settings, read from the environment if omitted
        """
        self.rule = rule
        self.config = config or get_analyzer_config()
        self.mp_pose = mp.solutions.pose
        self.pose_detector = self.mp_pose.Pose(
            model_complexity=self.config.model_complexity,
            min_detection_confidence=self.config.min_detection_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
        )
        self.feedback: Optional[FormFeedback] = None
        self.pose: Optional[Pose] = None
        self._lock = threading.Lock()
        logger.debug("Pose detector ready for %s", rule.name)

    def evaluate(self, pose: Optional[Pose]) -> FormFeedback:
        """
        Evaluate a pose and remember the result.

        Args:
            pose: Detected pose, or None if no body was found

        Returns:
            Feedback for this pose
        """
        self.pose = pose
        if pose is None:
            self.feedback = self.rule.reposition
        else:
            self.feedback = self.rule.check_form(pose, self.config.visibility_threshold)
        return self.feedback

    def process_frame(self, frame: np.ndarray) -> Tuple[np.ndarray, FormFeedback]:
        """
        Process a single frame and return annotated image.

        Detection, evaluation and drawing run under the coach lock, so the
        returned feedback always belongs to the returned image.

        Args:
            frame: BGR image from mobile camera

        Returns:
            Tuple of (annotated BGR image, feedback for this frame)
        """
        with self._lock:
            return self._process_locked(frame)

    def _process_locked(self, frame: np.ndarray) -> Tuple[np.ndarray, FormFeedback]:
        image = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image.flags.writeable = False
        results = self.pose_detector.process(image)
        image.flags.writeable = True
        image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

        pose = None
        if results.pose_landmarks:
            frame_h, frame_w = image.shape[:2]
            pose = pose_from_mediapipe(results.pose_landmarks.landmark, frame_w, frame_h)

        feedback = self.evaluate(pose)

        if pose is not None:
            self._draw_skeleton(image, pose, feedback)
        self._draw_overlay(image, feedback)
        return image, feedback

    def _draw_skeleton(self, image: np.ndarray, pose: Pose, feedback: FormFeedback) -> None:
        """Draw bones and joints above the visibility threshold."""
        threshold = self.config.visibility_threshold
        color = CORRECT_COLOR if feedback.is_correct else INCORRECT_COLOR

        for start, end in SKELETON_CONNECTIONS:
            start_point = pose.get(start)
            end_point = pose.get(end)
            if (start_point and end_point
                    and (start_point.score or 0) > threshold
                    and (end_point.score or 0) > threshold):
                cv2.line(image,
                         (int(start_point.x), int(start_point.y)),
                         (int(end_point.x), int(end_point.y)),
                         color, 3, cv2.LINE_AA)

        for keypoint in pose:
            if (keypoint.score or 0) > threshold:
                center = (int(keypoint.x), int(keypoint.y))
                cv2.circle(image, center, 6, color, -1, cv2.LINE_AA)
                cv2.circle(image, center, 6, OUTLINE_COLOR, 2, cv2.LINE_AA)

    def _draw_overlay(self, image: np.ndarray, feedback: FormFeedback) -> None:
        """Draw header with tracked exercise and confidence, and feedback bar."""
        frame_h, frame_w = image.shape[:2]

        # Header bar
        cv2.rectangle(image, (0, 0), (350, 73), HEADER_COLOR, -1)
        cv2.putText(image, "TRACKING", (15, 12),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 0, 0), 1, cv2.LINE_AA)
        cv2.putText(image, self.rule.name, (10, 55),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.2, (255, 255, 255), 2, cv2.LINE_AA)
        cv2.putText(image, "CONFIDENCE", (230, 12),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 0, 0), 1, cv2.LINE_AA)
        badge_color = CORRECT_COLOR if feedback.is_high_confidence else INCORRECT_COLOR
        cv2.putText(image, f"{round(feedback.confidence * 100)}%", (235, 55),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.2, badge_color, 2, cv2.LINE_AA)

        # Feedback bar
        color = CORRECT_COLOR if feedback.is_correct else INCORRECT_COLOR
        cv2.rectangle(image, (0, frame_h - 80), (frame_w, frame_h), (0, 0, 0), -1)
        cv2.putText(image, feedback.message, (20, frame_h - 45),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.9, color, 2, cv2.LINE_AA)
        cv2.putText(image, feedback.tip, (20, frame_h - 15),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1, cv2.LINE_AA)

    def reset(self) -> None:
        """Reset the latest feedback and pose."""
        with self._lock:
            self.feedback = None
            self.pose = None

    def release(self) -> None:
        """Release the pose detector."""
        with self._lock:
            self.pose_detector.close()

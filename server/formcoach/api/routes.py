"""
API Routes Module
=================

Flask API routes for the form coach server.
"""

import base64
import binascii
import logging

import cv2
import numpy as np
from flask import render_template_string, request, jsonify

from config import get_analyzer_config
from ..analyzers import (
    FORM_RULES,
    GENERAL_FORM_TIPS,
    aliases_for,
    get_form_rule_for_exercise,
    has_form_rule,
)
from ..pose import PoseFormatError, pose_from_dict
from ..utils import MobileFrameProcessor

logger = logging.getLogger(__name__)

# Global instances
mobile_processor = MobileFrameProcessor()


def _decode_frame(image_data: str, min_bytes: int):
    """
    Decode a base64 JPEG into a BGR frame.

    Returns:
        Tuple of (frame, error message); frame is None on error
    """
    if not isinstance(image_data, str) or len(image_data) < min_bytes:
        return None, "Invalid image data - too small"

    try:
        img_bytes = base64.b64decode(image_data)
    except (binascii.Error, ValueError) as e:
        return None, f"Base64 decode error: {str(e)}"

    if not img_bytes:
        return None, "Failed to decode image"

    nparr = np.frombuffer(img_bytes, np.uint8)
    frame = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if frame is None or frame.size == 0:
        return None, "Failed to decode image"

    if frame.shape[0] < 10 or frame.shape[1] < 10:
        return None, "Image too small"

    return frame, None


def _requested_exercise(data):
    """
    Read the exercise name from a request body, defaulting to squat when absent.

    Returns:
        The name, or None if it is present but not a non-blank string
    """
    exercise = data.get("exercise") if isinstance(data, dict) else None
    if exercise is None:
        return "squat"
    if not isinstance(exercise, str) or not exercise.strip():
        return None
    return exercise


def register_routes(app, html_template: str):
    """
    Register all API routes with the Flask app.

    Args:
        app: Flask application instance
        html_template: HTML template string for the index page
    """

    @app.route("/")
    def index():
        """Serve the main web interface."""
        return render_template_string(html_template)

    @app.route("/exercises")
    def exercises():
        """List exercises with live form tracking and general form tips."""
        return jsonify({
            "exercises": [
                dict(rule.to_dict(), aliases=list(aliases_for(rule)))
                for rule in FORM_RULES
            ],
            "generalTips": list(GENERAL_FORM_TIPS),
        })

    @app.route("/exercises/<path:name>/rule")
    def exercise_rule(name):
        """Resolve an exercise name to its form rule."""
        if not name.strip():
            return jsonify({"error": "No exercise name", "hasFormRule": False}), 400

        rule = get_form_rule_for_exercise(name)
        if rule is None:
            return jsonify({"error": "No form rule for exercise", "hasFormRule": False}), 404
        return jsonify(dict(rule.to_dict(), hasFormRule=has_form_rule(name)))

    @app.route("/check_form", methods=["POST"])
    def check_form():
        """
        Evaluate a pose detected on the device.

        Request JSON:
            {
                "exercise": "<exercise-name>",
                "pose": {"keypoints": [{"name", "x", "y", "score"}]}
            }

        Response JSON:
            {"isCorrect", "message", "tip", "confidence"}
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "pose" not in data:
            return jsonify({"error": "No pose data"}), 400

        exercise = data.get("exercise")
        if not isinstance(exercise, str) or not exercise.strip():
            return jsonify({"error": "No exercise name"}), 400

        rule = get_form_rule_for_exercise(exercise)
        if rule is None:
            return jsonify({"error": "No form rule for exercise"}), 404

        try:
            pose = pose_from_dict(data["pose"])
        except PoseFormatError as e:
            return jsonify({"error": str(e)}), 400

        threshold = get_analyzer_config().visibility_threshold
        feedback = rule.check_form(pose, threshold)
        return jsonify(dict(feedback.to_dict(), exercise=rule.name))

    @app.route("/process_frame", methods=["POST"])
    def process_frame():
        """
        Process a frame from mobile camera and return analyzed frame.

        Request JSON:
            {
                "image": "<base64-encoded-jpeg>",
                "exercise": "<exercise-name>"
            }

        Response JSON:
            {
                "image": "<base64-encoded-jpeg>",
                "feedback": {"isCorrect", "message", "tip", "confidence"}
            }
        """
        try:
            data = request.get_json(silent=True)
            if not isinstance(data, dict) or "image" not in data:
                return jsonify({"error": "No image data"}), 400

            exercise = _requested_exercise(data)
            if exercise is None:
                return jsonify({"error": "No exercise name"}), 400

            rule = get_form_rule_for_exercise(exercise)
            if rule is None:
                return jsonify({"error": "No form rule for exercise"}), 404

            config = get_analyzer_config()
            frame, error = _decode_frame(data["image"], config.min_image_bytes)
            if frame is None:
                return jsonify({"error": error}), 400

            coach = mobile_processor.get_coach(rule)
            processed_frame, feedback = coach.process_frame(frame)

            if processed_frame is None:
                return jsonify({"error": "Processing failed"}), 500

            # Encode processed frame to JPEG
            ret, buffer = cv2.imencode(".jpg", processed_frame,
                                       [cv2.IMWRITE_JPEG_QUALITY, config.jpeg_quality])
            if not ret:
                return jsonify({"error": "Failed to encode processed frame"}), 500

            encoded_image = base64.b64encode(buffer).decode("utf-8")

            return jsonify({
                "image": encoded_image,
                "exercise": rule.name,
                "feedback": feedback.to_dict(),
            })
        except Exception as e:
            logger.exception("Error processing frame: %s", e)
            return jsonify({"error": str(e)}), 500

    @app.route("/reset_analyzer", methods=["POST"])
    def reset_analyzer():
        """
        Reset the form coach for an exercise.

        Request JSON:
            {
                "exercise": "<exercise-name>"
            }
        """
        data = request.get_json(silent=True)
        exercise = _requested_exercise(data)
        if exercise is None:
            return jsonify({"error": "No exercise name"}), 400

        rule = get_form_rule_for_exercise(exercise)
        if rule is None:
            return jsonify({"error": "No form rule for exercise"}), 404

        mobile_processor.reset_coach(rule)
        return jsonify({"status": "ok"})

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "active_exercises": mobile_processor.active_exercises(),
        })

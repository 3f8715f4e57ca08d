"""
Server Configuration
====================

Configuration settings for the form coach server.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class ServerConfig:
    """Server configuration settings."""
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    threaded: bool = True
    log_level: str = "INFO"


@dataclass
class AnalyzerConfig:
    """Analyzer configuration settings."""
    # Form rule thresholds
    visibility_threshold: float = 0.3

    # MediaPipe pose detection
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5

    # Frame transport
    jpeg_quality: int = 85
    min_image_bytes: int = 100


def get_server_config() -> ServerConfig:
    """Get server configuration from environment."""
    return ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=os.getenv("DEBUG", "false").lower() == "true",
        threaded=True,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_analyzer_config() -> AnalyzerConfig:
    """Get analyzer configuration from environment."""
    return AnalyzerConfig(
        visibility_threshold=float(os.getenv("VISIBILITY_THRESHOLD", "0.3")),
        model_complexity=int(os.getenv("MODEL_COMPLEXITY", "1")),
        min_detection_confidence=float(os.getenv("MIN_DETECTION_CONFIDENCE", "0.5")),
        min_tracking_confidence=float(os.getenv("MIN_TRACKING_CONFIDENCE", "0.5")),
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "85")),
    )

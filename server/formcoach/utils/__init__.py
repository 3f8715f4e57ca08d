"""
Utilities Module
================

Contains utility functions, helpers, and shared components.
"""

from .log import setup_logger
from .frame_processor import MobileFrameProcessor

__all__ = ["setup_logger", "MobileFrameProcessor"]

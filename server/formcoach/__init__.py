"""
Form Coach Server
=================

A Flask-based server for real-time exercise form feedback from detected poses.

Modules:
    - pose: Keypoint model and joint angle geometry
    - analyzers: Exercise form rules and frame-level form coaching
    - api: Flask API routes and endpoints
    - utils: Logging and shared helpers
"""

__version__ = "1.0.0"
__author__ = "Form Coach Team"

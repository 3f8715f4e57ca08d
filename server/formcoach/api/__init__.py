"""
API Routes Module
=================

Contains Flask API routes and endpoints for the form coach server.
"""

from .routes import register_routes

__all__ = ["register_routes"]

"""
Configuration Module
====================
"""

from .settings import (
    ServerConfig,
    AnalyzerConfig,
    get_server_config,
    get_analyzer_config,
)

__all__ = [
    "ServerConfig",
    "AnalyzerConfig",
    "get_server_config",
    "get_analyzer_config",
]

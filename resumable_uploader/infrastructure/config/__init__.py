"""
Configuration management infrastructure.

This module provides configuration models and loading from files and the
environment.
"""

from .models import ApplicationConfig, LoggingConfig, ServerConfig, UploadConfig
from .loader import ConfigLoader

__all__ = [
    "ApplicationConfig",
    "LoggingConfig",
    "ServerConfig",
    "UploadConfig",
    "ConfigLoader",
]

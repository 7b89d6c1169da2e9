"""
Application layer wiring the core services to the HTTP infrastructure.
"""

from .startup import UploaderApplication, build_file_handles

__all__ = [
    "UploaderApplication",
    "build_file_handles",
]

"""
Unified test infrastructure for zstache.

This package contains common utilities and helpers
used across all tests to avoid code duplication.

Modules:
- file_utils: Utilities for creating files and directories
- rendering_utils: Utilities for compiling and rendering templates
"""

from .file_utils import write
from .rendering_utils import RecordingProvider, render_template

__all__ = [
    # File utilities
    "write",
    # Rendering utilities
    "render_template",
    "RecordingProvider",
]

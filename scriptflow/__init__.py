# scriptflow/__init__.py
"""
ffmpeg scriptflow package.
"""

from scriptflow.__version__ import (
    __description__,
    __license__,
    __version__,
    __version_info__,
)

__all__ = [
    "__version__",
    "__version_info__",
    "__license__",
    "__description__",
]

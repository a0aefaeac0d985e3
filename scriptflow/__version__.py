# scriptflow/__version__.py
"""
Version information for ffmpeg scriptflow.

The version follows semantic versioning: MAJOR.MINOR.PATCH
"""

__version__ = "1.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Additional version metadata
__license__ = "MIT"
__description__ = "ffmpeg wrapper scripts, a pipeline runner and a pipeline server"

# scriptflow/api/routes/server.py
"""
API routes for server health.
"""

import shutil
from datetime import datetime

from fastapi import APIRouter

from scriptflow.__version__ import __version__
from scriptflow.core.config import config

router = APIRouter(prefix="/server", tags=["Server"])


@router.get(
    "/health",
    response_model=dict,
    summary="Check server health",
    description="Verify the server is up and whether ffmpeg and ffprobe can be found",
)
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Health status and tool availability
    """
    return {
        "status": "healthy",
        "version": __version__,
        "ffmpeg": shutil.which(config.FFMPEG_BIN) is not None,
        "ffprobe": shutil.which(config.FFPROBE_BIN) is not None,
        "timestamp": datetime.now().isoformat(),
    }

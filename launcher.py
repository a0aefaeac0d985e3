# launcher.py
"""
Launcher for the pipeline server.
"""

import sys

import uvicorn

from scriptflow.core.config import config
from scriptflow.core.setup_logging import get_uvicorn_log_config, setup_default_logging

logger = setup_default_logging()


def main():
    """
    Start the pipeline server with the configured host and port.
    """
    print(f"🚀 Starting pipeline server on {config.SERVER_HOST}:{config.SERVER_PORT}")
    print(f"   Pipelines run in {config.PIPELINE_WORKDIR}")
    try:
        uvicorn.run(
            "scriptflow.main:app",
            host=config.SERVER_HOST,
            port=config.SERVER_PORT,
            log_config=get_uvicorn_log_config(json_format=config.LOG_JSON),
            access_log=True,
            workers=1,
        )
    except KeyboardInterrupt:
        print("\n⏹️  Pipeline server stopped")
    except Exception as e:
        print(f"❌ Launcher error: {e}")
        sys.exit(1)


def run_dev():
    """Run the pipeline server with Uvicorn reload (development mode)."""
    print(f"[DEV] Starting pipeline server on {config.SERVER_HOST}:{config.SERVER_PORT}")

    uvicorn.run(
        "scriptflow.main:app",
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
        reload=True,
        access_log=True,
        workers=1,
    )


if __name__ == "__main__":
    main()

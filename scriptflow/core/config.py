# scriptflow/core/config.py
"""
Configuration module for scriptflow.
Handles environment variables for the wrapper scripts, the flow runner and the pipeline server.
"""

import os
import sys
import tempfile
from typing import Optional

from dotenv import load_dotenv

# Module-level global state - these persist across imports
_CONFIG_ENV_LOADED = False
_CONFIG_INSTANCE = None


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse a boolean from a string with a fallback default."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _parse_int(
    value: Optional[str],
    default: int,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    """Parse an integer from a string with optional bounds and fallback default."""
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except (TypeError, ValueError):
        return default
    if min_value is not None:
        parsed = max(min_value, parsed)
    if max_value is not None:
        parsed = min(max_value, parsed)
    return parsed


def _parse_csv(value: Optional[str], default: str = "*") -> list:
    """Split a comma-separated environment value, falling back to ``[default]``."""
    return [item.strip() for item in (value or "").split(",") if item.strip()] or [default]


def get_config():
    """
    Get or create the configuration instance.
    Ensures .env file is loaded only once.

    Returns:
        Config: Configuration instance
    """
    global _CONFIG_ENV_LOADED, _CONFIG_INSTANCE

    if _CONFIG_INSTANCE is None:
        if not _CONFIG_ENV_LOADED:
            _load_environment_variables()
            _CONFIG_ENV_LOADED = True

        _CONFIG_INSTANCE = Config()

    return _CONFIG_INSTANCE


def reload_config_from_env():
    """Refresh the cached config instance from current environment variables.

    This updates the existing instance in-place so modules that already imported
    ``config`` keep seeing fresh values.
    """
    global _CONFIG_ENV_LOADED, _CONFIG_INSTANCE, config

    if not _CONFIG_ENV_LOADED:
        _load_environment_variables()
        _CONFIG_ENV_LOADED = True

    refreshed = Config()

    if _CONFIG_INSTANCE is None:
        _CONFIG_INSTANCE = refreshed
    else:
        _CONFIG_INSTANCE.__dict__.clear()
        _CONFIG_INSTANCE.__dict__.update(refreshed.__dict__)

    config = _CONFIG_INSTANCE
    return _CONFIG_INSTANCE


def _load_environment_variables() -> None:
    """
    Load environment variables from the project's .env file if it exists.

    Scripts write their normal output to stdout, so nothing is printed here.
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_dir = os.path.dirname(os.path.dirname(current_dir))
    env_path = os.path.join(project_dir, ".env")

    if os.path.exists(env_path):
        load_dotenv(env_path)


class Config:
    """
    Configuration class that reads from environment variables.
    Assumes .env file has already been loaded.
    """

    def __init__(self):
        """Initialize configuration values."""

        # DEBUG mode echoes constructed commands and probe results
        self.DEBUG: bool = _parse_bool(os.getenv("DEBUG"), default=False)

        # External binaries
        self.FFMPEG_BIN: str = os.getenv("FFMPEG_BIN", "ffmpeg")
        self.FFPROBE_BIN: str = os.getenv("FFPROBE_BIN", "ffprobe")

        # Temporary files (concat list files, flow stage configs)
        self.TEMP_DIR: str = os.getenv(
            "SCRIPTFLOW_TEMP_DIR", os.path.join(tempfile.gettempdir(), "scriptflow")
        )

        # Directory where the server writes pipeline configs before running them
        self.PIPELINE_WORKDIR: str = os.getenv("PIPELINE_WORKDIR", os.getcwd())

        # Log directory
        self.LOG_DIRECTORY: str = os.getenv(
            "LOG_DIRECTORY", os.path.join(tempfile.gettempdir(), "scriptflow", "logs")
        )

        # Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()

        # JSON log lines instead of the plain text format
        self.LOG_JSON: bool = _parse_bool(os.getenv("LOG_JSON"), default=False)

        # Forward logs to the local syslog socket
        self.LOG_SYSLOG: bool = _parse_bool(os.getenv("LOG_SYSLOG"), default=False)

        # Pipeline server
        self.SERVER_HOST: str = os.getenv("SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = _parse_int(os.getenv("SERVER_PORT"), 3002)

        # Optional API token; an empty value leaves the server open
        self.API_TOKEN: str = os.getenv("API_TOKEN", "")

        # CORS configuration
        self.CORS_ALLOW_ORIGINS = _parse_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))
        self.CORS_ALLOW_CREDENTIALS: bool = _parse_bool(
            os.getenv("CORS_ALLOW_CREDENTIALS"), default=False
        )
        self.CORS_ALLOW_METHODS = _parse_csv(os.getenv("CORS_ALLOW_METHODS", "*"))
        self.CORS_ALLOW_HEADERS = _parse_csv(os.getenv("CORS_ALLOW_HEADERS", "*"))

    def validate_configuration(self) -> None:
        """
        Validate critical configuration settings.

        Raises:
            ValueError: If essential configuration is missing or invalid
        """
        self._validate_ports()
        self._validate_cors()
        self._validate_binaries()

    def _validate_ports(self) -> None:
        if not (1 <= self.SERVER_PORT <= 65535):
            raise ValueError("SERVER_PORT must be between 1 and 65535")

    def _validate_cors(self) -> None:
        if self.CORS_ALLOW_CREDENTIALS and ("*" in self.CORS_ALLOW_ORIGINS):
            raise ValueError(
                "Invalid CORS configuration: CORS_ALLOW_CREDENTIALS=true is not compatible with CORS_ALLOW_ORIGINS=*"
            )

    def _validate_binaries(self) -> None:
        if not self.FFMPEG_BIN or not self.FFPROBE_BIN:
            raise ValueError("FFMPEG_BIN and FFPROBE_BIN must not be empty")


# Create global config instance using the factory function
config = get_config()


def _is_pytest_run() -> bool:
    # `PYTEST_CURRENT_TEST` is only set while executing a test; during collection it
    # may be absent. We also check loaded modules/argv to reliably detect pytest.
    return (
        os.getenv("PYTEST_CURRENT_TEST") is not None
        or "pytest" in sys.modules
        or any(os.path.basename(arg).startswith("pytest") for arg in sys.argv)
    )


# Auto-validate configuration on module load (skip under pytest to avoid failing imports)
if not _is_pytest_run():
    config.validate_configuration()

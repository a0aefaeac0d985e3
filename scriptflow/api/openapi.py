# scriptflow/api/openapi.py
"""OpenAPI configuration for the pipeline server.

Keeps the exposed OpenAPI/FastAPI version aligned with the package version.
"""

from typing import Callable, Dict, List

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from scriptflow.__version__ import __version__


def custom_openapi(app: FastAPI) -> Callable[[], Dict]:
    """
    Generate custom OpenAPI schema for the pipeline server.

    Args:
        app: FastAPI application instance

    Returns:
        callable: Function that generates OpenAPI schema
    """

    def _custom_openapi() -> Dict:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        openapi_schema["tags"] = _get_openapi_tags()
        _add_security_schemes(openapi_schema)
        _enhance_schemas_with_examples(openapi_schema)

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    return _custom_openapi


def _get_openapi_tags() -> List[Dict]:
    """
    Define OpenAPI tags for organizing endpoints in documentation.

    Returns:
        List[Dict]: List of tag definitions
    """
    return [
        {"name": "Pipeline", "description": "Run pipelines of ffmpeg wrapper scripts"},
        {"name": "Server", "description": "Health and information endpoints"},
    ]


def _add_security_schemes(openapi_schema: Dict) -> None:
    """
    Add security schemes to OpenAPI schema.

    Args:
        openapi_schema: OpenAPI schema to modify
    """
    openapi_schema["components"] = openapi_schema.get("components", {})
    openapi_schema["components"]["securitySchemes"] = {
        "APIKeyHeader": {
            "type": "apiKey",
            "name": "X-API-Token",
            "in": "header",
            "description": "Only required when the server sets API_TOKEN",
        }
    }


def _enhance_schemas_with_examples(openapi_schema: Dict) -> None:
    """
    Enhance schemas with examples for better documentation.

    Args:
        openapi_schema: OpenAPI schema to modify
    """
    schemas = openapi_schema.setdefault("components", {}).setdefault("schemas", {})

    if "PipelineRequest" in schemas:
        schemas["PipelineRequest"]["example"] = {
            "config": '{"ff_scale": {"input": "intro.mov", "width": "1280", "height": "720"}}'
        }

    if "PipelineResponse" in schemas:
        schemas["PipelineResponse"]["example"] = {
            "success": True,
            "stdout": "🚀 Running : ff_scale\n✅ Output : ff_scale.mp4\n",
            "stderr": "",
        }


def setup_openapi_config(app: FastAPI) -> None:
    """
    Set up custom OpenAPI configuration for FastAPI app.

    Args:
        app: FastAPI application instance to configure
    """
    app.openapi = custom_openapi(app)  # type: ignore[method-assign]


class OpenAPIConfig:  # pragma: no cover
    """
    Configuration class for OpenAPI documentation settings.
    """

    TITLE = "Scriptflow API"
    DESCRIPTION = """
## Scriptflow API

Runs pipelines of ffmpeg wrapper scripts on the machine hosting the server.

Post a pipeline config to `/api/execute-pipeline`: every key starting with `ff`
is a stage, run in order by the `scriptflow` pipeline runner.

### Authentication

When the server sets `API_TOKEN`, include it in the `X-API-Token` header or in the `Bearer <token>` format.
"""
    VERSION = __version__
    LICENSE_INFO = {
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    }

    OPENAPI_URL = "/openapi.json"
    DOCS_URL = "/docs"
    REDOC_URL = "/redoc"

    @classmethod
    def get_fastapi_config(cls) -> Dict:
        """
        Get FastAPI configuration for OpenAPI.

        Returns:
            Dict: Configuration dictionary for FastAPI app
        """
        return {
            "title": cls.TITLE,
            "description": cls.DESCRIPTION,
            "version": cls.VERSION,
            "license_info": cls.LICENSE_INFO,
            "openapi_url": cls.OPENAPI_URL,
            "docs_url": cls.DOCS_URL,
            "redoc_url": cls.REDOC_URL,
        }

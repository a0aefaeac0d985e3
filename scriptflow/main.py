# scriptflow/main.py
"""
Main FastAPI application of the pipeline server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scriptflow.api.openapi import OpenAPIConfig, setup_openapi_config
from scriptflow.api.routes import pipeline, server
from scriptflow.core.config import config
from scriptflow.core.setup_logging import setup_default_logging

logger = setup_default_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Args:
        app: FastAPI application instance
    """
    logger.info(f"Pipeline server started, pipelines run in {config.PIPELINE_WORKDIR}")
    yield
    logger.info("Shutting down pipeline server")


app = FastAPI(lifespan=lifespan, **OpenAPIConfig.get_fastapi_config())

setup_openapi_config(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=config.CORS_ALLOW_METHODS,
    allow_headers=config.CORS_ALLOW_HEADERS,
)

app.include_router(pipeline.router)
app.include_router(server.router)


@app.get("/", tags=["Server"])
async def root():
    """
    Root endpoint with API information and links.

    Returns:
        Dict: API information and available endpoints
    """
    return {
        "message": "Scriptflow API",
        "version": OpenAPIConfig.VERSION,
        "documentation": {"swagger": "/docs", "redoc": "/redoc", "openapi": "/openapi.json"},
        "health_check": "/server/health",
    }

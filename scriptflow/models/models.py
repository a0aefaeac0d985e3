# scriptflow/models/models.py
"""
Data models for the pipeline server.
Defines Pydantic models for request/response schemas.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class PipelineRequest(BaseModel):
    """
    Pipeline submitted for execution.

    Attributes:
        config: Pipeline document, serialised as a JSON string
    """

    config: Optional[str] = Field(
        None,
        description="Pipeline config as a JSON string: every key starting with 'ff' is a stage",
    )


class PipelineResponse(BaseModel):
    """
    Result of a pipeline run.

    Attributes:
        success: Whether the pipeline runner exited with status 0
        stdout: Everything the pipeline runner printed on stdout
        stderr: Everything the pipeline runner printed on stderr
        error: Failure description, only set when success is False
    """

    success: bool = Field(..., description="True when the pipeline runner exited with status 0")
    stdout: str = Field("", description="Captured standard output of the pipeline runner")
    stderr: str = Field("", description="Captured standard error of the pipeline runner")
    error: Optional[str] = Field(None, description="Failure description")
    exit_code: Optional[int] = Field(None, description="Exit status of the pipeline runner")


class ScriptListResponse(BaseModel):
    """Available wrapper scripts."""

    scripts: Dict[str, str] = Field(
        default_factory=dict, description="Script name to one-line summary"
    )

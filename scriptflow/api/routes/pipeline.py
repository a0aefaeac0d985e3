# scriptflow/api/routes/pipeline.py
"""
API routes for pipeline execution.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from scriptflow.core.auth import verify_token
from scriptflow.core.setup_logging import setup_default_logging
from scriptflow.models.models import PipelineRequest, PipelineResponse, ScriptListResponse
from scriptflow.scripts import get_script_manager
from scriptflow.services import pipeline_service as pipeline_service_module

logger = setup_default_logging()

router = APIRouter(prefix="/api", tags=["Pipeline"])


@router.post(
    "/execute-pipeline",
    response_model=PipelineResponse,
    summary="Execute a pipeline",
    description="Run every ff_ stage of a pipeline config in order and return the captured output",
    responses={
        400: {"model": PipelineResponse, "description": "No config provided"},
        500: {"model": PipelineResponse, "description": "Pipeline runner failed"},
    },
)
async def execute_pipeline(request: PipelineRequest, _token=Depends(verify_token)):
    """
    Execute a pipeline config.

    Args:
        request: Pipeline config as a JSON string

    Returns:
        PipelineResponse: 200 on success, 400 without config, 500 when the runner fails
    """
    if not request.config or not request.config.strip():
        return JSONResponse(
            status_code=400,
            content=PipelineResponse(success=False, error="No config provided").model_dump(),
        )

    result = await pipeline_service_module.pipeline_service.execute(request.config)
    if not result.success:
        return JSONResponse(status_code=500, content=result.model_dump())
    return result


@router.get(
    "/scripts",
    response_model=ScriptListResponse,
    summary="List wrapper scripts",
    description="Names and summaries of the scripts a pipeline stage can use",
)
async def list_scripts() -> ScriptListResponse:
    """
    List the available wrapper scripts.

    Returns:
        ScriptListResponse: Script name to summary
    """
    return ScriptListResponse(scripts=get_script_manager().list_scripts())

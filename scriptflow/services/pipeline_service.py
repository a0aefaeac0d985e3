# scriptflow/services/pipeline_service.py
"""
Pipeline execution service for the server.

A submitted pipeline is written to a fresh temporary file and handed to the
``scriptflow`` pipeline runner as one opaque subprocess. The temporary file is
removed whatever the outcome.
"""

import os
import sys
import tempfile
from typing import Optional

from scriptflow.command_runner import executor
from scriptflow.command_runner.exceptions import ToolNotFoundError
from scriptflow.core.config import config
from scriptflow.core.setup_logging import setup_default_logging
from scriptflow.models.models import PipelineResponse

logger = setup_default_logging()

FLOW_MODULE = "scriptflow.flow"


class PipelineService:
    """
    Runs pipeline configs through the pipeline runner.

    Args:
        workdir: Folder holding the temporary pipeline files; relative paths of
            the pipeline resolve against it (defaults to ``PIPELINE_WORKDIR``)
        python: Interpreter used to start the pipeline runner
    """

    def __init__(self, workdir: Optional[str] = None, python: Optional[str] = None):
        self.workdir = workdir or config.PIPELINE_WORKDIR
        self.python = python or sys.executable

    def write_config(self, pipeline_config: str) -> str:
        """Write a pipeline config to a new file of the work folder."""
        os.makedirs(self.workdir, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix="temp_pipeline_", suffix=".json", dir=self.workdir)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(pipeline_config)
        return path

    async def execute(self, pipeline_config: str) -> PipelineResponse:
        """
        Run a pipeline and collect its output.

        Args:
            pipeline_config: Pipeline document as a JSON string

        Returns:
            PipelineResponse: Success flag and captured output of the pipeline runner
        """
        config_path = self.write_config(pipeline_config)
        logger.info(f"Executing pipeline {config_path}")
        try:
            result = await executor.run(
                self.python, ["-m", FLOW_MODULE, "-C", config_path], cwd=self.workdir
            )
        except ToolNotFoundError as e:
            logger.error(f"Pipeline could not be started: {e}")
            return PipelineResponse(success=False, error=str(e))
        finally:
            if os.path.exists(config_path):
                os.remove(config_path)

        if result.success:
            logger.info("Pipeline completed successfully")
            return PipelineResponse(
                success=True, stdout=result.stdout, stderr=result.stderr, exit_code=0
            )

        logger.error(f"Pipeline exited with status {result.exit_code}")
        return PipelineResponse(
            success=False,
            stdout=result.stdout,
            stderr=result.stderr,
            error=f"Pipeline exited with status {result.exit_code}",
            exit_code=result.exit_code,
        )


pipeline_service = PipelineService()

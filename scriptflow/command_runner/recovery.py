# scriptflow/command_runner/recovery.py
"""
What a wrapper script does when its input or parameters are unusable.

Pipelines built from these scripts must keep going when one stage cannot
do its work, so most scripts hand their input on unchanged.
"""

import os
import shutil
from enum import Enum

from scriptflow.command_runner.outcome import Outcome
from scriptflow.core.setup_logging import get_logger

logger = get_logger("recovery")


class RecoveryPolicy(str, Enum):
    # Copy the input to the output, then exit 0
    PASS_THROUGH = "pass_through"
    # Exit 0 and produce nothing
    NO_OUTPUT = "no_output"


def recover(policy: RecoveryPolicy, input_path: str, output_path: str) -> Outcome:
    """
    Apply a recovery policy after a soft failure.

    Args:
        policy: Policy of the script
        input_path: Input that could not be processed
        output_path: Output the script was asked to write

    Returns:
        Outcome: ``CONTINUE`` with exit status 0, or ``HARD_FAILURE`` if the copy failed
    """
    if policy is RecoveryPolicy.NO_OUTPUT:
        logger.warning("No output produced")
        return Outcome.proceed("No output produced")

    if not input_path or not output_path or not os.path.isfile(input_path):
        logger.warning(f"Nothing to pass through, input not found: {input_path or '<none>'}")
        return Outcome.proceed("Nothing to pass through")

    try:
        shutil.copyfile(input_path, output_path)
    except shutil.SameFileError:
        return Outcome.proceed("Input and output are the same file")
    except OSError as e:
        logger.error(f"Cannot copy {input_path} to {output_path}: {e}")
        return Outcome.hard(1, f"Cannot copy input to output: {e}")

    logger.info(f"Copied {input_path} to {output_path} unchanged")
    return Outcome.proceed(f"Copied input to {output_path}")

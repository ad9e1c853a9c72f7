"""Utility functions for publishing the upload outcome to the pipeline."""

import json
import logging
from pathlib import Path
from typing import Any

from nexus_uploader.models import FailureLedger

logger = logging.getLogger(__name__)

UPLOAD_STATUS_KEY = "UPLOAD_STATUS"
UPLOAD_STATUS_SUCCESS = "Success"


def upload_status(ledger: FailureLedger) -> str | list[dict[str, Any]]:
    """Return the value of the upload status output variable.

    Args:
        ledger: Ledger of the finished run

    Returns:
        ``"Success"`` for an empty ledger, otherwise the failed artifact records
    """
    if not ledger:
        return UPLOAD_STATUS_SUCCESS
    return ledger.to_list()


def format_output_value(value: Any) -> str:
    """Render an output variable value: strings as-is, anything else as compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def write_output_variable(key: str, value: Any, output_file: Path | None) -> None:
    """Append ``key=value`` to the pipeline output file.

    Args:
        key: Variable name
        value: Variable value, serialized with :func:`format_output_value`
        output_file: Output file path, or None when the pipeline provides none

    Raises:
        OSError: If the output file cannot be written
    """
    line = f"{key}={format_output_value(value)}"

    if output_file is None:
        logger.info(f"No output file configured, {line}")
        return

    with output_file.open("a", encoding="utf-8") as f:
        f.write(line + "\n")
    logger.debug(f"Wrote output variable {key} to {output_file}")


def write_upload_status(ledger: FailureLedger, output_file: Path | None) -> None:
    """Publish the upload status variable for a finished run."""
    if not ledger:
        logger.info("All artifacts uploaded successfully")
    write_output_variable(UPLOAD_STATUS_KEY, upload_status(ledger), output_file)

"""Load assessment record exports for the reading commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class InputFileError(ValueError):
    """Raised when an assessment export cannot be read or has the wrong shape."""


def load_records(path: Path | str) -> list[dict[str, Any]]:
    """
    Read assessment records from a JSON export.

    Accepts either a list of record objects or an object with a
    "records" list (the portal's export format).
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise InputFileError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputFileError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("records")
    if not isinstance(data, list):
        raise InputFileError(
            f"{path} must contain a list of records or an object with a 'records' list"
        )

    records = [r for r in data if isinstance(r, dict)]
    if len(records) != len(data):
        logger.warning(f"Ignored {len(data) - len(records)} non-object entries in {path}")
    logger.debug(f"Loaded {len(records)} record(s) from {path}")
    return records

"""Loading Newman run summaries and Postman collections from JSON files."""

import json
import logging
from pathlib import Path
from typing import Any

from .models import Collection, RunSummary

logger = logging.getLogger(__name__)


class SummaryLoadError(ValueError):
    """A summary or collection file could not be read."""


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SummaryLoadError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SummaryLoadError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e

    if not isinstance(data, dict):
        raise SummaryLoadError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def load_collection(path: str | Path) -> Collection:
    """Load a Postman collection export.

    Accepts both a bare collection and the ``{"collection": {...}}`` wrapper
    returned by the Postman API.
    """
    data = _read_json(Path(path))
    if isinstance(data.get("collection"), dict):
        data = data["collection"]
    return Collection.from_dict(data)


def load_run_summary(path: str | Path, collection_path: str | Path | None = None) -> RunSummary:
    """Load a run summary written by Newman's ``json`` reporter.

    Args:
        path: Summary JSON file.
        collection_path: Collection export to use instead of the copy embedded
            in the summary.

    Returns:
        RunSummary ready for report generation.

    Raises:
        SummaryLoadError: If a file is missing or is not a JSON object.
    """
    data = _read_json(Path(path))
    if "run" not in data:
        raise SummaryLoadError(f"{path} does not look like a Newman run summary (no 'run' key)")

    collection = load_collection(collection_path) if collection_path else None
    summary = RunSummary.from_dict(data, collection=collection)
    logger.debug(
        "Loaded %d executions from %s for collection %r",
        len(summary.executions),
        path,
        summary.collection.name,
    )
    return summary

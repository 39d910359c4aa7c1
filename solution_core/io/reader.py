"""Read raw solver solution documents and apply the upload schema check."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from solution_core.errors import MalformedSolutionError

from .schemas import REQUIRED_KEY_TYPES, REQUIRED_KEYS

logger = logging.getLogger(__name__)


def validate_solution_document(document: Any) -> dict[str, Any]:
    """Reject documents missing a required top-level key or holding the wrong type.

    variables must be an object; employees, shifts and days must be arrays.
    Their contents are normalized later by the decoder.
    """
    if not isinstance(document, dict):
        raise MalformedSolutionError(list(REQUIRED_KEYS))
    missing = [key for key in REQUIRED_KEYS if document.get(key) is None]
    invalid = [
        key for key in REQUIRED_KEYS
        if key not in missing and not isinstance(document[key], REQUIRED_KEY_TYPES[key])
    ]
    if missing or invalid:
        raise MalformedSolutionError(missing, invalid)
    return document


def load_solution_text(text: str) -> dict[str, Any]:
    """Parse an uploaded solution file body and run the schema check."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Solution upload is not valid JSON: %s", exc)
        raise MalformedSolutionError(list(REQUIRED_KEYS)) from exc
    return validate_solution_document(document)


def load_solution_file(path: Path) -> dict[str, Any]:
    """Read a solution JSON file from disk.

    Raises FileNotFoundError if the file is missing and MalformedSolutionError
    if it lacks a required field.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Solution file not found: {p}")
    with open(p, encoding="utf-8") as f:
        return load_solution_text(f.read())

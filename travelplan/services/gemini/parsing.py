"""Parsing of the combined JSON plan returned by the generation provider."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

from travelplan.core.schemas import GeneratedSections
from travelplan.core.types import SECTION_NAMES

logger = logging.getLogger(__name__)


def extract_json_slice(raw: str) -> str:
    """Return the text between the first ``{`` and the last ``}`` (or ``raw`` itself)."""

    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end != -1 and end > start:
        return raw[start : end + 1]
    return raw


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(_as_text(item) for item in value)
    if isinstance(value, dict):
        return "\n".join(f"{key}: {_as_text(item)}" for key, item in value.items())
    return str(value)


def parse_combined_response(raw: str) -> Tuple[GeneratedSections, bool]:
    """Turn the provider's combined answer into sections.

    Returns ``(sections, parsed)``. When the JSON cannot be recovered the whole
    raw text becomes the overview and ``parsed`` is ``False``.
    """

    payload: Optional[Dict[str, Any]] = None
    try:
        decoded = json.loads(extract_json_slice(raw))
    except json.JSONDecodeError as exc:
        logger.warning("Combined plan response is not valid JSON: %s", exc)
    else:
        if isinstance(decoded, dict):
            payload = decoded
        else:
            logger.warning("Combined plan response is JSON but not an object: %s", type(decoded).__name__)

    if payload is None:
        return GeneratedSections(overview=raw), False

    return GeneratedSections(**{name: _as_text(payload.get(name)) for name in SECTION_NAMES}), True

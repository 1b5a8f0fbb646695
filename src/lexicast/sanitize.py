"""
Cleanup and validation of the model's text response.
"""

import json
import logging
import re

from pydantic import ValidationError

from .errors import ResponseParseError
from .models import AnalysisResult

logger = logging.getLogger("lexicast")

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")


def sanitize(text: str) -> str:
    """
    Strip markdown fences and stray prose around a JSON object.

    Removes one leading fence (``` or ```json) and one trailing fence, then
    keeps only the outermost {...} when text surrounds it. Applying it twice
    gives the same result as applying it once.
    """
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start and (start > 0 or end < len(cleaned) - 1):
        cleaned = cleaned[start : end + 1]
    return cleaned


def parse_analysis(raw_text: str) -> AnalysisResult:
    """Sanitize, decode and validate a model response."""
    json_text = sanitize(raw_text)
    try:
        data = json.loads(json_text)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        result = AnalysisResult.model_validate(data)
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        err = ResponseParseError(str(e), raw_text, json_text)
        logger.error("Failed to parse model response: %s", err)
        raise err from e

    logger.info(
        "Parsed %d segments, %d chapters, %d red / %d blue entries",
        len(result.segments),
        len(result.chapters),
        len(result.red_list),
        len(result.blue_list),
    )
    return result

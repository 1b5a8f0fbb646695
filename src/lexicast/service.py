"""
Request/response envelope around the pipeline.
"""

import logging
from typing import Any

from .errors import PipelineError
from .pipeline import AnalysisPipeline

logger = logging.getLogger("lexicast")


def failure_response(error: BaseException | str) -> dict[str, Any]:
    if isinstance(error, BaseException):
        return {"success": False, "error": str(error), "error_type": type(error).__name__}
    return {"success": False, "error": error}


async def handle_analyze_request(payload: Any, pipeline: AnalysisPipeline) -> dict[str, Any]:
    """
    Handle an inbound ``{"url": ...}`` request.

    Returns ``{"success": true, "data": ..., "metadata": ...}`` or
    ``{"success": false, "error": ...}``; never raises for pipeline failures.
    """
    url = payload.get("url") if isinstance(payload, dict) else None
    if not isinstance(url, str) or not url.strip():
        return failure_response("Please provide a video URL")

    try:
        outcome = await pipeline.run(url)
    except PipelineError as e:
        logger.error("Processing failed for %s: %s", url, e)
        return failure_response(e)
    except Exception as e:
        logger.exception("Unexpected error while processing %s", url)
        return failure_response(e)

    logger.info("Done: %s", url)
    return outcome.to_response()

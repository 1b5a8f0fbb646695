"""
Exception hierarchy for the analysis pipeline.
"""

from typing import Optional

EXCERPT_CHARS = 1000


class PipelineError(Exception):
    """Base error for every fatal pipeline failure."""


class ToolError(PipelineError):
    """Raised when the extraction tool exits with a non-zero code."""

    def __init__(self, returncode: int, output: str = ""):
        self.returncode = returncode
        self.output = output
        tail = output.strip().splitlines()[-1] if output.strip() else ""
        msg = f"Command failed with code {returncode}"
        if tail:
            msg += f": {tail}"
        super().__init__(msg)


class ToolTimeoutError(PipelineError):
    """Raised when the extraction tool does not finish in time."""


class ExtractionError(PipelineError):
    """Raised when no audio file could be produced."""


class UploadError(PipelineError):
    """Raised when uploading or polling a remote asset fails in transport."""


class AssetProcessingError(PipelineError):
    """Raised when a remote asset reaches a terminal state other than ACTIVE."""

    def __init__(self, name: str, state: str):
        self.name = name
        self.state = state
        super().__init__(f"File processing failed for {name}, state: {state}")


class AssetTimeoutError(PipelineError):
    """Raised when a remote asset does not become ready before the deadline."""

    def __init__(self, name: str, state: str, waited: float):
        self.name = name
        self.state = state
        self.waited = waited
        super().__init__(
            f"File {name} not ready after {waited:.0f}s (last state: {state})"
        )


class AnalysisError(PipelineError):
    """Raised when the generation request fails or returns nothing."""


class ResponseParseError(PipelineError):
    """
    Raised when the model response is not valid JSON or fails validation.

    Carries excerpts of the raw and sanitized text for offline diagnosis.
    """

    def __init__(self, reason: str, raw_text: str, sanitized_text: Optional[str] = None):
        self.reason = reason
        self.raw_excerpt = (raw_text or "")[:EXCERPT_CHARS]
        self.sanitized_excerpt = (sanitized_text or "")[:EXCERPT_CHARS]
        super().__init__(
            f"JSON parsing failed: {reason}\n"
            f"------- raw response (first {EXCERPT_CHARS} chars) -------\n"
            f"{self.raw_excerpt}\n"
            f"------- sanitized text (first {EXCERPT_CHARS} chars) -------\n"
            f"{self.sanitized_excerpt}"
        )


class PipelineTimeoutError(PipelineError):
    """Raised when a whole pipeline invocation exceeds its deadline."""

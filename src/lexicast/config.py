"""
Runtime settings read from the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = _env_str(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name: str, default: int) -> int:
    value = _env_str(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration shared by every pipeline invocation."""

    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    scratch_dir: Path = Path("temp")

    # Remote asset polling
    poll_interval: float = 2.0
    max_wait: float = 600.0

    pipeline_timeout: float = 1800.0
    retry_attempts: int = 3

    # yt-dlp
    ytdlp_bin: str = "yt-dlp"
    cookies_from_browser: Optional[str] = None
    cookies_file: Optional[str] = None
    user_agent: Optional[str] = None
    metadata_timeout: float = 60.0
    download_timeout: float = 900.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call load_dotenv first)."""
        return cls(
            api_key=_env_str("GOOGLE_API_KEY"),
            model=_env_str("LEXICAST_MODEL", cls.model),
            scratch_dir=Path(_env_str("LEXICAST_SCRATCH_DIR", str(cls.scratch_dir))),
            poll_interval=_env_float("LEXICAST_POLL_INTERVAL", cls.poll_interval),
            max_wait=_env_float("LEXICAST_MAX_WAIT", cls.max_wait),
            pipeline_timeout=_env_float("LEXICAST_PIPELINE_TIMEOUT", cls.pipeline_timeout),
            retry_attempts=_env_int("LEXICAST_RETRY_ATTEMPTS", cls.retry_attempts),
            ytdlp_bin=_env_str("YTDLP_BIN", cls.ytdlp_bin),
            cookies_from_browser=_env_str("YTDLP_COOKIES_FROM_BROWSER"),
            cookies_file=_env_str("YTDLP_COOKIES_FILE"),
            user_agent=_env_str("YTDLP_USER_AGENT"),
            metadata_timeout=_env_float("YTDLP_METADATA_TIMEOUT", cls.metadata_timeout),
            download_timeout=_env_float("YTDLP_DOWNLOAD_TIMEOUT", cls.download_timeout),
        )

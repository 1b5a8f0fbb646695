"""
yt-dlp process invocation.
"""

import asyncio
import logging
from typing import Optional

from .config import Settings
from .errors import ToolError, ToolTimeoutError

logger = logging.getLogger("lexicast")


async def run(cmd: list[str], *, timeout: Optional[float] = None, check: bool = True) -> str:
    """Run a command without a shell and return its stdout."""
    logger.debug("Running: %s", " ".join(map(str, cmd)))
    proc = await asyncio.create_subprocess_exec(
        *map(str, cmd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        msg = f"{cmd[0]} timed out after {timeout:.0f}s"
        raise ToolTimeoutError(msg) from None
    except asyncio.CancelledError:
        # Overall deadline hit while the tool was running.
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")
    if err.strip():
        logger.debug("%s stderr: %s", cmd[0], err.strip())
    if proc.returncode != 0 and check:
        logger.error("Command failed with code %d: %s", proc.returncode, err.strip())
        raise ToolError(proc.returncode, err or out)
    return out


def auth_args(settings: Settings) -> list[str]:
    """Cookie and user-agent arguments shared by every yt-dlp call."""
    args: list[str] = []
    if settings.cookies_from_browser:
        args += ["--cookies-from-browser", settings.cookies_from_browser]
    elif settings.cookies_file:
        args += ["--cookies", settings.cookies_file]
    if settings.user_agent:
        args += ["--user-agent", settings.user_agent]
    return args


def metadata_command(url: str, settings: Settings) -> list[str]:
    """Metadata-only JSON dump, nothing is downloaded."""
    return [
        settings.ytdlp_bin,
        "--dump-json",
        "--skip-download",
        "--no-playlist",
        "--no-warnings",
        *auth_args(settings),
        url,
    ]


def audio_command(url: str, output_template: str, settings: Settings, audio_format: str = "mp3") -> list[str]:
    """Best audio stream, transcoded to a single file."""
    return [
        settings.ytdlp_bin,
        "-f",
        "ba",
        "-x",
        "--audio-format",
        audio_format,
        "--no-playlist",
        "--no-progress",
        *auth_args(settings),
        "-o",
        output_template,
        url,
    ]

"""
Command-line interface for the video analysis pipeline.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv
from google import genai
from tqdm.asyncio import tqdm

from .config import Settings
from .pipeline import AnalysisPipeline
from .service import handle_analyze_request

logger = logging.getLogger("lexicast")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(
        description="Turn videos into bilingual transcripts, chapters and vocabulary lists"
    )

    # IO
    ap.add_argument("urls", nargs="+", metavar="URL", help="Video URL(s) to analyze")
    ap.add_argument("--output", "-o", default=None, help="Write the JSON result here instead of stdout")
    ap.add_argument("--scratch-dir", default=None, help="Directory for temporary audio files")

    # Model & timing
    ap.add_argument("--model", default=None, help="Gemini model (default: $LEXICAST_MODEL or gemini-2.5-flash)")
    ap.add_argument("--pipeline-timeout", type=float, default=None, help="Overall deadline per video, seconds")
    ap.add_argument("--max-wait", type=float, default=None, help="Max seconds to wait for remote file processing")

    # Concurrency
    ap.add_argument("--max-concurrent", type=int, default=2, help="Max videos processed at once")

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """CLI flags take precedence over environment settings."""
    overrides: dict[str, Any] = {}
    if args.model:
        overrides["model"] = args.model
    if args.scratch_dir:
        overrides["scratch_dir"] = Path(args.scratch_dir)
    if args.pipeline_timeout is not None:
        overrides["pipeline_timeout"] = args.pipeline_timeout
    if args.max_wait is not None:
        overrides["max_wait"] = args.max_wait
    return replace(settings, **overrides) if overrides else settings


async def analyze_many(
    urls: Sequence[str], pipeline: AnalysisPipeline, max_concurrent: int = 2
) -> list[dict[str, Any]]:
    """Analyze several URLs concurrently, preserving input order in the result."""
    semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def process_single(index: int, url: str) -> tuple[int, dict[str, Any]]:
        async with semaphore:
            return index, await handle_analyze_request({"url": url}, pipeline)

    tasks = [process_single(i, url) for i, url in enumerate(urls)]
    results: list[Optional[dict[str, Any]]] = [None] * len(urls)
    for finished in tqdm.as_completed(tasks, desc="Analyzing videos", disable=len(urls) < 2):
        index, response = await finished
        results[index] = response
    return results


async def main_async(argv: Optional[Sequence[str]] = None) -> int:
    """Main async CLI entry point."""
    load_dotenv()

    args = parse_args(argv)
    setup_logging(args.verbose)

    settings = apply_overrides(Settings.from_env(), args)
    if not settings.api_key:
        logger.error("GOOGLE_API_KEY is not set. Put it in .env or environment.")
        return 2

    settings.scratch_dir.mkdir(parents=True, exist_ok=True)
    client = genai.Client(api_key=settings.api_key)
    pipeline = AnalysisPipeline.from_settings(settings, client)
    logger.info("Gemini client ready (model: %s, scratch dir: %s)", settings.model, settings.scratch_dir)

    results = await analyze_many(args.urls, pipeline, args.max_concurrent)
    payload: Any = results[0] if len(results) == 1 else results
    text = json.dumps(payload, ensure_ascii=False, indent=2)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        logger.info("Saved result -> %s", args.output)
    else:
        sys.stdout.write(text + "\n")

    return 0 if all(r.get("success") for r in results) else 1


def main() -> None:
    """Main CLI entry point."""
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()

"""Command-line interface for the Gladia client.

WHY: Users need a quick way to transcribe a URL or a local file from the
terminal and see the result, without writing a script. The CLI wires the
client's full workflow (upload, submit, poll) behind a single command.

HOW: Uses argparse to accept the source, language/diarization defaults,
audio intelligence flags and polling settings. Runs the async workflow via
asyncio.run(). Status messages go to stderr; the rendered report (or the
raw JSON with --json) goes to stdout.

RULES:
- Positional argument: an http(s) URL or a local file path
- Local files are uploaded first (POST /v2/upload)
- --translate is repeatable; --subtitles takes a comma-separated list
- --callback-url switches to callback mode: the job id is printed and
  nothing is polled
- GladiaError exits with status 1 and a hint for common HTTP statuses
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gladia_client.api.client import GladiaClient
from gladia_client.api.errors import GladiaError
from gladia_client.api.models import (
    CallbackConfig,
    JobStatus,
    SubtitlesConfig,
    TranscriptionOptions,
    TranscriptionResult,
    TranslationConfig,
)
from gladia_client.config import (
    DEFAULT_DIARIZATION,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_POLLING_INTERVAL_S,
)
from gladia_client.report import render_result

SUBTITLE_FORMATS = ("srt", "vtt")

_STATUS_HINTS = {
    400: "Bad request. Please check your input parameters.",
    401: "Authentication error. Please check your API key.",
    404: "Resource not found. Please check the URL or ID.",
    429: "Rate limit exceeded. Please try again later.",
    500: "Server error. Please try again later or contact support.",
}


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _parse_subtitle_formats(value: str) -> List[str]:
    formats = [f.strip().lower() for f in value.split(",") if f.strip()]
    for fmt in formats:
        if fmt not in SUBTITLE_FORMATS:
            raise ValueError(
                "Unknown subtitle format '{}'. Available: {}".format(
                    fmt, ", ".join(SUBTITLE_FORMATS)
                )
            )
    return formats


def build_options(args: argparse.Namespace) -> TranscriptionOptions:
    """Translate CLI flags into per-call TranscriptionOptions.

    Flags that were not given stay None so client defaults still apply.
    """
    options = TranscriptionOptions()

    if args.translate:
        options.translation = True
        options.translation_config = TranslationConfig(target_languages=list(args.translate))
    if args.summarize:
        options.summarization = True
    if args.sentiment:
        options.sentiment_analysis = True
    if args.entities:
        options.named_entity_recognition = True
    if args.moderation:
        options.content_moderation = True
    if args.chapters:
        options.chapterization = True
    if args.subtitles:
        options.subtitles = True
        options.subtitles_config = SubtitlesConfig(
            formats=_parse_subtitle_formats(args.subtitles)
        )
    if args.callback_url:
        options.callback = True
        options.callback_config = CallbackConfig(url=args.callback_url)

    return options


def _print_error(error: GladiaError) -> None:
    status = error.status_code if error.status_code is not None else "Unknown"
    print("Error ({}): {}".format(status, error.message), file=sys.stderr)
    hint = _STATUS_HINTS.get(error.status_code or 0)
    if hint:
        print(hint, file=sys.stderr)


def _print_result(result: TranscriptionResult, as_json: bool) -> None:
    if result.status != JobStatus.DONE:
        _status("Job {} submitted (status: {}).".format(result.id, result.status))
        _status("Retrieve it later with its id.")
        print(result.id)
        return

    if as_json:
        print(json.dumps(result.raw, indent=2, ensure_ascii=False))
    else:
        sys.stdout.write(render_result(result))


async def _run(args: argparse.Namespace) -> TranscriptionResult:
    """Execute the upload/submit/poll workflow for one source.

    RULES:
    - URL sources are submitted directly
    - File sources must exist; they are uploaded, then submitted
    """
    options = build_options(args)
    client = GladiaClient(
        language=args.language,
        diarization=args.diarization,
        polling_interval=args.polling_interval,
        max_retries=args.max_retries,
    )

    async with client:
        if _is_url(args.source):
            return await client.transcribe(args.source, options, on_status=_status)

        path = Path(args.source).expanduser().resolve()
        if not path.is_file():
            raise FileNotFoundError("File not found: {}".format(path))
        return await client.transcribe_file(path, options, on_status=_status)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect it without network.
    """
    parser = argparse.ArgumentParser(
        prog="gladia_client",
        description="Transcribe an audio/video URL or local file with Gladia.",
    )

    parser.add_argument(
        "source",
        help="URL of the audio/video to transcribe, or a local file path to upload.",
    )

    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Language code of the audio (default: auto-detect).",
    )

    parser.add_argument(
        "--diarization",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_DIARIZATION,
        help="Enable or disable speaker diarization (default: service default).",
    )

    parser.add_argument(
        "--translate",
        action="append",
        default=None,
        metavar="LANG",
        help="Translate into LANG. Can be specified multiple times.",
    )

    parser.add_argument("--summarize", action="store_true", help="Generate a summary.")
    parser.add_argument("--sentiment", action="store_true", help="Run sentiment analysis.")
    parser.add_argument("--entities", action="store_true", help="Detect named entities.")
    parser.add_argument("--moderation", action="store_true", help="Apply content moderation.")
    parser.add_argument("--chapters", action="store_true", help="Generate chapters.")

    parser.add_argument(
        "--subtitles",
        default=None,
        metavar="FORMATS",
        help="Comma-separated subtitle formats to generate ({}).".format(
            ", ".join(SUBTITLE_FORMATS)
        ),
    )

    parser.add_argument(
        "--callback-url",
        default=None,
        help="Have Gladia POST the result to this URL instead of polling.",
    )

    parser.add_argument(
        "--polling-interval",
        type=float,
        default=DEFAULT_POLLING_INTERVAL_S,
        help="Seconds between status checks (default: %(default)s).",
    )

    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help="Maximum number of status checks (default: %(default)s).",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw result JSON instead of the text report.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m gladia_client``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        result = asyncio.run(_run(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except GladiaError as e:
        _print_error(e)
        sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _print_result(result, args.json)


if __name__ == "__main__":
    main()

"""CLI wrapper for the subtitle block library.

WHY: A saved recognizer response (or a plain transcript) often needs to be
re-rendered with different pacing, without sending the audio to the
recognizer again. This command runs the library on a file and writes SRT.

HOW: Reads the input (a path or "-" for stdin), parses it as JSON, and
falls back to treating the content as untimed text when it is not JSON.
The pacing flags are resolved through resolve_config() and the result of
format_srt() is written to the output path or stdout.

RULES:
- Usage:
    srt-blocks response.json output.srt [--min-duration 8] [--max-duration 20] [--max-chars 42]
    srt-blocks response.json            (outputs to stdout)
    cat transcript.txt | srt-blocks - output.srt
- Exit codes: 0 = success, 1 = error.
- Progress messages go to stderr; SRT content goes to stdout (if no output file).
"""

import argparse
import json
import sys
from typing import Any, List, Optional

from . import format_srt
from .presets import (
    DEFAULT_MAX_BLOCK_DURATION,
    DEFAULT_MAX_LINE_CHARS,
    DEFAULT_MIN_BLOCK_DURATION,
    resolve_config,
)


def load_transcription(raw: str) -> Any:
    """Parse recognizer output, treating non-JSON content as untimed text."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {"text": raw}
    if isinstance(data, str):
        return {"text": data}
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srt-blocks",
        description="Convert a speech-recognition response (JSON with text/chunks, "
                    "or plain text) into an SRT subtitle file.",
    )
    parser.add_argument(
        "input",
        help="Recognizer JSON or plain-text transcript. Use '-' for stdin.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output .srt path (default: stdout).",
    )
    parser.add_argument(
        "--min-duration",
        default=DEFAULT_MIN_BLOCK_DURATION,
        help="Minimum seconds per subtitle block (default: %(default)s).",
    )
    parser.add_argument(
        "--max-duration",
        default=DEFAULT_MAX_BLOCK_DURATION,
        help="Maximum seconds per subtitle block (default: %(default)s).",
    )
    parser.add_argument(
        "--max-chars",
        default=DEFAULT_MAX_LINE_CHARS,
        help="Maximum characters per line (default: %(default)s).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Run the subtitle block CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args.min_duration, args.max_duration, args.max_chars)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    try:
        if args.input == "-":
            raw = sys.stdin.read()
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                raw = f.read()
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    srt = format_srt(load_transcription(raw), config)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(srt)
        blocks = len([b for b in srt.split("\n\n") if b.strip()])
        print("Wrote {} subtitle blocks to {}".format(blocks, args.output), file=sys.stderr)
    else:
        print(srt)


if __name__ == "__main__":
    main()

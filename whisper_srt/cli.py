"""Command-line interface for the Whisper SRT converter.

WHY: Users need a simple way to turn audio/video files into subtitles from
the terminal. The CLI wires together the full pipeline — file validation,
recognition through the Hugging Face API (one request, or one per segment
for long recordings), subtitle segmentation, pluggable formatter output and
file saving — behind a single command.

HOW: Uses argparse to accept one or more input files, the subtitle pacing
options, output format selection and output directory. Several inputs are
treated as consecutive segments of one recording and stitched together by
the offset reconciler. Runs the async pipeline via asyncio.run(). Status
messages go to stderr; output files are saved next to the source (or to
--output-dir).

RULES:
- Positional arguments: input file(s); several files = consecutive segments,
  each --segment-duration long (the last one --last-segment-duration if given)
- --from-json re-renders a saved recognizer response instead of calling the API
- Validates file extension against SUPPORTED_FORMATS before any API call
- A single file larger than MAX_UPLOAD_BYTES is rejected with a hint to split it
- --formats: comma-separated formatter keys (default: srt)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (talk-2.srt)
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from srt_blocks import SegmentationConfig, format_srt, resolve_config
from whisper_srt.api.client import HuggingFaceClient, RecognitionAPIError
from whisper_srt.api.models import RecognitionResult
from whisper_srt.config import (
    DEFAULT_MAX_BLOCK_DURATION,
    DEFAULT_MAX_LINE_CHARS,
    DEFAULT_MIN_BLOCK_DURATION,
    MAX_UPLOAD_BYTES,
    SEGMENT_DURATION_S,
    SUPPORTED_FORMATS,
)
from whisper_srt.core.reconciler import AudioSegment, transcribe_segments
from whisper_srt.core.stats import summarize
from whisper_srt.formatters import DEFAULT_FORMATS, FORMATTERS
from whisper_srt.formatters.base import FormatterOutput

_RECOGNITION_SUFFIX = "-recognition"


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. talk.srt)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. talk-2.srt, talk-transcript-2.txt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 text and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_FORMATS)
    format_keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in format_keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return format_keys


def _load_recognition_json(path: Path) -> RecognitionResult:
    """Load a saved recognizer response (raises ValueError on bad JSON)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return RecognitionResult.from_dict(data)


def _output_stem(path: Path, from_json: bool) -> str:
    stem = path.stem
    if from_json and stem.endswith(_RECOGNITION_SUFFIX):
        stem = stem[: -len(_RECOGNITION_SUFFIX)]
    return stem


def _validate_audio_inputs(inputs: List[Path]) -> None:
    for path in inputs:
        ext = path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            _fail("Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_FORMATS))
            ))
        size = path.stat().st_size
        if size > MAX_UPLOAD_BYTES:
            _fail(
                "{} is {:.1f} MB, above the {:.0f} MB recognizer limit. Split the "
                "recording into consecutive segments (e.g. with ffmpeg) and pass "
                "them in order.".format(
                    path.name, size / (1024 * 1024), MAX_UPLOAD_BYTES / (1024 * 1024)
                )
            )


def _build_segments(
    inputs: List[Path],
    segment_duration: float,
    last_segment_duration: Optional[float] = None,
) -> List[AudioSegment]:
    """Pair each segment file with its length on the recording's timeline.

    RULES:
    - Every segment lasts segment_duration, except the last one when
      last_segment_duration is given (the recording rarely ends on a
      segment boundary)
    """
    segments = [AudioSegment(path=p, duration_s=segment_duration) for p in inputs]
    if segments and last_segment_duration is not None:
        segments[-1].duration_s = last_segment_duration
    return segments


async def _recognize(
    inputs: List[Path],
    model: Optional[str],
    segment_duration: float,
    last_segment_duration: Optional[float] = None,
) -> RecognitionResult:
    """Recognize one file directly, or several files as consecutive segments."""
    async with HuggingFaceClient(model=model) as client:
        if len(inputs) == 1:
            return await client.transcribe_file(inputs[0], on_status=_status)

        _status("Long recording: {} segments of {:.0f}s".format(len(inputs), segment_duration))
        segments = _build_segments(inputs, segment_duration, last_segment_duration)

        async def _transcribe(segment: AudioSegment) -> RecognitionResult:
            return await client.transcribe_file(segment.path, on_status=_status)

        return await transcribe_segments(segments, _transcribe, on_status=_status)


async def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the full recognition → segmentation → output pipeline.

    RULES:
    - Validate config, formats, inputs and output dir before any API call
    - Status messages to stderr at each step
    - Save each formatter's output files with conflict avoidance
    """
    try:
        config = resolve_config(args.min_duration, args.max_duration, args.max_chars)
    except ValueError as e:
        _fail(str(e))

    format_keys = _parse_formats(args.formats)

    inputs = [Path(p).resolve() for p in args.input_files]
    for path in inputs:
        if not path.is_file():
            _fail("File not found: {}".format(path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else inputs[0].parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.from_json:
        if len(inputs) != 1:
            _fail("--from-json takes exactly one recognizer JSON file")
        try:
            result = _load_recognition_json(inputs[0])
        except ValueError as e:
            _fail("Could not read recognizer JSON: {}".format(e))
    else:
        _validate_audio_inputs(inputs)
        if args.segment_duration <= 0:
            _fail("--segment-duration must be positive")
        if args.last_segment_duration is not None and args.last_segment_duration <= 0:
            _fail("--last-segment-duration must be positive")
        try:
            result = await _recognize(
                inputs, args.model, args.segment_duration, args.last_segment_duration
            )
        except ValueError as e:
            # Config errors (missing API key, etc.)
            _fail(str(e))
        except RecognitionAPIError as e:
            _fail(e.message)
        except httpx.HTTPError as e:
            _fail("Network error: {}".format(e))

    _status("Generating subtitles...")
    stem = _output_stem(inputs[0], args.from_json)
    saved_files = _write_outputs(result, config, format_keys, stem, output_dir)

    stats = summarize(format_srt(result.to_dict(), config), result)
    _status("")
    _status("Done! {}".format(stats.describe()))
    for f in saved_files:
        _status("  Saved: {}".format(f))


def _write_outputs(
    result: RecognitionResult,
    config: SegmentationConfig,
    format_keys: List[str],
    stem: str,
    output_dir: Path,
) -> List[Path]:
    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key](config)
        for output in formatter.format(result):
            saved.append(_save_output(output, stem, output_dir))
    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: input_files (one or more)
    - Pacing: --min-duration, --max-duration, --max-chars
    - Long recordings: --segment-duration (seconds per segment file),
      --last-segment-duration (seconds in the final, shorter file)
    - Output: --formats (comma-separated), --output-dir
    - --from-json, --model
    """
    parser = argparse.ArgumentParser(
        prog="whisper-srt",
        description="Transcribe audio/video files with a Hugging Face Whisper model "
                    "and produce SRT subtitles with configurable pacing.",
    )

    parser.add_argument(
        "input_files",
        nargs="+",
        help="Audio/video file to transcribe. Several files are treated as "
             "consecutive segments of one long recording.",
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
        help="Maximum characters per subtitle line (default: %(default)s).",
    )

    parser.add_argument(
        "--segment-duration",
        type=float,
        default=SEGMENT_DURATION_S,
        help="Duration in seconds of each segment file when several inputs "
             "are given (default: %(default)s).",
    )

    parser.add_argument(
        "--last-segment-duration",
        type=float,
        default=None,
        help="Duration in seconds of the final segment file, which is usually "
             "shorter than the others (default: same as --segment-duration).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: {}.".format(
                 ", ".join(sorted(FORMATTERS.keys())), ",".join(DEFAULT_FORMATS)
             ),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the first input).",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="Hugging Face model id (default: HF_MODEL from the environment).",
    )

    parser.add_argument(
        "--from-json",
        action="store_true",
        help="Treat the input as a saved recognizer response ({text, chunks}) "
             "and skip recognition.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        asyncio.run(_run_pipeline(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()

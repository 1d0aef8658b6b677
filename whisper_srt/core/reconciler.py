"""Long-recording offset reconciliation.

WHY: The recognizer accepts one file of limited size per request, so long
recordings are split into consecutive segments (e.g. 10 minutes each) and
recognized one at a time. Each segment's timestamps start at zero; the
subtitles need one continuous timeline.

HOW: Walks the segments in order with a running time offset. Each
segment's chunks are shifted by the offset; a text-only result becomes one
synthetic chunk spanning the whole segment. The offset then advances by the
segment's duration whether recognition succeeded or not, so a failed
segment leaves a gap instead of pulling later subtitles out of sync.

RULES:
- Segments are processed strictly sequentially
- A failed segment contributes no chunks but still advances the offset
- The merged text is the chunk texts joined by single spaces
- Retries happen inside the recognizer call; the offset is advanced exactly
  once per segment
- offset_result() and merge_results() are pure; transcribe_segments() drives
  the recognizer and reports progress via on_status
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from whisper_srt.api.models import RecognitionChunk, RecognitionResult

logger = logging.getLogger(__name__)


@dataclass
class AudioSegment:
    """One consecutive piece of a long recording.

    RULES:
    - duration_s is the segment's length on the full recording's timeline
    - path points at an already-split audio file
    """

    path: Path
    duration_s: float


def offset_result(
    result: RecognitionResult,
    offset_s: float,
    duration_s: float,
) -> list[RecognitionChunk]:
    """Move one segment's recognition result onto the full timeline.

    RULES:
    - Chunks: every start/end is shifted by offset_s; a missing start
      becomes offset_s, a missing end stays missing
    - Text only: one chunk [offset_s, offset_s + duration_s]
    - Neither chunks nor text: no chunks
    """
    if result.chunks:
        return [chunk.shifted(offset_s) for chunk in result.chunks]
    if result.text:
        return [RecognitionChunk(text=result.text, start=offset_s, end=offset_s + duration_s)]
    return []


def merge_results(
    results: Iterable[tuple[RecognitionResult | None, float]],
) -> RecognitionResult:
    """Stitch per-segment results into one continuous RecognitionResult.

    Args:
        results: (result, duration_s) per segment in recording order; a None
            result marks a segment whose recognition failed.

    Returns:
        A RecognitionResult whose chunks sit on the full recording's timeline.
    """
    all_chunks: list[RecognitionChunk] = []
    time_offset = 0.0

    for result, duration_s in results:
        if result is not None:
            all_chunks.extend(offset_result(result, time_offset, duration_s))
        time_offset += duration_s

    return RecognitionResult(
        text=" ".join(c.text for c in all_chunks),
        chunks=all_chunks,
    )


async def transcribe_segments(
    segments: Sequence[AudioSegment],
    transcribe: Callable[[AudioSegment], Awaitable[RecognitionResult]],
    on_status: Callable[[str], None] | None = None,
) -> RecognitionResult:
    """Recognize consecutive segments one by one and merge the results.

    HOW: Calls transcribe(segment) for each segment in order. Any exception
    from a segment is logged and that segment is recorded as failed; the
    remaining segments are still processed.

    Args:
        segments: Consecutive segments of one recording, in order.
        transcribe: Coroutine function recognizing a single segment.
        on_status: Optional callback for status updates.

    Returns:
        Merged RecognitionResult on one continuous timeline.
    """
    collected: list[tuple[RecognitionResult | None, float]] = []
    total = len(segments)

    for i, segment in enumerate(segments):
        if on_status:
            on_status("Transcribing part {} of {}...".format(i + 1, total))

        try:
            result = await transcribe(segment)
        except Exception:
            logger.exception("Recognition failed for segment %d (%s)", i + 1, segment.path)
            if on_status:
                on_status("  Part {} failed; continuing with the next part.".format(i + 1))
            result = None

        collected.append((result, segment.duration_s))

    return merge_results(collected)

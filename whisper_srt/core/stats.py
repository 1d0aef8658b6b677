"""Result summary for a finished conversion.

WHY: After a run, users see how much came out: the number of subtitle
blocks and the size of the transcript in words and characters.

HOW: Counts blank-line separated blocks in the SRT text and splits the
transcript text on whitespace.

RULES:
- Blocks are counted from the rendered SRT, not the block list, so the
  number always matches what was written
- Empty text counts as zero words and zero characters
"""

from __future__ import annotations

from dataclasses import dataclass

from whisper_srt.api.models import RecognitionResult


@dataclass
class TranscriptionStats:
    blocks: int
    words: int
    characters: int

    def describe(self) -> str:
        return "{} subtitle blocks | {} words | {} characters".format(
            self.blocks, self.words, self.characters
        )


def summarize(srt_content: str, result: RecognitionResult) -> TranscriptionStats:
    text = result.text or ""
    return TranscriptionStats(
        blocks=len([b for b in srt_content.split("\n\n") if b.strip()]),
        words=len(text.split()),
        characters=len(text),
    )

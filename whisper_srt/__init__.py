"""Whisper SRT Converter — speech recognition output to paced SRT subtitles.

WHY: Hosted Whisper models return either a flat list of timestamped chunks
or one untimed text block. Neither is a subtitle file. This package sends
audio to the recognizer, stitches long recordings together, and turns the
result into SRT subtitles with user-tunable pacing.

HOW: Three-stage pipeline — recognize (API client, plus the offset
reconciler for multi-segment recordings), segment (the srt_blocks library),
format (pluggable formatters). Each stage is independently testable.

RULES:
- All formatters consume the same RecognitionResult
- Adding a new output format = one new formatter module, no core changes
- Subtitle segmentation lives only in srt_blocks
"""

__version__ = "0.1.0"

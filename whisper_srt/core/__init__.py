"""Core pipeline modules that sit between the recognizer and the formatters.

WHY: Long recordings arrive as several independently recognized segments,
and every run ends with a short summary. Both are plain data handling with
no HTTP or file-system concerns.

HOW: reconciler.py stitches segment results onto one timeline, stats.py
summarizes a finished conversion. Subtitle segmentation itself lives in
the srt_blocks library.

RULES:
- No network calls here; the recognizer is passed in as a callable
- Segment results are merged strictly in recording order
"""

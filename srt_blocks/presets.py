"""Segmentation settings, defaults and pacing constants.

WHY: Callers (CLI flags, HTTP form fields, library users) tune three values:
the minimum and maximum time a subtitle block stays on screen, and the
maximum characters per line. Centralizing the defaults and the validation
here keeps every entry point consistent.

HOW: SegmentationConfig is a frozen dataclass validated in __post_init__.
resolve_config() builds one from optional overrides, falling back to the
defaults for anything missing, zero or unparsable — the same forgiving
behavior the web form had.

RULES:
- SegmentationConfig is immutable for one invocation.
- max_block_duration must be strictly greater than min_block_duration.
- All three values must be positive; max_line_chars must be an int.
- Invalid values raise ValueError at construction, never later.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_MIN_BLOCK_DURATION = 8.0
DEFAULT_MAX_BLOCK_DURATION = 20.0
DEFAULT_MAX_LINE_CHARS = 42

# Reading speed used to estimate durations when no timestamps exist.
WORDS_PER_MINUTE = 150

# Assumed span length when the recognizer gives a start but no end.
MISSING_END_PADDING = 2.0

MAX_LINES = 2


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _parse_float(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it cannot be read."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class SegmentationConfig:
    """Pacing constraints for one segmentation run.

    Attributes:
        min_block_duration: Seconds every block stays on screen at minimum.
        max_block_duration: Seconds after which the builder starts a new block.
        max_line_chars: Characters per display line (two lines per block).
    """
    min_block_duration: float = DEFAULT_MIN_BLOCK_DURATION
    max_block_duration: float = DEFAULT_MAX_BLOCK_DURATION
    max_line_chars: int = DEFAULT_MAX_LINE_CHARS

    def __post_init__(self) -> None:
        if not _is_number(self.min_block_duration) or self.min_block_duration <= 0:
            raise ValueError(
                "min_block_duration must be a positive number, got {!r}".format(
                    self.min_block_duration
                )
            )
        if not _is_number(self.max_block_duration) or self.max_block_duration <= self.min_block_duration:
            raise ValueError(
                "max_block_duration ({!r}) must be greater than min_block_duration ({!r})".format(
                    self.max_block_duration, self.min_block_duration
                )
            )
        if isinstance(self.max_line_chars, bool) or not isinstance(self.max_line_chars, int) \
                or self.max_line_chars <= 0:
            raise ValueError(
                "max_line_chars must be a positive integer, got {!r}".format(self.max_line_chars)
            )

    @property
    def max_block_chars(self) -> int:
        """Character budget for a whole block (all display lines)."""
        return self.max_line_chars * MAX_LINES


DEFAULT_CONFIG = SegmentationConfig()


def resolve_config(
    min_block_duration: Any = None,
    max_block_duration: Any = None,
    max_line_chars: Any = None,
) -> SegmentationConfig:
    """Build a SegmentationConfig from optional, possibly messy overrides.

    WHY: Values arrive as CLI strings, form fields or None. An empty or zero
    field means "use the default", not "reject the request".

    HOW: Each value is parsed as a number; None, empty strings, zero and
    unparsable input fall back to the module default. The result is then
    validated by SegmentationConfig itself.

    RULES:
    - max_line_chars is truncated to an int (like parseInt on "42.7").
    - Negative values are kept and rejected by validation.

    Raises:
        ValueError: If the resolved values break the config invariants.
    """
    min_d = _parse_float(min_block_duration) or DEFAULT_MIN_BLOCK_DURATION
    max_d = _parse_float(max_block_duration) or DEFAULT_MAX_BLOCK_DURATION
    chars = _parse_float(max_line_chars)
    chars_int = int(chars) if chars else DEFAULT_MAX_LINE_CHARS

    return SegmentationConfig(
        min_block_duration=min_d,
        max_block_duration=max_d,
        max_line_chars=chars_int or DEFAULT_MAX_LINE_CHARS,
    )

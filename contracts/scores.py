"""Shared 0-100 score type used across contracts."""

import math
from typing import Annotated, Any

from pydantic import BeforeValidator


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (built-in round() uses banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: Any) -> int:
    """Coerce a numeric score into the inclusive 0..100 range."""
    return max(0, min(100, round_half_up(float(value))))


# Every confidence and quality score is clamped on construction
Score = Annotated[int, BeforeValidator(clamp_score)]

from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import MAX_POINTS, MIN_POINTS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def clean_optional(value: Any) -> Optional[str]:
    """Trim a free-text field; blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_cni(value: Optional[str]) -> Optional[str]:
    """Comparison key for a CNI (trimmed, case-folded), None when blank."""
    text = clean_optional(value)
    return text.casefold() if text else None


def coerce_points(value: Any) -> int:
    """Turn administrator input into an integer point value.

    Anything that is not a finite number (None, NaN, "abc", booleans) becomes 0,
    and so does a number outside MIN_POINTS..MAX_POINTS. Numeric strings and
    floats are truncated toward zero.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        number = _parse_number(value.strip())
    else:
        return 0
    return number if MIN_POINTS <= number <= MAX_POINTS else 0


def _parse_number(text: str) -> int:
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return int(number) if math.isfinite(number) else 0

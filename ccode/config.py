from __future__ import annotations
import os


# Defaults
_DEFAULT_ARRAY_LIMIT = 100
_DEFAULT_SELECTOR_DEPTH = 8


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{var} must not be negative, got {value}")
    return value


def get_array_limit() -> int:
    """Longest list rendered as an array literal; longer lists use a selector."""
    return int_from_env('CCODE_ARRAY_LIMIT', _DEFAULT_ARRAY_LIMIT)


def get_selector_depth() -> int:
    return int_from_env('CCODE_SELECTOR_DEPTH', _DEFAULT_SELECTOR_DEPTH)

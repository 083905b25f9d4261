"""Utility functions for the gcdsudoku solver."""

from datetime import datetime

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"


def timestamp_str(t: float) -> str:
    """Format a UNIX timestamp in the local timezone using `TIMESTAMP_FMT`."""
    return datetime.fromtimestamp(t).astimezone().strftime(TIMESTAMP_FMT)


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


def digit_mask(digits: str) -> int:
    """Return a bitmask with bit `d` set for every digit character `d`."""
    mask = 0
    for ch in digits:
        mask |= 1 << (ord(ch) - ord("0"))
    return mask

"""
Timestamp formatting and parsing helpers.
"""

from typing import Union


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour on."""
    total = int(round(max(0.0, float(seconds))))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def parse_time(value: Union[str, int, float]) -> float:
    """
    Parse a timestamp into seconds.

    Accepts "SS", "MM:SS", "HH:MM:SS" (fractional seconds allowed in the last
    field) as well as plain numbers.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip()
        if not text:
            raise ValueError("Empty timestamp")
        parts = text.split(":")
        if len(parts) > 3:
            raise ValueError(f"Invalid timestamp: {value!r}")
        try:
            fields = [float(p) for p in parts]
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}") from None
        seconds = 0.0
        for field in fields:
            seconds = seconds * 60 + field
    if seconds < 0:
        raise ValueError(f"Negative timestamp: {value!r}")
    return seconds

"""
Wall-clock helpers for the booking grid.

Times are ``HH:MM`` strings on a single calendar day. Intervals are
half-open ``[start, end)`` so a booking ending at 10:00 does not clash
with one starting at 10:00.
"""
import re

from roombook.errors import ValidationError

TIME_RE = re.compile(r'([01]\d|2[0-3]):([0-5]\d)', re.ASCII)


def to_minutes(time_str: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight."""
    if not isinstance(time_str, str):
        raise ValidationError(f"Invalid time value: {time_str!r}")

    match = TIME_RE.fullmatch(time_str)
    if not match:
        raise ValidationError(f"Invalid time '{time_str}', expected HH:MM between 00:00 and 23:59.")
    return int(match.group(1)) * 60 + int(match.group(2))


def from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """True if [a_start, a_end) and [b_start, b_end) share at least one minute."""
    return to_minutes(a_start) < to_minutes(b_end) and to_minutes(a_end) > to_minutes(b_start)


def is_valid_range(start_time: str, end_time: str) -> bool:
    return to_minutes(start_time) < to_minutes(end_time)


def generate_slots(day_start='07:00', day_end='18:00', step=30):
    """
    Return the daily grid from ``day_start`` to ``day_end`` inclusive.

    With the defaults this is 07:00, 07:30 ... 17:30, 18:00 (23 slots).
    """
    start = to_minutes(day_start)
    end = to_minutes(day_end)
    if step <= 0:
        raise ValueError("Slot step must be positive.")
    return [from_minutes(m) for m in range(start, end + 1, step)]

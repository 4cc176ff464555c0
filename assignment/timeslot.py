"""
Time-of-day helpers for the rota.

Shift times are stored as zero-padded 24h "HH:MM" strings scoped to a single
calendar day, so plain string comparison orders them correctly. Everything
that compares two times goes through this module.
"""
from __future__ import annotations
import re
from datetime import date, datetime

_HHMM = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def normalize_hhmm(value: str) -> str:
    """Validate a time of day and zero-pad the hour ("9:00" -> "09:00")."""
    m = _HHMM.match((value or "").strip())
    if not m:
        raise ValueError("Invalid time format (HH:MM)")
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def windows_overlap(cand_start: str, cand_end: str, cur_start: str, cur_end: str) -> bool:
    """
    True when the candidate window [cand_start, cand_end) overlaps the
    existing window [cur_start, cur_end).

    Windows that only touch (one ends when the other starts) do not overlap.
    A window whose end sorts before its start (crossing midnight) is compared
    as-is, without wrapping to the next day.
    """
    return (
        (cur_start <= cand_start < cur_end)
        or (cur_start < cand_end <= cur_end)
        or (cand_start <= cur_start and cand_end >= cur_end)
    )


def to_day(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    raise TypeError(f"cannot convert {type(value).__name__} to a calendar day")


def minutes_between(start: str, end: str) -> int:
    sh, sm = (int(p) for p in start.split(":"))
    eh, em = (int(p) for p in end.split(":"))
    return (eh * 60 + em) - (sh * 60 + sm)

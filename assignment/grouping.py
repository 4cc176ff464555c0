"""
Rebuild logical shift groups from per-day assignment rows.

One scheduling action ("this shift, Mon-Fri, for these people") is stored as
one row per employee per day. Rows written by the current API share a
``group_id``; older rows have none and are grouped by ``legacy_group_key``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union


# ---------- person references ----------

@dataclass(frozen=True)
class Reference:
    """Only the id of a related record is known."""
    id: int


@dataclass(frozen=True)
class Expanded:
    """The related record was loaded alongside the row."""
    id: int
    name: str = ""
    email: str = ""


PersonRef = Union[Reference, Expanded]


def person_ref(ref_id: Optional[int], loaded: Any = None) -> Optional[PersonRef]:
    if loaded is not None and getattr(loaded, "id", None) is not None:
        first = getattr(loaded, "first_name", "") or ""
        last = getattr(loaded, "last_name", "") or ""
        return Expanded(
            id=loaded.id,
            name=f"{first} {last}".strip(),
            email=getattr(loaded, "email", "") or "",
        )
    if ref_id is None:
        return None
    return Reference(id=ref_id)


def _name(ref: Optional[PersonRef]) -> str:
    return ref.name if isinstance(ref, Expanded) else ""


def _email(ref: Optional[PersonRef]) -> str:
    return ref.email if isinstance(ref, Expanded) else ""


def _enum_value(v: Any) -> Any:
    return getattr(v, "value", v)


# ---------- output shape ----------

@dataclass
class RosterEntry:
    employee_id: int
    employee_name: str
    email: str
    start_time: str
    end_time: str


@dataclass
class ShiftGroup:
    id: str
    group_id: Optional[str]
    shift_name: str
    start_date: date
    end_date: date
    start_time: str
    end_time: str
    location: str
    work_type: str
    assigned_by: Optional[int]
    assigned_by_name: str
    assigned_employees: list[RosterEntry] = field(default_factory=list)
    assignment_ids: list[int] = field(default_factory=list)
    key: str = field(default="", repr=False)


# ---------- keys ----------

def legacy_group_key(row: Any) -> str:
    """
    Synthetic key for rows saved without a group_id.

    Rows sharing shift parameters, assigner and creation minute are taken to
    come from the same bulk action. Two separate actions with identical
    parameters in the same minute are merged.
    """
    created = getattr(row, "created_at", None)
    bucket = created.strftime("%Y-%m-%dT%H:%M") if isinstance(created, datetime) else ""
    assigner = person_ref(getattr(row, "assigned_by", None), getattr(row, "assigner", None))
    assigner_id = "" if assigner is None else str(assigner.id)
    parts = [
        row.shift_name or "",
        row.start_time or "",
        row.end_time or "",
        str(_enum_value(row.location) or ""),
        str(_enum_value(row.work_type) or ""),
        assigner_id,
        bucket,
    ]
    return "legacy:" + "|".join(parts)


def group_key(row: Any) -> str:
    if row.group_id:
        return f"group:{row.group_id}"
    return legacy_group_key(row)


def _row_span(row: Any) -> tuple[date, date]:
    if row.date is not None:
        return row.date, row.date
    return row.start_date, row.end_date


def _header_rank(row: Any) -> tuple:
    start, _ = _row_span(row)
    return (start, row.id)


# ---------- grouping ----------

def build_groups(rows: Iterable[Any]) -> list[ShiftGroup]:
    """
    Collapse per-day rows into ShiftGroup records sorted by start date.

    Group membership, spans and rosters do not depend on input order. The
    order of ``assigned_employees`` and ``assignment_ids`` follows the input.
    Header fields come from the group's earliest row (by date, then id).
    """
    groups: dict[str, ShiftGroup] = {}
    header_rows: dict[str, Any] = {}
    seen_employees: dict[str, set[int]] = {}

    for row in rows:
        key = group_key(row)
        start, end = _row_span(row)

        g = groups.get(key)
        if g is None:
            g = ShiftGroup(
                id="",
                group_id=row.group_id or None,
                shift_name="",
                start_date=start,
                end_date=end,
                start_time="",
                end_time="",
                location="",
                work_type="",
                assigned_by=None,
                assigned_by_name="",
                key=key,
            )
            groups[key] = g
            seen_employees[key] = set()

        if key not in header_rows or _header_rank(row) < _header_rank(header_rows[key]):
            header_rows[key] = row

        g.assignment_ids.append(row.id)

        emp = person_ref(row.employee_id, getattr(row, "employee", None))
        if emp is not None and emp.id not in seen_employees[key]:
            seen_employees[key].add(emp.id)
            g.assigned_employees.append(RosterEntry(
                employee_id=emp.id,
                employee_name=_name(emp),
                email=_email(emp),
                start_time=row.start_time,
                end_time=row.end_time,
            ))

        if start is not None and (g.start_date is None or start < g.start_date):
            g.start_date = start
        if end is not None and (g.end_date is None or end > g.end_date):
            g.end_date = end

    for key, g in groups.items():
        head = header_rows[key]
        assigner = person_ref(getattr(head, "assigned_by", None), getattr(head, "assigner", None))
        g.id = g.group_id or str(head.id)
        g.shift_name = head.shift_name or ""
        g.start_time = head.start_time
        g.end_time = head.end_time
        g.location = _enum_value(head.location)
        g.work_type = _enum_value(head.work_type)
        g.assigned_by = assigner.id if assigner else None
        g.assigned_by_name = _name(assigner)

    return sorted(groups.values(), key=lambda g: (g.start_date, g.key))

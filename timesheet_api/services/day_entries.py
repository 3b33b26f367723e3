# timesheet_api/services/day_entries.py
"""
Transactional write path for day entries.

A batch maps ISO dates to the complete list of entries for that date. Every
date in the batch is replaced as a whole: existing rows are deleted, non-zero
entries are inserted, and the expected-hours snapshot for the date is upserted.
The week's Period total is refreshed in the same transaction and a closed
Period rejects the whole batch.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
import logging
import math

from timesheet_api.common.errors import PeriodClosedError, ValidationError
from timesheet_api.extensions import db, dialect_insert
from timesheet_api.models.day_entry import DAY_TYPES, DayEntry, DayExpectation
from timesheet_api.models.employee import Employee
from timesheet_api.models.project import Project
from timesheet_api.services.expectations import resolve_schedule
from timesheet_api.services.period_store import as_hours, get_or_create
from timesheet_api.services.weeks import is_date_iso, iso_week_key, monday_of, parse_iso

log = logging.getLogger(__name__)

MAX_DAY_HOURS = 24


@dataclass
class EntryIn:
    type: str
    hours: Decimal
    project_id: Optional[int] = None
    note: Optional[str] = None


def _as_hours(raw, date_iso: str) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"Invalid hours for {date_iso}", payload={"date": date_iso, "field": "hours"})
    try:
        h = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid hours for {date_iso}", payload={"date": date_iso, "field": "hours"})
    if not math.isfinite(h) or h < 0 or h > MAX_DAY_HOURS:
        raise ValidationError(f"Invalid hours for {date_iso}", payload={"date": date_iso, "field": "hours"})
    hours = as_hours(h)
    if h > 0 and hours == 0:
        # would be stored as 0.00 and silently dropped
        raise ValidationError(f"Hours for {date_iso} must be at least 0.01", payload={"date": date_iso, "field": "hours"})
    return hours


def _as_project_id(raw, date_iso: str) -> Optional[int]:
    if raw in (None, ""):
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid project_id for {date_iso}", payload={"date": date_iso, "field": "project_id"})
    try:
        pid = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid project_id for {date_iso}", payload={"date": date_iso, "field": "project_id"})
    if pid <= 0:
        raise ValidationError(f"Invalid project_id for {date_iso}", payload={"date": date_iso, "field": "project_id"})
    return pid


def validate_entries(entries_by_date, employee: Employee | None = None) -> Dict[date, List[EntryIn]]:
    """
    Check a whole batch before anything is written.

    Raises ValidationError on: empty batch, malformed date key, unknown type,
    hours outside 0..24 (or rounding to 0.00), a date adding up to more than 24,
    dates spanning more than one Monday..Sunday week,
    positive hours outside the employee's employment window, unknown project.
    """
    if not isinstance(entries_by_date, dict) or not entries_by_date:
        raise ValidationError("entries are required in format {date: [entry]}", payload={"field": "entries"})

    batch: Dict[date, List[EntryIn]] = {}
    for date_iso, rows in entries_by_date.items():
        if not is_date_iso(date_iso):
            raise ValidationError(f"Invalid date: {date_iso}", payload={"date": date_iso})
        try:
            d = parse_iso(date_iso)
        except ValueError:
            raise ValidationError(f"Invalid date: {date_iso}", payload={"date": date_iso})
        if rows is None:
            rows = []
        if not isinstance(rows, list):
            raise ValidationError(f"Entries for {date_iso} must be a list", payload={"date": date_iso})

        parsed: List[EntryIn] = []
        for row in rows:
            if not isinstance(row, dict):
                raise ValidationError(f"Invalid entry for {date_iso}", payload={"date": date_iso})
            if row.get("type") not in DAY_TYPES:
                raise ValidationError(f"Invalid type for {date_iso}", payload={"date": date_iso, "field": "type"})
            note = row.get("note")
            if note is not None and not isinstance(note, str):
                raise ValidationError(f"Invalid note for {date_iso}", payload={"date": date_iso, "field": "note"})
            parsed.append(EntryIn(
                type=row["type"],
                hours=_as_hours(row.get("hours"), date_iso),
                project_id=_as_project_id(row.get("project_id", row.get("projectId")), date_iso),
                note=note,
            ))
        if sum((e.hours for e in parsed), Decimal("0")) > MAX_DAY_HOURS:
            raise ValidationError(
                f"Entries for {date_iso} exceed {MAX_DAY_HOURS} hours",
                payload={"date": date_iso, "field": "hours"},
            )
        batch[d] = parsed

    mondays = {monday_of(d) for d in batch}
    if len(mondays) > 1:
        raise ValidationError(
            "All dates in one batch must belong to the same Monday-Sunday week",
            payload={"weeks": sorted(iso_week_key(m) for m in mondays)},
        )

    if employee is not None:
        for d, rows in batch.items():
            if any(e.hours > 0 for e in rows) and not employee.employed_on(d):
                raise ValidationError(
                    f"{d.isoformat()} is outside the employment period",
                    payload={"date": d.isoformat()},
                )

    project_ids = {e.project_id for rows in batch.values() for e in rows if e.project_id}
    if project_ids:
        known = {pid for (pid,) in db.session.query(Project.id).filter(Project.id.in_(project_ids)).all()}
        missing = sorted(project_ids - known)
        if missing:
            raise ValidationError("Unknown project_id", payload={"project_ids": missing})

    return batch


def batch_total(batch: Dict[date, List[EntryIn]]) -> Decimal:
    return sum((e.hours for rows in batch.values() for e in rows), Decimal("0"))


def _upsert_expectation(employee_id: int, d: date, expected, now: datetime):
    stmt = dialect_insert(DayExpectation.__table__).values(
        employee_id=employee_id,
        work_date=d,
        expected_hours=as_hours(expected),
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["employee_id", "work_date"],
        set_={"expected_hours": stmt.excluded.expected_hours, "updated_at": now},
    )
    db.session.execute(stmt)


def replace_day_entries(employee_id: int, settings_id: int | None, entries_by_date,
                        employee: Employee | None = None):
    """
    Replace every entry for the dates in `entries_by_date` in one transaction.

    Order inside the transaction:
      1. get-or-create the week's Period (row locked) and set its total
      2. reject with PeriodClosedError if the Period is closed
      3. delete existing entries for the batch dates
      4. insert non-zero entries
      5. upsert expectation snapshots for every batch date

    Any failure rolls back all of it, the total update included.
    Returns the Period.
    """
    batch = validate_entries(entries_by_date, employee=employee)
    dates = sorted(batch)
    total = batch_total(batch)
    week_key = iso_week_key(monday_of(dates[0]))
    now = datetime.utcnow()

    try:
        period = get_or_create(employee_id, dates[0], total_hours=total, lock=True)
        period.total_hours = total
        db.session.flush()

        if period.closed:
            log.warning("rejected entries for closed period employee=%s week=%s", employee_id, week_key)
            raise PeriodClosedError(week_key)

        (DayEntry.query
            .filter(DayEntry.employee_id == employee_id, DayEntry.work_date.in_(dates))
            .delete(synchronize_session="fetch"))

        inserted = 0
        for d in dates:
            for e in batch[d]:
                if e.hours == 0:
                    continue
                db.session.add(DayEntry(
                    employee_id=employee_id,
                    work_date=d,
                    type=e.type,
                    project_id=e.project_id,
                    hours=e.hours,
                    note=e.note,
                    updated_at=now,
                ))
                inserted += 1

        schedule = resolve_schedule(settings_id)
        for d in dates:
            _upsert_expectation(employee_id, d, schedule[d.weekday()], now)

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info("replaced entries employee=%s week=%s dates=%d rows=%d total=%s",
             employee_id, week_key, len(dates), inserted, total)
    return period

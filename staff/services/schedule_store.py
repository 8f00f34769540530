"""
schedule_store.py
-----------------
Weekly working hours: one row per (master, weekday), always all seven.

Form fields (weekday d = 0..6, 0 = Sunday):
    wh-{d}-isClosed   checkbox; present/checked means closed, regardless of times
    wh-{d}-start      "HH:MM" (or minutes)
    wh-{d}-end        "HH:MM" (or minutes)

Rules:
- Closed day -> start = end = 0.
- Open day with end <= start -> end = min(1440, start + 60).
- Malformed times degrade to midnight (see time_model); no error is raised.
- save_week() writes all seven rows in one transaction or none of them.
"""

import logging

from django.db import transaction

from ..models import WeeklyScheduleEntry
from .time_model import MIN_OPEN_WINDOW, MINUTES_PER_DAY, minutes_to_clock, parse_minutes_field

logger = logging.getLogger(__name__)

WEEKDAYS = range(7)
CHECKED_VALUES = {"on", "1", "true", "yes"}


def is_checked(value) -> bool:
    return value is not None and str(value).strip().lower() in CHECKED_VALUES


def normalize_day(is_closed, start, end):
    """Apply the closed/open rules to one weekday; returns (is_closed, start, end)."""
    if is_closed:
        return True, 0, 0
    start_minutes = parse_minutes_field(start)
    end_minutes = parse_minutes_field(end)
    if end_minutes <= start_minutes:
        end_minutes = min(MINUTES_PER_DAY, start_minutes + MIN_OPEN_WINDOW)
    return False, start_minutes, end_minutes


def parse_week(data):
    """
    Read the seven weekday rows from submitted form data.

    Args:
        data: QueryDict/dict of form fields

    Returns:
        list of 7 dicts {weekday, is_closed, start_minutes, end_minutes}
    """
    entries = []
    for weekday in WEEKDAYS:
        is_closed, start, end = normalize_day(
            is_checked(data.get(f"wh-{weekday}-isClosed")),
            data.get(f"wh-{weekday}-start"),
            data.get(f"wh-{weekday}-end"),
        )
        entries.append({
            "weekday": weekday,
            "is_closed": is_closed,
            "start_minutes": start,
            "end_minutes": end,
        })
    return entries


class WeeklyScheduleStore:
    def save_week(self, staff, entries):
        """
        Upsert all seven weekday rows for `staff` atomically.

        Raises:
            ValueError: entries do not cover weekdays 0..6 exactly once
        """
        weekdays = sorted(e["weekday"] for e in entries)
        if weekdays != list(WEEKDAYS):
            raise ValueError(f"Expected one entry per weekday 0..6, got {weekdays}.")

        with transaction.atomic():
            rows = []
            for entry in entries:
                row, _created = WeeklyScheduleEntry.objects.update_or_create(
                    staff=staff,
                    weekday=entry["weekday"],
                    defaults={
                        "is_closed": entry["is_closed"],
                        "start_minutes": entry["start_minutes"],
                        "end_minutes": entry["end_minutes"],
                    },
                )
                rows.append(row)

        logger.info("Saved weekly schedule for master %s", staff.pk)
        return rows

    def save_from_form(self, staff, data):
        return self.save_week(staff, parse_week(data))

    def ensure_week(self, staff):
        """Create any missing weekday rows (closed by default)."""
        existing = set(staff.working_hours.values_list("weekday", flat=True))
        missing = [
            WeeklyScheduleEntry(staff=staff, weekday=d, is_closed=True, start_minutes=0, end_minutes=0)
            for d in WEEKDAYS if d not in existing
        ]
        if missing:
            WeeklyScheduleEntry.objects.bulk_create(missing)
        return len(missing)

    def week_rows(self, staff):
        """Seven display rows in weekday order, with "HH:MM" strings."""
        by_day = {row.weekday: row for row in staff.working_hours.all()}
        labels = dict(WeeklyScheduleEntry.WEEKDAY_CHOICES)
        rows = []
        for weekday in WEEKDAYS:
            row = by_day.get(weekday)
            rows.append({
                "weekday": weekday,
                "label": labels[weekday],
                "is_closed": row.is_closed if row else True,
                "start": minutes_to_clock(row.start_minutes if row else 0),
                "end": minutes_to_clock(row.end_minutes if row else 0),
            })
        return rows

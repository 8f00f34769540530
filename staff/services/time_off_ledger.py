"""
time_off_ledger.py
------------------
Days off and partial-day closures for a master.

Form fields:
    to-date-start  YYYY-MM-DD (required)
    to-date-end    YYYY-MM-DD (optional; missing or earlier than start -> single day)
    to-closed      checkbox; checked means the whole day [0, 1440]
    to-start       "HH:MM" or minutes (ignored when closed)
    to-end         "HH:MM" or minutes (ignored when closed)
    to-reason      free text, blank -> NULL

One TimeOffEntry row is written per calendar day of the inclusive range,
all in one transaction. Unlike the weekly schedule, no repair is applied
to an end time at or before the start time.
"""

import logging
import re
from datetime import date, timedelta

from django.db import transaction

from ..models import TimeOffEntry
from .schedule_store import is_checked
from .time_model import MINUTES_PER_DAY, parse_minutes_field

logger = logging.getLogger(__name__)

_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class TimeOffDateError(ValueError):
    """The start date of a time-off request is missing or malformed."""


def parse_day(value):
    """'YYYY-MM-DD' -> date, or None when malformed or not a real calendar day."""
    match = _DAY_RE.match((value or "").strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def expand_days(start, end=None):
    """Every day from start to end inclusive; end None or before start -> [start]."""
    if end is None or end < start:
        end = start
    return [start + timedelta(days=n) for n in range((end - start).days + 1)]


class TimeOffLedger:
    def add(self, staff, date_start, date_end=None, closed=False, start=None, end=None, reason=None):
        """
        Record time off for every day of [date_start, date_end].

        Raises:
            TimeOffDateError: date_start does not parse (nothing is written)
        """
        first_day = parse_day(date_start)
        if first_day is None:
            raise TimeOffDateError(f"Invalid start date: {date_start!r}")
        days = expand_days(first_day, parse_day(date_end))

        if closed:
            start_minutes, end_minutes = 0, MINUTES_PER_DAY
        else:
            start_minutes, end_minutes = parse_minutes_field(start), parse_minutes_field(end)

        reason = (reason or "").strip() or None

        with transaction.atomic():
            created = TimeOffEntry.objects.bulk_create([
                TimeOffEntry(
                    staff=staff,
                    date=day,
                    start_minutes=start_minutes,
                    end_minutes=end_minutes,
                    reason=reason,
                )
                for day in days
            ])

        logger.info("Added %d day(s) of time off for master %s from %s", len(created), staff.pk, first_day)
        return created

    def add_from_form(self, staff, data):
        return self.add(
            staff,
            date_start=data.get("to-date-start") or data.get("to-date"),
            date_end=data.get("to-date-end"),
            closed=is_checked(data.get("to-closed")),
            start=data.get("to-start"),
            end=data.get("to-end"),
            reason=data.get("to-reason"),
        )

    def remove(self, staff, time_off_id) -> int:
        """Delete one entry of this master; unknown ids remove nothing."""
        with transaction.atomic():
            deleted, _per_model = TimeOffEntry.objects.filter(staff=staff, pk=time_off_id).delete()
        return deleted

    def upcoming(self, staff, today):
        return staff.time_off.filter(date__gte=today).order_by("date", "start_minutes", "id")

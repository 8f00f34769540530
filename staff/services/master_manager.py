"""
master_manager.py
-----------------
Create and edit master profiles.

Profile rules:
- name: 2..100 characters
- email: valid address, unique (case-insensitive)
- phone: 5..20 characters of digits, spaces, + - ( ) .
- birth date: YYYY-MM-DD
- bio: optional, at most 500 characters

Masters are never hard-deleted here; set_active() is the lifecycle switch.
"""

import logging
import re

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from ..models import StaffMember
from .schedule_store import WeeklyScheduleStore
from .time_off_ledger import parse_day

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^[+0-9().\-\s]+$")


class ProfileError(ValueError):
    """Profile input rejected; `code` goes into the redirect (?error=...)."""

    def __init__(self, code, message=""):
        super().__init__(message or code)
        self.code = code


def clean_profile(data):
    """
    Validate submitted profile fields.

    Returns:
        dict ready for StaffMember(**fields)

    Raises:
        ProfileError("validation"): any field is invalid
    """
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip()
    phone = (data.get("phone") or "").strip()
    bio = (data.get("bio") or "").strip() or None
    birth_date = parse_day(data.get("birthDate") or data.get("birth_date"))

    problems = []
    if not 2 <= len(name) <= 100:
        problems.append("name must be 2-100 characters")
    try:
        validate_email(email)
    except ValidationError:
        problems.append("invalid email")
    if not (5 <= len(phone) <= 20 and PHONE_RE.match(phone)):
        problems.append("invalid phone")
    if birth_date is None:
        problems.append("invalid birth date")
    if bio and len(bio) > 500:
        problems.append("bio is longer than 500 characters")

    if problems:
        raise ProfileError("validation", "; ".join(problems))

    return {"name": name, "email": email, "phone": phone, "birth_date": birth_date, "bio": bio}


def _email_taken(email, exclude_pk=None) -> bool:
    qs = StaffMember.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


class MasterManager:
    def __init__(self):
        self.schedule = WeeklyScheduleStore()

    def create(self, data):
        """
        Create a master with seven (closed) schedule rows.

        Raises:
            ProfileError: "validation" or "unique" (email already used)
        """
        fields = clean_profile(data)
        if _email_taken(fields["email"]):
            raise ProfileError("unique", "Email already used.")
        try:
            with transaction.atomic():
                staff = StaffMember.objects.create(**fields)
                self.schedule.ensure_week(staff)
        except IntegrityError:
            raise ProfileError("unique", "Email already used.")
        logger.info("Created master %s (%s)", staff.pk, staff.email)
        return staff

    def update_profile(self, staff, data):
        fields = clean_profile(data)
        if _email_taken(fields["email"], exclude_pk=staff.pk):
            raise ProfileError("unique", "Email already used.")
        for key, value in fields.items():
            setattr(staff, key, value)
        staff.save(update_fields=list(fields))
        return staff

    def set_active(self, staff, active: bool):
        staff.is_active = active
        staff.save(update_fields=["is_active"])
        logger.info("Master %s %s", staff.pk, "activated" if active else "deactivated")
        return staff

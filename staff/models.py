# staff/models.py
#
# Purpose:
# - Masters (staff members) and their working time.
#
# Design highlights:
# - StaffMember: profile + the services they offer (M2M to catalog.ServiceNode).
#   • Never hard-deleted from the admin screens; is_active is the lifecycle switch.
#   • avatar_url is a public /uploads/masters/<id>/... URL.
# - WeeklyScheduleEntry: exactly one row per (master, weekday), weekday 0=Sunday..6=Saturday.
#   • Times are minutes since midnight, 0..1440.
#   • Closed days are stored as 0/0.
# - TimeOffEntry: one row per calendar day off (or partial day), with a reason.
#   • [0, 1440] means the whole day.
#
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .services.time_model import MINUTES_PER_DAY, format_interval, minutes_to_clock

minute_validators = [MinValueValidator(0), MaxValueValidator(MINUTES_PER_DAY)]


# -------------------------
# Master / staff member
# -------------------------
class StaffMember(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    bio = models.TextField(null=True, blank=True)
    avatar_url = models.CharField(max_length=500, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    services = models.ManyToManyField(
        "catalog.ServiceNode",
        blank=True,
        related_name="masters",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


# -------------------------
# Weekly working hours
# -------------------------
class WeeklyScheduleEntry(models.Model):
    WEEKDAY_CHOICES = [
        (0, "Sunday"),
        (1, "Monday"),
        (2, "Tuesday"),
        (3, "Wednesday"),
        (4, "Thursday"),
        (5, "Friday"),
        (6, "Saturday"),
    ]

    staff = models.ForeignKey(StaffMember, on_delete=models.CASCADE, related_name="working_hours")
    weekday = models.PositiveSmallIntegerField(
        choices=WEEKDAY_CHOICES,
        validators=[MinValueValidator(0), MaxValueValidator(6)],
    )
    is_closed = models.BooleanField(default=False)
    start_minutes = models.PositiveSmallIntegerField(default=0, validators=minute_validators)
    end_minutes = models.PositiveSmallIntegerField(default=0, validators=minute_validators)

    class Meta:
        ordering = ["staff_id", "weekday"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "weekday"], name="uniq_working_hours_staff_weekday"),
        ]

    def __str__(self):
        day = self.get_weekday_display()
        if self.is_closed:
            return f"{self.staff_id} {day}: closed"
        return f"{self.staff_id} {day}: {minutes_to_clock(self.start_minutes)}–{minutes_to_clock(self.end_minutes)}"


# -------------------------
# Days off / partial closures
# -------------------------
class TimeOffEntry(models.Model):
    staff = models.ForeignKey(StaffMember, on_delete=models.CASCADE, related_name="time_off")
    date = models.DateField()
    start_minutes = models.PositiveSmallIntegerField(default=0, validators=minute_validators)
    end_minutes = models.PositiveSmallIntegerField(default=MINUTES_PER_DAY, validators=minute_validators)
    reason = models.CharField(max_length=300, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "start_minutes", "id"]

    def __str__(self):
        return f"{self.staff_id} {self.date}: {self.interval_display}"

    @property
    def interval_display(self):
        return format_interval(self.start_minutes, self.end_minutes)

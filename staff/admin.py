# staff/admin.py
from django.contrib import admin

from .models import StaffMember, TimeOffEntry, WeeklyScheduleEntry


class WeeklyScheduleInline(admin.TabularInline):
    model = WeeklyScheduleEntry
    extra = 0
    max_num = 7


class TimeOffInline(admin.TabularInline):
    model = TimeOffEntry
    extra = 0


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "email")
    filter_horizontal = ("services",)
    inlines = [WeeklyScheduleInline, TimeOffInline]


@admin.register(TimeOffEntry)
class TimeOffEntryAdmin(admin.ModelAdmin):
    list_display = ("staff", "date", "interval_display", "reason")
    list_filter = ("staff",)
    date_hierarchy = "date"

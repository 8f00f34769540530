# staff/views.py
#
# Purpose:
# - Staff-only screens to manage masters: list, create, and a tabbed detail page
#   (profile, services, schedule) with one POST handler per form.
# - Read-only JSON for masters with their weekly hours.
#
# Redirect contract after a successful save:
# - intent=save_close  -> back to the master list
# - otherwise          -> /admin/masters/<id>/?tab=<profile|services|schedule>&saved=1
# Failures come back as ?tab=...&error=<code> without saved=1.
#
import logging

from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from rest_framework import viewsets

from catalog.models import ServiceNode
from catalog.services.tree_builder import build_tree, flatten_tree
from catalog.views import IsStaffOnly
from uploads.services.validators import UploadRejected

from .models import StaffMember
from .serializers import StaffMemberSerializer
from .services.avatars import clear_avatar, replace_avatar
from .services.master_manager import MasterManager, ProfileError
from .services.schedule_store import WeeklyScheduleStore
from .services.service_assignment import parse_ids, set_staff_services
from .services.time_off_ledger import TimeOffDateError, TimeOffLedger

logger = logging.getLogger(__name__)

TABS = ("profile", "services", "schedule")


def back_to_profile(staff_id, tab, intent=None):
    if intent == "save_close":
        return redirect("staff:master_list")
    url = reverse("staff:master_detail", args=[staff_id])
    return redirect(f"{url}?tab={tab}&saved=1")


def back_with_error(staff_id, tab, code):
    url = reverse("staff:master_detail", args=[staff_id])
    return redirect(f"{url}?tab={tab}&error={code}")


# -------------------- List / create --------------------
@staff_member_required
@require_http_methods(["GET"])
def master_list(request):
    show_all = request.GET.get("show") == "all"
    qs = StaffMember.objects.all() if show_all else StaffMember.objects.filter(is_active=True)
    qs = qs.order_by("-is_active", "name")
    return render(request, "staff/master_list.html", {"masters": qs, "show_all": show_all})


@staff_member_required
@require_http_methods(["GET", "POST"])
def master_new(request):
    if request.method == "GET":
        return render(request, "staff/master_new.html", {"error": request.GET.get("error")})

    try:
        staff = MasterManager().create(request.POST)
    except ProfileError as e:
        logger.info("Master create rejected: %s", e)
        return redirect(f"{reverse('staff:master_new')}?error={e.code}")

    messages.success(request, f"Created master “{staff.name}”.")
    return redirect("staff:master_list")


# -------------------- Detail --------------------
@staff_member_required
@require_http_methods(["GET"])
def master_detail(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    tab = request.GET.get("tab")
    if tab not in TABS:
        tab = "profile"

    checked = set(staff.services.values_list("pk", flat=True))
    tree = build_tree(ServiceNode.objects.filter(is_active=True), extra_fields=("kind",))
    service_rows = [
        {
            "depth": depth,
            "indent": depth * 1.5,
            "node": node,
            "is_group": bool(node["children"]),
            "checked": node["id"] in checked,
        }
        for depth, node in flatten_tree(tree)
    ]

    ctx = {
        "staff": staff,
        "tab": tab,
        "saved": request.GET.get("saved") == "1",
        "error": request.GET.get("error"),
        "service_rows": service_rows,
        "week_rows": WeeklyScheduleStore().week_rows(staff),
        "time_off": TimeOffLedger().upcoming(staff, timezone.localdate()),
    }
    return render(request, "staff/master_detail.html", ctx)


# -------------------- Detail POST handlers --------------------
@staff_member_required
@require_http_methods(["POST"])
def save_profile(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    try:
        MasterManager().update_profile(staff, request.POST)
    except ProfileError as e:
        return back_with_error(staff.pk, "profile", e.code)
    return back_to_profile(staff.pk, "profile", request.POST.get("intent"))


@staff_member_required
@require_http_methods(["POST"])
def save_services(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    set_staff_services(staff, parse_ids(request.POST.getlist("serviceId")))
    return back_to_profile(staff.pk, "services", request.POST.get("intent"))


@staff_member_required
@require_http_methods(["POST"])
def save_schedule(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    WeeklyScheduleStore().save_from_form(staff, request.POST)
    return back_to_profile(staff.pk, "schedule", request.POST.get("intent"))


@staff_member_required
@require_http_methods(["POST"])
def add_time_off(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    try:
        TimeOffLedger().add_from_form(staff, request.POST)
    except TimeOffDateError as e:
        logger.info("Time off rejected for master %s: %s", staff.pk, e)
        return redirect(f"{reverse('staff:master_detail', args=[staff.pk])}?tab=schedule")
    return back_to_profile(staff.pk, "schedule", request.POST.get("intent"))


@staff_member_required
@require_http_methods(["POST"])
def remove_time_off(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    try:
        time_off_id = int(request.POST.get("timeOffId", ""))
    except ValueError:
        return redirect(f"{reverse('staff:master_detail', args=[staff.pk])}?tab=schedule")
    TimeOffLedger().remove(staff, time_off_id)
    return back_to_profile(staff.pk, "schedule", request.POST.get("intent"))


@staff_member_required
@require_http_methods(["POST"])
def upload_avatar(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    try:
        replace_avatar(staff, request.FILES.get("file"))
    except UploadRejected as e:
        return back_with_error(staff.pk, "profile", e.code)
    return back_to_profile(staff.pk, "profile")


@staff_member_required
@require_http_methods(["POST"])
def remove_avatar(request, pk):
    staff = get_object_or_404(StaffMember, pk=pk)
    clear_avatar(staff)
    return back_to_profile(staff.pk, "profile")


@staff_member_required
@require_http_methods(["POST"])
def set_active(request, pk, active):
    staff = get_object_or_404(StaffMember, pk=pk)
    MasterManager().set_active(staff, active)
    messages.success(request, f"{staff.name} is now {'active' if active else 'inactive'}.")
    return redirect("staff:master_list")


# -------------------- JSON API --------------------
class StaffMemberViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StaffMember.objects.all().prefetch_related("working_hours", "services").order_by("name")
    serializer_class = StaffMemberSerializer
    permission_classes = [IsStaffOnly]

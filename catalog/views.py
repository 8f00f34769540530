# catalog/views.py
#
# Purpose:
# - Staff-only HTML screens to manage the category/service tree
#   (create, update, cascading delete).
# - Public pricing page (/prices/?lang=de|ru|en).
# - JSON API: read-only catalog, the sorted tree, and translation upserts.
#
# Notes for developers:
# - POST handlers read request.POST directly and report the outcome through
#   django.contrib.messages, then redirect back to the tree screen.
# - Deleting removes the whole subtree and every booking referencing it
#   (see catalog/services/deletion.py).
#
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods

from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, BasePermission
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import ServiceNode
from .serializers import ServiceNodeSerializer
from .services.catalog_manager import CatalogError, ServiceCatalogManager
from .services.deletion import CascadingDeletionPlanner, CatalogTreeError
from .services.price_display import PriceDisplayService
from .services.translations import save_translations
from .services.tree_builder import build_tree, flatten_tree

logger = logging.getLogger(__name__)

TREE_FIELDS = ("slug", "kind", "is_active", "duration_minutes", "price_cents")


# -------------------- Permissions --------------------
class IsStaffOnly(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)


def _is_staff(request) -> bool:
    user = getattr(request, "user", None)
    return bool(user and user.is_authenticated and user.is_staff)


def resolve_locale(request) -> str:
    """?lang= wins, then the "locale" cookie, then DEFAULT_LOCALE."""
    lang = request.GET.get("lang")
    if lang in settings.CATALOG_LOCALES:
        return lang
    cookie = request.COOKIES.get("locale")
    if cookie in settings.CATALOG_LOCALES:
        return cookie
    return settings.DEFAULT_LOCALE


def _form_fields(request):
    return {
        "name": request.POST.get("name", ""),
        "description": request.POST.get("description", ""),
        "is_active": bool(request.POST.get("is_active")),
        "parent_id": request.POST.get("parent_id", ""),
        "duration": request.POST.get("duration_minutes", ""),
        "price": request.POST.get("price", ""),
    }


# -------------------- Admin HTML --------------------
@staff_member_required
@require_http_methods(["GET"])
def services_admin(request):
    tree = build_tree(ServiceNode.objects.all(), extra_fields=TREE_FIELDS)
    rows = []
    for depth, node in flatten_tree(tree):
        rows.append({
            "depth": depth,
            "indent": depth * 1.5,
            "node": node,
            "is_group": bool(node["children"]),
            "price": PriceDisplayService.format_price(node["price_cents"]),
            "duration": PriceDisplayService.format_duration(node["duration_minutes"]),
        })
    return render(request, "catalog/services_admin.html", {"rows": rows})


@staff_member_required
@require_http_methods(["POST"])
def create_service(request):
    kind = request.POST.get("kind") or ServiceNode.KIND_CATEGORY
    try:
        node = ServiceCatalogManager().create_node(kind=kind, **_form_fields(request))
    except CatalogError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Created “{node.name}”.")
    return redirect("catalog:services_admin")


@staff_member_required
@require_http_methods(["POST"])
def update_service(request, pk):
    node = get_object_or_404(ServiceNode, pk=pk)
    try:
        ServiceCatalogManager().update_node(node, **_form_fields(request))
    except CatalogError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, "Saved.")
    return redirect("catalog:services_admin")


@staff_member_required
@require_http_methods(["POST"])
def delete_service(request, pk):
    get_object_or_404(ServiceNode, pk=pk)
    try:
        result = CascadingDeletionPlanner().delete(pk)
    except CatalogTreeError as e:
        logger.error("Refused to delete catalog node %s: %s", pk, e)
        messages.error(request, str(e))
        return redirect("catalog:services_admin")
    messages.success(
        request,
        f"Deleted {result.nodes_deleted} item(s) and {result.bookings_deleted} booking(s).",
    )
    return redirect("catalog:services_admin")


# -------------------- Public HTML --------------------
@require_http_methods(["GET"])
def prices(request):
    locale = resolve_locale(request)
    ctx = {
        "locale": locale,
        "locales": settings.CATALOG_LOCALES,
        "sections": PriceDisplayService.get_price_list(locale),
    }
    return render(request, "catalog/prices.html", ctx)


# -------------------- JSON API --------------------
class ServiceNodeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Flat catalog:
    - Anyone can list active nodes.
    - Staff also see inactive ones.
    """
    serializer_class = ServiceNodeSerializer

    def get_queryset(self):
        qs = ServiceNode.objects.all().prefetch_related("translations").order_by("id")
        if _is_staff(self.request):
            return qs
        return qs.filter(is_active=True)


class ServiceTreeView(APIView):
    """
    GET /api/services/tree/

    Active nodes as the sorted tree; staff may pass ?all=1 to include inactive ones.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        qs = ServiceNode.objects.all()
        if not (_is_staff(request) and request.query_params.get("all") == "1"):
            qs = qs.filter(is_active=True)
        return Response({"tree": build_tree(qs, extra_fields=TREE_FIELDS)})


class ServiceTranslationsView(APIView):
    """
    POST /api/admin/translations
    {
      "serviceId": 12,
      "translations": [{"locale": "de", "name": "Maniküre", "description": "..."}]
    }
    Entries with an unknown locale or a blank name are skipped.
    """
    permission_classes = [IsStaffOnly]

    def post(self, request):
        data = request.data
        if not isinstance(data, dict) or "serviceId" not in data or "translations" not in data:
            return Response({"error": "Invalid request"}, status=status.HTTP_400_BAD_REQUEST)

        translations = data.get("translations")
        if not isinstance(translations, list):
            return Response({"error": "Invalid translations"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            service_id = int(str(data.get("serviceId")).strip())
        except ValueError:
            return Response({"error": "Invalid serviceId"}, status=status.HTTP_400_BAD_REQUEST)

        service = ServiceNode.objects.filter(pk=service_id).first()
        if service is None:
            return Response({"error": "Service not found"}, status=status.HTTP_404_NOT_FOUND)

        saved = save_translations(service, translations)
        return Response({"success": True, "saved": saved})

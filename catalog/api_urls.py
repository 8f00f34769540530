# catalog/api_urls.py
#
# JSON endpoints, mounted under /api/.
#
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ServiceNodeViewSet, ServiceTranslationsView, ServiceTreeView

router = DefaultRouter()
router.register(r"services", ServiceNodeViewSet, basename="service")

urlpatterns = [
    # Declared before the router so "tree" is not read as a service pk.
    path("services/tree/", ServiceTreeView.as_view(), name="service-tree"),
    path("admin/translations", ServiceTranslationsView.as_view(), name="service-translations"),
    path("", include(router.urls)),
]

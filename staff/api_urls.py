from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import StaffMemberViewSet

router = SimpleRouter()
router.register(r"masters", StaffMemberViewSet, basename="master")

urlpatterns = [path("", include(router.urls))]

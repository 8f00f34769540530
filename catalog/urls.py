# catalog/urls.py
#
# Staff-only catalog screens, mounted under /admin/services/.
#
from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    path("", views.services_admin, name="services_admin"),
    path("create/", views.create_service, name="create_service"),
    path("<int:pk>/update/", views.update_service, name="update_service"),
    path("<int:pk>/delete/", views.delete_service, name="delete_service"),
]

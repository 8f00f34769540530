from django.urls import path

from . import views

app_name = "staff"

urlpatterns = [
    path("", views.master_list, name="master_list"),
    path("new/", views.master_new, name="master_new"),
    path("<int:pk>/", views.master_detail, name="master_detail"),
    path("<int:pk>/profile/", views.save_profile, name="save_profile"),
    path("<int:pk>/services/", views.save_services, name="save_services"),
    path("<int:pk>/schedule/", views.save_schedule, name="save_schedule"),
    path("<int:pk>/time-off/", views.add_time_off, name="add_time_off"),
    path("<int:pk>/time-off/remove/", views.remove_time_off, name="remove_time_off"),
    path("<int:pk>/avatar/", views.upload_avatar, name="upload_avatar"),
    path("<int:pk>/avatar/remove/", views.remove_avatar, name="remove_avatar"),
    path("<int:pk>/activate/", views.set_active, {"active": True}, name="activate"),
    path("<int:pk>/deactivate/", views.set_active, {"active": False}, name="deactivate"),
]

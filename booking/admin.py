from django.contrib import admin

from .models import Booking, ClientProfile


@admin.register(ClientProfile)
class ClientProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "phone")
    search_fields = ("name", "email")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "client", "service", "staff", "start_time", "status")
    list_filter = ("status", "staff")
    search_fields = ("client__name", "service__name")
    raw_id_fields = ("client", "service")

from django.contrib import admin

from .models import ServiceGalleryImage, ServiceNode, ServiceTranslation


class ServiceTranslationInline(admin.TabularInline):
    model = ServiceTranslation
    extra = 0


class ServiceGalleryImageInline(admin.TabularInline):
    model = ServiceGalleryImage
    extra = 0


@admin.register(ServiceNode)
class ServiceNodeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "kind", "parent", "duration_minutes", "price_cents", "is_active")
    list_filter = ("kind", "is_active")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [ServiceTranslationInline, ServiceGalleryImageInline]

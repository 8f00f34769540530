# salon_admin/urls.py
#
# Purpose:
# - Project URL router.
# - Staff HTML screens live under /admin/masters/ and /admin/services/, next to
#   (and before) the Django admin so the admin catch-all does not swallow them.
# - Public pricing page at /prices/.
# - JSON APIs under /api/.
#
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from catalog.views import prices

urlpatterns = [
    # ================
    # Staff-only pages
    # ================
    path("admin/masters/", include("staff.urls")),
    path("admin/services/", include("catalog.urls")),

    # Django admin
    path("admin/", admin.site.urls),

    # ==========
    # Public HTML
    # ==========
    path("prices/", prices, name="prices"),

    # =====
    # API's
    # =====
    path("api/", include("catalog.api_urls")),
    path("api/", include("staff.api_urls")),
]

# Uploaded files in DEBUG (dev only). In production, serve via web server / CDN.
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

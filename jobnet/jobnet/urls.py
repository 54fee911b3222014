from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("accounts.urls")),
    path("follows/", include("follows.urls")),
    path("cvs/", include("cvs.urls")),
    path("posts/", include("posts.urls")),
    path("applications/", include("applications.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = "jobnet.views.not_found"
handler500 = "jobnet.views.server_error"

from django.urls import path
from . import views

urlpatterns = [
    path("", views.cv_list, name="cv_list"),
    path("upload/", views.cv_upload, name="cv_upload"),
    path("<int:cv_id>/", views.cv_delete, name="cv_delete"),
    path("<int:cv_id>/toggle/", views.cv_toggle, name="cv_toggle"),
    path("<int:cv_id>/name/", views.cv_rename, name="cv_rename"),
    path("<int:cv_id>/file/", views.cv_file, name="cv_file"),
]

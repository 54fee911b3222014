from django.urls import path
from . import views

urlpatterns = [
    path("", views.apply, name="apply"),
    path("my-applications/", views.my_applications, name="my_applications"),
    path("received/", views.received_applications, name="received_applications"),
    path("post/<int:post_id>/", views.post_applications, name="post_applications"),
    path("<int:application_id>/", views.application_detail, name="application_detail"),
    path("<int:application_id>/status/", views.update_status, name="update_application_status"),
]

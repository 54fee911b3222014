from django.urls import path
from . import views

urlpatterns = [
    path("auth/register/", views.register, name="register"),
    path("auth/login/", views.user_login, name="login"),
    path("auth/logout/", views.user_logout, name="logout"),
    path("auth/me/", views.me, name="me"),
    path("auth/csrf/", views.csrf, name="csrf"),
    path("users/", views.user_search, name="user_search"),
    path("users/avatar/", views.upload_avatar, name="upload_avatar"),
    path("users/profile/", views.update_profile, name="update_profile"),
    path("users/<int:user_id>/", views.user_detail, name="user_detail"),
    path("notifications/", views.notifications_list, name="notifications_list"),
    path("notifications/mark-all-read/", views.notifications_mark_all_read, name="notifications_mark_all_read"),
    path("notifications/<int:notification_id>/read/", views.notification_mark_read, name="notification_mark_read"),
]

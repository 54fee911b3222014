from django.urls import path
from . import views

urlpatterns = [
    path("followers/", views.my_followers, name="my_followers"),
    path("following/", views.my_following, name="my_following"),
    path("status/<int:user_id>/", views.follow_status, name="follow_status"),
    path("counts/<int:user_id>/", views.follow_counts, name="follow_counts"),
    path("<int:user_id>/", views.follow_user, name="follow_user"),
    path("<int:user_id>/followers/", views.user_followers, name="user_followers"),
    path("<int:user_id>/following/", views.user_following, name="user_following"),
]

from django.urls import path
from . import views

urlpatterns = [
    path("", views.posts_collection, name="posts"),
    path("user/<int:user_id>/", views.user_posts, name="user_posts"),
    path("<int:post_id>/", views.post_detail, name="post_detail"),
]

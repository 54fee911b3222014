from django.contrib import admin
from .models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "post_type", "author", "created_at", "expired")
    list_filter = ("post_type",)
    search_fields = ("title", "description")

    @admin.display(boolean=True)
    def expired(self, obj):
        return obj.is_expired()

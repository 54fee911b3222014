from django.contrib import admin
from .models import CV


@admin.register(CV)
class CVAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "name", "is_active", "created_at")
    list_filter = ("is_active",)

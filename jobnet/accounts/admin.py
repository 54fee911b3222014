from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User, Notification


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # show extra fields in admin
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("JobNet", {"fields": ("full_name", "bio", "avatar", "account_type")}),
    )
    list_display = ("username", "email", "account_type", "is_active", "is_staff")
    list_filter = DjangoUserAdmin.list_filter + ("account_type",)

    def get_readonly_fields(self, request, obj=None):
        readonly = super().get_readonly_fields(request, obj)
        if obj is not None:
            return tuple(readonly) + ("account_type",)
        return readonly


admin.site.register(Notification)

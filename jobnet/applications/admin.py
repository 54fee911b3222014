from django.contrib import admin
from .models import Application, ApplicationEvent


class ApplicationEventInline(admin.TabularInline):
    model = ApplicationEvent
    extra = 0
    readonly_fields = ("status", "note", "actor", "created_at")


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "applicant", "status", "created_at")
    list_filter = ("status",)
    inlines = [ApplicationEventInline]


admin.site.register(ApplicationEvent)

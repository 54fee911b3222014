import os

from django.conf import settings
from django.db import models


class CVQuerySet(models.QuerySet):
    def for_owner(self, owner):
        return self.filter(owner=owner)

    def active(self):
        return self.filter(is_active=True)

    def recent(self):
        return self.order_by("-created_at", "-id")


class CV(models.Model):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cvs")
    file = models.FileField(upload_to="cvs/")
    name = models.CharField(max_length=150, blank=True)
    # Only active CVs can be used for new applications.
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = CVQuerySet.as_manager()

    class Meta:
        verbose_name = "CV"

    def display_name(self) -> str:
        return self.name or os.path.basename(self.file.name or "") or f"CV #{self.pk}"

    def __str__(self):
        return f"{self.owner.username} - {self.display_name()}"

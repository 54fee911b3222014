from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class AccountType(models.TextChoices):
        CANDIDATE = "candidate", "Candidate"
        COMPANY = "company", "Company"

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=150, blank=True)
    bio = models.TextField(blank=True, null=True)
    avatar = models.FileField(upload_to="avatars/", blank=True, null=True)
    # Fixed at registration; gates which posts and actions are allowed.
    account_type = models.CharField(max_length=20, choices=AccountType.choices)

    @property
    def is_candidate(self) -> bool:
        return self.account_type == self.AccountType.CANDIDATE

    @property
    def is_company(self) -> bool:
        return self.account_type == self.AccountType.COMPANY

    def display_name(self) -> str:
        return self.full_name or self.username

    def __str__(self):
        return f"{self.display_name()} ({self.account_type})"


class Notification(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications")
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, null=True)
    url = models.CharField(max_length=255, blank=True, null=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.user.username}: {self.title}"

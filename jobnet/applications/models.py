from django.conf import settings
from django.db import models
from django.utils import timezone


class ApplicationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    REVIEWED = "reviewed", "Reviewed"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"


# Legal moves of the status machine; accepted and rejected are terminal.
TRANSITIONS = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.REVIEWED, ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.REVIEWED: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, frozenset())


class ApplicationQuerySet(models.QuerySet):
    def for_applicant(self, applicant):
        return self.filter(applicant=applicant)

    def for_company(self, company):
        return self.filter(post__author=company)

    def recent(self):
        return self.order_by("-created_at", "-id")

    def with_related(self):
        return self.select_related("post", "post__author", "applicant", "cv")


class Application(models.Model):
    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="applications")
    applicant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="applications")
    cv = models.ForeignKey("cvs.CV", on_delete=models.RESTRICT, related_name="applications")
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.PENDING)
    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ApplicationQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["post", "applicant"], name="unique_application_per_post"),
        ]

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS.get(self.status)

    def __str__(self):
        return f"{self.applicant.username} → {self.post.title}"


class ApplicationEvent(models.Model):
    """Timeline entry: one per creation and per status change."""

    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name="events")
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices)
    note = models.CharField(max_length=255, blank=True, null=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"#{self.application_id} {self.status}"

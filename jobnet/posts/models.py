from django.conf import settings
from django.db import models
from django.utils import timezone


class PostType(models.TextChoices):
    FIND_JOB = "find_job", "Looking for a job"
    FIND_CANDIDATE = "find_candidate", "Looking for candidates"


class PostQuerySet(models.QuerySet):
    def by_author(self, author_id):
        return self.filter(author_id=author_id)

    def of_type(self, post_type: str | None):
        if not post_type:
            return self
        return self.filter(post_type=post_type)

    def with_related(self):
        return self.select_related("author", "attached_cv")


class Post(models.Model):
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts")
    post_type = models.CharField(max_length=20, choices=PostType.choices)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    attached_cv = models.ForeignKey(
        "cvs.CV",
        on_delete=models.RESTRICT,
        related_name="posts",
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    def is_expired(self, now=None) -> bool:
        from .ranking import is_expired

        return is_expired(self.post_type, self.created_at, now or timezone.now())

    def __str__(self):
        return self.title

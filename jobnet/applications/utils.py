import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def record_application_event(application, status: str, note: str | None = None, actor=None):
    """Create a timeline event for an application."""
    from .models import ApplicationEvent

    return ApplicationEvent.objects.create(application=application, status=status, note=note, actor=actor)


def create_in_app_notification(user, title: str, message: str = "", url: str = ""):
    try:
        from accounts.models import Notification
        with transaction.atomic():
            Notification.objects.create(user=user, title=title, message=message or None, url=url or None)
    except Exception:
        logger.exception("Failed to create in-app notification")


def notify_new_application(application):
    post = application.post
    create_in_app_notification(
        post.author,
        title=f"New application for {post.title}",
        message=f"Candidate: {application.applicant.display_name()}",
        url=f"/applications/{application.id}/",
    )


def notify_status_change(application):
    post = application.post
    create_in_app_notification(
        application.applicant,
        title=f"Application update for {post.title}",
        message=f"Your application status changed to {application.status}.",
        url=f"/applications/{application.id}/",
    )

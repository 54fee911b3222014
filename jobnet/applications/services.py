"""Application workflow: applying to posts and moving applications through statuses."""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from cvs import services as cv_services
from jobnet.errors import (
    DuplicateApplicationError,
    ExpiredPostError,
    ForbiddenError,
    InvalidCvError,
    InvalidPostTypeError,
    InvalidStatusError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    ValidationError,
)
from posts.models import Post, PostType

from .models import Application, ApplicationStatus, can_transition
from .utils import notify_new_application, notify_status_change, record_application_event

logger = logging.getLogger(__name__)


def _already_applied(post, applicant) -> bool:
    return Application.objects.filter(post=post, applicant=applicant).exists()


def apply(applicant, post_id, cv_id, *, now=None) -> Application:
    if not applicant.is_candidate:
        raise ForbiddenError("Only candidates can apply to posts")
    if post_id is None:
        raise ValidationError("'post_id' is required", detail={"post_id": ["This field is required."]})

    post = Post.objects.select_related("author").filter(id=post_id).first()
    if post is None:
        raise NotFoundError("Post not found")
    if post.post_type != PostType.FIND_CANDIDATE:
        raise InvalidPostTypeError("Can only apply to find_candidate posts")

    now = now or timezone.now()
    if post.is_expired(now):
        raise ExpiredPostError()
    if not cv_services.is_usable(cv_id, applicant):
        raise InvalidCvError()
    if _already_applied(post, applicant):
        raise DuplicateApplicationError()

    # A racing duplicate that slipped past the check above trips the unique constraint.
    try:
        with transaction.atomic():
            application = Application.objects.create(post=post, applicant=applicant, cv_id=cv_id, created_at=now)
            record_application_event(application, ApplicationStatus.PENDING, "Application submitted", actor=applicant)
    except IntegrityError:
        logger.warning("Duplicate application rejected by constraint: post_id=%s user=%s", post.id, applicant.username)
        raise DuplicateApplicationError()

    notify_new_application(application)
    logger.info(
        "Application submitted: app_id=%s post_id=%s user=%s",
        application.id,
        post.id,
        applicant.username,
    )
    return application


def update_status(application_id, actor, new_status, *, now=None) -> Application:
    """Move an application to ``new_status`` on behalf of the post owner.

    Re-entering the current status is rejected like any other illegal move.
    """
    if new_status not in ApplicationStatus.values:
        raise InvalidStatusError()

    application = Application.objects.with_related().filter(id=application_id, post__author=actor).first()
    if application is None:
        raise NotFoundOrUnauthorizedError("Application not found or not authorized")

    current = application.status
    if not can_transition(current, new_status):
        raise InvalidStatusError(f"Cannot change status from {current} to {new_status}")

    with transaction.atomic():
        # Compare-and-set: only succeeds if nobody moved the application meanwhile.
        updated = Application.objects.filter(id=application.id, status=current).update(
            status=new_status,
            updated_at=now or timezone.now(),
        )
        if not updated:
            raise InvalidStatusError("Application status changed concurrently; reload and retry")
        record_application_event(application, new_status, f"Status changed from {current} to {new_status}", actor=actor)

    application.refresh_from_db()
    notify_status_change(application)
    logger.info("Application status updated: app_id=%s %s->%s by=%s", application.id, current, new_status, actor.username)
    return application


def list_mine(applicant):
    return Application.objects.for_applicant(applicant).with_related().recent()


def list_received(company):
    if not company.is_company:
        raise ForbiddenError("Only companies can view received applications")
    return Application.objects.for_company(company).with_related().recent()


def list_for_post(post_id, actor):
    if not Post.objects.filter(id=post_id, author=actor).exists():
        raise NotFoundOrUnauthorizedError("Post not found or not authorized")
    return Application.objects.filter(post_id=post_id).with_related().recent()


def get_application(application_id, actor) -> Application:
    application = (
        Application.objects.with_related()
        .filter(Q(applicant=actor) | Q(post__author=actor), id=application_id)
        .prefetch_related("events")
        .first()
    )
    if application is None:
        raise NotFoundOrUnauthorizedError("Application not found or not authorized")
    return application

"""CV registry: ownership and usability checks plus the candidate-facing CRUD."""
import logging

from django.db import transaction
from django.db.models import RestrictedError

from jobnet.errors import CvInUseError, ForbiddenError, NotFoundError
from .models import CV

logger = logging.getLogger(__name__)


def is_usable(cv_id, owner) -> bool:
    """A CV is usable by ``owner`` when it is active and owned by them."""
    if cv_id is None or owner is None:
        return False
    return CV.objects.for_owner(owner).active().filter(id=cv_id).exists()


def is_owned(cv_id, owner) -> bool:
    return CV.objects.for_owner(owner).filter(id=cv_id).exists()


def get_owned(cv_id, owner) -> CV:
    cv = CV.objects.for_owner(owner).filter(id=cv_id).first()
    if cv is None:
        raise NotFoundError("CV not found")
    return cv


def upload(owner, form) -> CV:
    if not owner.is_candidate:
        raise ForbiddenError("Only candidates can upload CVs")
    cv = form.save(commit=False)
    cv.owner = owner
    cv.save()
    logger.info("CV uploaded: cv_id=%s user=%s", cv.id, owner.username)
    return cv


def toggle(cv_id, owner) -> CV:
    cv = get_owned(cv_id, owner)
    cv.is_active = not cv.is_active
    cv.save(update_fields=["is_active"])
    logger.info("CV toggled: cv_id=%s active=%s user=%s", cv.id, cv.is_active, owner.username)
    return cv


def rename(cv_id, owner, name: str) -> CV:
    if not owner.is_candidate:
        raise ForbiddenError("Only candidates can rename CVs")
    cv = get_owned(cv_id, owner)
    cv.name = name
    cv.save(update_fields=["name"])
    return cv


def delete(cv_id, owner) -> None:
    """Delete a CV unless an application or post still points at it."""
    cv = get_owned(cv_id, owner)
    if cv.applications.exists() or cv.posts.exists():
        raise CvInUseError()
    try:
        with transaction.atomic():
            cv.delete()
    except RestrictedError:
        raise CvInUseError()
    # Storage cleanup only after the row is gone.
    cv.file.delete(save=False)
    logger.info("CV deleted: cv_id=%s user=%s", cv_id, owner.username)


def can_view_file(cv: CV, viewer) -> bool:
    if viewer is not None and cv.owner_id == viewer.id:
        return True
    # Public when attached to a job-seeking post.
    if cv.posts.exists():
        return True
    if viewer is None:
        return False
    return cv.applications.filter(post__author=viewer).exists()

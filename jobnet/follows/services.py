"""Directed follow graph between users."""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from jobnet.errors import AlreadyFollowingError, NotFoundError, SelfFollowError
from .models import Follow

logger = logging.getLogger(__name__)
User = get_user_model()


def follow(follower, target_id: int) -> Follow:
    if follower.id == target_id:
        raise SelfFollowError()
    target = User.objects.filter(id=target_id).first()
    if target is None:
        raise NotFoundError("User not found")
    if is_following(follower, target_id):
        raise AlreadyFollowingError()

    # The unique constraint is the real guard against two racing requests.
    try:
        with transaction.atomic():
            edge = Follow.objects.create(follower=follower, following=target)
    except IntegrityError:
        raise AlreadyFollowingError()
    logger.info("Follow created: follower=%s following=%s", follower.id, target.id)
    return edge


def unfollow(follower, target_id: int) -> None:
    deleted, _ = Follow.objects.filter(follower=follower, following_id=target_id).delete()
    if not deleted:
        raise NotFoundError("Not following this user")
    logger.info("Follow removed: follower=%s following=%s", follower.id, target_id)


def is_following(follower, target_id: int) -> bool:
    if follower is None:
        return False
    return Follow.objects.filter(follower=follower, following_id=target_id).exists()


def followers(user_id: int):
    """Edges pointing at ``user_id``, most recent first."""
    return Follow.objects.filter(following_id=user_id).select_related("follower").recent()


def following(user_id: int):
    """Edges leaving ``user_id``, most recent first."""
    return Follow.objects.filter(follower_id=user_id).select_related("following").recent()


def counts(user_id: int) -> dict:
    return {
        "followers": Follow.objects.filter(following_id=user_id).count(),
        "following": Follow.objects.filter(follower_id=user_id).count(),
    }


def following_ids(user) -> frozenset:
    """Snapshot of who ``user`` follows; anonymous viewers follow nobody."""
    if user is None:
        return frozenset()
    return frozenset(Follow.objects.filter(follower=user).values_list("following_id", flat=True))

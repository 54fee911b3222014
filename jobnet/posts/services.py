"""Post catalog: creation rules, ownership checks and ranked listings."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.paginator import Paginator
from django.utils import timezone

from cvs import services as cv_services
from follows.services import following_ids
from jobnet.errors import (
    InvalidCvError,
    InvalidPostTypeError,
    MissingCvError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    ValidationError,
)
from jobnet.http import form_errors

from .forms import PostForm
from .models import Post, PostType
from .ranking import FeedEntry, annotate, rank

logger = logging.getLogger(__name__)
User = get_user_model()

# Which account type may publish each post type.
AUTHOR_ACCOUNT_TYPE = {
    PostType.FIND_JOB: User.AccountType.CANDIDATE,
    PostType.FIND_CANDIDATE: User.AccountType.COMPANY,
}


@dataclass(frozen=True)
class FeedPage:
    entries: list[FeedEntry]
    page: int
    limit: int
    total: int
    has_next: bool


def _check_post_type(author, post_type) -> None:
    if post_type not in PostType.values:
        raise InvalidPostTypeError(f"Unknown post type: {post_type!r}")
    if author.account_type != AUTHOR_ACCOUNT_TYPE[post_type]:
        if post_type == PostType.FIND_JOB:
            raise InvalidPostTypeError("Only candidates can create find_job posts")
        raise InvalidPostTypeError("Only companies can create find_candidate posts")


def _check_cv(author, post_type, cv_id) -> None:
    if post_type == PostType.FIND_JOB:
        if cv_id is None:
            raise MissingCvError()
        if not cv_services.is_owned(cv_id, author):
            raise InvalidCvError("CV not found")
    elif cv_id is not None:
        raise ValidationError("find_candidate posts cannot attach a CV")


def _validated_form(data, instance=None) -> PostForm:
    form = PostForm(data, instance=instance)
    if not form.is_valid():
        raise ValidationError("Invalid post", detail=form_errors(form))
    return form


def create_post(author, *, post_type, title, description, cv_id=None, now=None) -> Post:
    _check_post_type(author, post_type)
    _check_cv(author, post_type, cv_id)
    form = _validated_form({"title": title, "description": description})

    post = form.save(commit=False)
    post.author = author
    post.post_type = post_type
    post.attached_cv_id = cv_id
    post.created_at = now or timezone.now()
    post.save()
    logger.info("Post created: post_id=%s type=%s user=%s", post.id, post.post_type, author.username)
    return post


def get_owned(post_id, actor) -> Post:
    post = Post.objects.filter(id=post_id, author=actor).first()
    if post is None:
        raise NotFoundOrUnauthorizedError("Post not found or not authorized")
    return post


def update_post(post_id, actor, fields: dict) -> Post:
    """Apply ``fields`` (title, description, attached_cv_id) to an owned post.

    Omitted keys keep their current value; the post type never changes.
    """
    post = get_owned(post_id, actor)
    cv_id = fields["attached_cv_id"] if "attached_cv_id" in fields else post.attached_cv_id
    _check_cv(actor, post.post_type, cv_id)
    form = _validated_form(
        {
            "title": fields.get("title", post.title),
            "description": fields.get("description", post.description),
        },
        instance=post,
    )
    post = form.save(commit=False)
    post.attached_cv_id = cv_id
    post.save()
    logger.info("Post updated: post_id=%s user=%s", post.id, actor.username)
    return post


def delete_post(post_id, actor) -> None:
    post = get_owned(post_id, actor)
    # Applications (and their timelines) go with the post.
    applications = post.applications.count()
    post.delete()
    logger.info("Post deleted: post_id=%s user=%s applications_removed=%s", post_id, actor.username, applications)


def get_post(post_id, viewer, *, now=None) -> FeedEntry:
    post = Post.objects.with_related().filter(id=post_id).first()
    if post is None:
        raise NotFoundError("Post not found")
    return annotate([post], following_ids=following_ids(viewer), now=now or timezone.now())[0]


def _check_type_filter(post_type) -> None:
    if post_type and post_type not in PostType.values:
        raise InvalidPostTypeError(f"Unknown post type: {post_type!r}")


def feed(viewer, *, post_type=None, page: int = 1, limit: int = 10, now=None) -> FeedPage:
    """Ranked, paginated feed for ``viewer`` (``None`` for anonymous)."""
    _check_type_filter(post_type)
    now = now or timezone.now()
    # One follow snapshot per call keeps every page of this call consistent.
    follows = following_ids(viewer)

    # Ranked in Python over the whole filtered set so page boundaries follow one
    # sort key. Cost grows with the post table; moving the bucket keys into SQL
    # annotations is the next step if that becomes a problem.
    ranked = rank(Post.objects.with_related().of_type(post_type), following_ids=follows, now=now)
    paginator = Paginator(ranked, limit)
    if page > paginator.num_pages:
        entries = []
    else:
        entries = list(paginator.page(page).object_list)
    return FeedPage(
        entries=entries,
        page=page,
        limit=limit,
        total=paginator.count,
        has_next=page < paginator.num_pages,
    )


def user_posts(user_id, viewer, *, post_type=None, now=None) -> list[FeedEntry]:
    _check_type_filter(post_type)
    if not User.objects.filter(id=user_id).exists():
        raise NotFoundError("User not found")
    posts = Post.objects.with_related().by_author(user_id).of_type(post_type)
    return rank(posts, following_ids=following_ids(viewer), now=now or timezone.now())

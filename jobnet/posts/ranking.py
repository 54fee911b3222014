"""Feed ranking.

Pure functions of the posts, the viewer's follow set and ``now``; nothing here
touches the database or the wall clock.

Order (lower sorts first):

1. expiration bucket: live posts (0) before expired ``find_candidate`` posts (1)
2. follow bucket: authors the viewer follows (0) before everyone else (1)
3. ``created_at`` newest first
4. post id, highest first, so equal timestamps still page deterministically
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from django.conf import settings

from .models import Post, PostType


def expiration_window() -> timedelta:
    return timedelta(days=settings.JOBNET_POST_EXPIRATION_DAYS)


def is_expired(post_type: str, created_at: datetime, now: datetime) -> bool:
    """``find_candidate`` posts expire once ``now - created_at`` reaches the window."""
    if post_type != PostType.FIND_CANDIDATE:
        return False
    return now - created_at >= expiration_window()


@dataclass(frozen=True)
class FeedEntry:
    post: Post
    is_expired: bool
    is_following_author: bool

    @property
    def expiration_bucket(self) -> int:
        return 1 if self.is_expired else 0

    @property
    def follow_bucket(self) -> int:
        return 0 if self.is_following_author else 1


def annotate(posts: Iterable[Post], *, following_ids: frozenset, now: datetime) -> list[FeedEntry]:
    return [
        FeedEntry(
            post=post,
            is_expired=is_expired(post.post_type, post.created_at, now),
            is_following_author=post.author_id in following_ids,
        )
        for post in posts
    ]


def rank(posts: Iterable[Post], *, following_ids: frozenset, now: datetime) -> list[FeedEntry]:
    entries = annotate(posts, following_ids=following_ids, now=now)
    # Two stable passes: recency/id descending first, then the buckets ascending.
    entries.sort(key=lambda e: (e.post.created_at, e.post.pk), reverse=True)
    entries.sort(key=lambda e: (e.expiration_bucket, e.follow_bucket))
    return entries

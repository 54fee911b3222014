"""User directory search and avatar storage."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.paginator import Paginator
from django.db.models import Q

from jobnet.errors import ValidationError

logger = logging.getLogger(__name__)
User = get_user_model()


@dataclass(frozen=True)
class UserPage:
    users: list
    page: int
    limit: int
    total: int
    has_next: bool


def search_users(*, search=None, account_type=None, page: int = 1, limit: int = 10) -> UserPage:
    """Active users matching ``search`` in full name or email, ordered by full name."""
    if account_type and account_type not in User.AccountType.values:
        raise ValidationError(f"Unknown account type: {account_type!r}")

    qs = User.objects.filter(is_active=True)
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(email__icontains=search))
    if account_type:
        qs = qs.filter(account_type=account_type)

    paginator = Paginator(qs.order_by("full_name", "id"), limit)
    users = [] if page > paginator.num_pages else list(paginator.page(page).object_list)
    return UserPage(users=users, page=page, limit=limit, total=paginator.count, has_next=page < paginator.num_pages)


def set_avatar(user, upload):
    old_name = user.avatar.name if user.avatar else None
    user.avatar = upload
    user.save(update_fields=["avatar"])
    # Replaced files are removed only once the new one is stored.
    if old_name and old_name != user.avatar.name:
        user.avatar.storage.delete(old_name)
    logger.info("Avatar updated: username=%s file=%s", user.username, user.avatar.name)
    return user

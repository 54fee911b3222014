from .ranking import FeedEntry


def serialize_entry(entry: FeedEntry) -> dict:
    post = entry.post
    cv = post.attached_cv
    return {
        "id": post.id,
        "user_id": post.author_id,
        "post_type": post.post_type,
        "title": post.title,
        "description": post.description,
        "attached_cv_id": post.attached_cv_id,
        "cv_file_url": cv.file.url if cv and cv.file else None,
        "author_name": post.author.display_name(),
        "author_type": post.author.account_type,
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
        "is_expired": entry.is_expired,
        "is_following_author": entry.is_following_author,
    }

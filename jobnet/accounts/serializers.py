def serialize_user(user, *, private: bool = False) -> dict:
    data = {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "account_type": user.account_type,
        "bio": user.bio,
        "avatar_url": user.avatar.url if user.avatar else None,
        "created_at": user.date_joined.isoformat(),
    }
    if private:
        data["email"] = user.email
    return data


def serialize_notification(notification) -> dict:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "url": notification.url,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat(),
    }

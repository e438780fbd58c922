from app.db import db
from app.repositories import setting_repository, user_repository
from app.repositories.profile_repository import create_profile_for_user, get_by_user_id
from app.services.errors import NotFoundError


DEFAULT_NOTIFICATION_SETTINGS = {
    "email_notifications": True,
    "new_followers": True,
    "new_comments": True,
    "new_likes": False,
    "weekly_digest": True,
    "product_updates": False,
}


def _require_user(username):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user


def _notifications_key(user_id: int) -> str:
    return f"notifications:{user_id}"


def get_notification_settings(username: str):
    user = _require_user(username)
    stored = setting_repository.get_value(_notifications_key(user.id)) or {}
    settings = dict(DEFAULT_NOTIFICATION_SETTINGS)
    settings.update({k: v for k, v in stored.items() if k in settings})
    return settings


def update_notification_settings(username: str, settings: dict):
    user = _require_user(username)
    value = {key: bool(settings[key]) for key in DEFAULT_NOTIFICATION_SETTINGS}
    setting_repository.upsert(
        _notifications_key(user.id),
        value,
        description=f"Notification preferences for {user.username}",
    )
    return value


def update_account(username: str, display_name: str, email=None):
    user = _require_user(username)

    if email is not None:
        email = email.strip().lower()
        existing = user_repository.get_by_email(email)
        if existing and existing.id != user.id:
            raise ValueError("Email already registered")
        user.email = email

    profile = get_by_user_id(user.id)
    if not profile:
        profile = create_profile_for_user(user.id, display_name)
    profile.display_name = display_name.strip()

    db.session.commit()
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "display_name": profile.display_name,
    }

from app.db import db
from app.repositories import post_repository, user_repository
from app.repositories.profile_repository import create_profile_for_user, get_by_user_id
from app.services import media_service
from app.services.errors import NotFoundError


PROFILE_TEXT_FIELDS = {
    "website_url": 255,
    "twitter_handle": 50,
    "github_username": 50,
    "location": 120,
}


def _get_or_create_profile(user):
    profile = get_by_user_id(user.id)
    if profile:
        return profile

    profile = create_profile_for_user(user.id, user.username)
    db.session.commit()
    return profile


def serialize_author(user, profile):
    avatar_url = None
    if profile and profile.avatar_object_name:
        avatar_url = media_service.build_media_url(profile.avatar_object_name)

    return {
        "id": user.id,
        "username": user.username,
        "display_name": profile.display_name if profile else user.username,
        "avatar_url": avatar_url,
    }


def _serialize_profile(user, profile):
    payload = serialize_author(user, profile)
    payload.update({
        "bio": profile.bio,
        "website_url": profile.website_url,
        "twitter_handle": profile.twitter_handle,
        "github_username": profile.github_username,
        "location": profile.location,
        "joined_at": user.created_at.isoformat(),
        "posts_count": post_repository.count_published_by_author(user.id),
        "likes_received": post_repository.count_likes_received(user.id),
        "comments_received": post_repository.count_comments_received(user.id),
    })
    return payload


def get_profile_by_username(username: str):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")

    profile = _get_or_create_profile(user)
    return _serialize_profile(user, profile)


def update_profile(username: str, fields: dict, avatar=None):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")

    profile = _get_or_create_profile(user)

    fields = {key: value for key, value in (fields or {}).items() if value is not None}
    if not fields and avatar is None:
        raise ValueError("At least one field is required")

    if "display_name" in fields:
        display_name = fields.pop("display_name")
        if not isinstance(display_name, str) or not display_name.strip():
            raise ValueError("Display name must be a non-empty string")
        profile.display_name = display_name.strip()[:120]

    if "bio" in fields:
        bio = fields.pop("bio")
        if not isinstance(bio, str):
            raise ValueError("Bio must be a string")
        profile.bio = bio.strip()

    for name, max_length in PROFILE_TEXT_FIELDS.items():
        if name not in fields:
            continue
        value = fields.pop(name)
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string")
        value = value.strip()
        if len(value) > max_length:
            raise ValueError(f"{name} must be at most {max_length} characters")
        setattr(profile, name, value or None)

    if avatar is not None:
        object_name = media_service.store_upload(avatar, kind="avatar", owner_id=user.id)
        profile.avatar_object_name = object_name

    db.session.commit()
    return _serialize_profile(user, profile)


def set_avatar(user, object_name: str):
    profile = _get_or_create_profile(user)
    profile.avatar_object_name = object_name
    db.session.commit()
    return profile

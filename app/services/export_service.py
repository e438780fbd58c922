import logging
from datetime import datetime

from app.repositories import comment_repository, post_repository, user_repository
from app.services.errors import NotFoundError
from app.services.post_service import serialize_posts
from app.services.profile_service import get_profile_by_username


logger = logging.getLogger(__name__)

EXPORT_KINDS = ("posts", "comments", "profile")


def export_filename(kind: str, today=None) -> str:
    today = today or datetime.utcnow().date()
    return f"{kind}-export-{today.isoformat()}.json"


def _posts_payload(user):
    posts = post_repository.posts_by_author_query(user.id).all()
    return {
        "total_posts": len(posts),
        "posts": serialize_posts(posts, include_content=True),
    }


def _comments_payload(user):
    comments = comment_repository.comments_by_author(user.id)
    return {
        "total_comments": len(comments),
        "comments": [
            {
                "id": comment.id,
                "body": comment.body,
                "approved": comment.approved,
                "parent_id": comment.parent_id,
                "created_at": comment.created_at.isoformat(),
                "post": {
                    "id": comment.post.id,
                    "title": comment.post.title,
                    "slug": comment.post.slug,
                },
            }
            for comment in comments
        ],
    }


def _profile_payload(user):
    profile = get_profile_by_username(user.username)
    return {
        "profile": profile,
        "email": user.email,
        "stats": {
            "published_posts": profile["posts_count"],
            "likes_received": profile["likes_received"],
            "comments_received": profile["comments_received"],
        },
    }


_BUILDERS = {
    "posts": _posts_payload,
    "comments": _comments_payload,
    "profile": _profile_payload,
}


def build_export(username: str, kind: str):
    if kind not in _BUILDERS:
        raise ValueError("Unknown export type")

    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")

    payload = {
        "export_date": datetime.utcnow().isoformat() + "Z",
        "user": {"id": user.id, "username": user.username},
    }
    payload.update(_BUILDERS[kind](user))

    logger.info("User %s exported %s", username, kind)
    return payload

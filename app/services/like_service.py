import logging

from app.repositories import like_repository, user_repository
from app.services.errors import NotFoundError
from app.services.post_service import get_visible_post


logger = logging.getLogger(__name__)


def toggle_like(username: str, post_id: int):
    post = get_visible_post(post_id, username)

    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")

    is_liked = like_repository.toggle_like(user_id=user.id, post_id=post.id)
    logger.debug("User %s %s post %s", username, "liked" if is_liked else "unliked", post_id)

    return {
        "success": True,
        "likes": like_repository.count_likes(post.id),
        "is_liked": is_liked,
    }


def get_like_status(post_id: int, username=None):
    post = get_visible_post(post_id, username)

    is_liked = False
    if username:
        user = user_repository.get_by_username(username)
        if user:
            is_liked = like_repository.get_like(user.id, post.id) is not None

    return {
        "is_liked": is_liked,
        "likes": like_repository.count_likes(post.id),
    }

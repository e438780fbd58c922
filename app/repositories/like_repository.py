from app.db import db
from app.models.like_model import Like


def get_like(user_id: int, post_id: int):
    return Like.query.filter_by(user_id=user_id, post_id=post_id).first()


def toggle_like(user_id: int, post_id: int) -> bool:
    """Flip the like for (user, post); returns True when the post is now liked."""
    like = get_like(user_id, post_id)

    if like:
        db.session.delete(like)
        liked = False
    else:
        db.session.add(Like(user_id=user_id, post_id=post_id))
        liked = True

    db.session.commit()
    return liked


def count_likes(post_id: int) -> int:
    return Like.query.filter_by(post_id=post_id).count()

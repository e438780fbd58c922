from datetime import datetime, timedelta

from flask import current_app

from app.repositories import analytics_repository, like_repository, post_repository
from app.services.errors import NotFoundError
from app.services.post_service import get_owned_post


EVENT_FIELDS = {
    "view": "views",
    "read": "reads",
}


def track_event(event: str, post_id, today=None):
    field = EVENT_FIELDS.get(event)
    if field is None:
        raise ValueError("Unknown analytics event")

    if post_id is None or isinstance(post_id, bool):
        raise ValueError("post_id is required")
    try:
        post_id = int(post_id)
    except (TypeError, ValueError):
        raise ValueError("post_id must be an integer")

    if not post_repository.get_by_id(post_id):
        raise NotFoundError("Post not found")

    day = today or datetime.utcnow().date()
    row = analytics_repository.increment(post_id, day, field)
    return {"success": True, "date": row.date.isoformat(), field: getattr(row, field)}


def _window_start(today=None):
    today = today or datetime.utcnow().date()
    days = current_app.config.get("ANALYTICS_WINDOW_DAYS", 30)
    return today - timedelta(days=days - 1)


def get_daily_series(username: str, post_id: int, today=None):
    post = get_owned_post(username, post_id)
    rows = analytics_repository.daily_series(post.id, _window_start(today))
    return [
        {"date": row.date.isoformat(), "views": row.views, "reads": row.reads}
        for row in rows
    ]


def get_summary(username: str, post_id: int, today=None):
    series = get_daily_series(username, post_id, today)
    post = post_repository.get_by_id(post_id)
    comment_counts = post_repository.count_comments_by_post([post.id])

    return {
        "post_id": post.id,
        "window_days": current_app.config.get("ANALYTICS_WINDOW_DAYS", 30),
        "views": sum(day["views"] for day in series),
        "reads": sum(day["reads"] for day in series),
        "view_count": post.view_count,
        "likes": like_repository.count_likes(post.id),
        "comments": comment_counts.get(post.id, 0),
    }

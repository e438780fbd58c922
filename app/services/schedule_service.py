import logging
from datetime import datetime, timezone

from app.db import db
from app.models.schedule_model import STATUS_PUBLISHED
from app.repositories import schedule_repository
from app.services.errors import NotFoundError
from app.services.post_service import get_owned_post


logger = logging.getLogger(__name__)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def serialize_schedule(schedule):
    return {
        "post_id": schedule.post_id,
        "publish_at": schedule.publish_at.isoformat() + "Z",
        "timezone": schedule.timezone,
        "status": schedule.status,
    }


def schedule_post(username: str, post_id: int, publish_at: datetime, tz: str = "UTC", now=None):
    post = get_owned_post(username, post_id)

    publish_at = _to_naive_utc(publish_at)
    now = now or datetime.utcnow()
    if publish_at <= now:
        raise ValueError("publish_at must be in the future")

    schedule = schedule_repository.upsert_schedule(post.id, publish_at, tz)
    post.published = False
    post.published_at = None

    db.session.commit()
    logger.info("Post %s scheduled for %s (%s)", post.id, publish_at.isoformat(), tz)
    return serialize_schedule(schedule)


def get_schedule(username: str, post_id: int):
    post = get_owned_post(username, post_id)
    schedule = schedule_repository.get_by_post_id(post.id)
    if not schedule:
        raise NotFoundError("Schedule not found")
    return serialize_schedule(schedule)


def cancel_schedule(username: str, post_id: int):
    post = get_owned_post(username, post_id)
    schedule = schedule_repository.get_by_post_id(post.id)
    if not schedule:
        raise NotFoundError("Schedule not found")

    db.session.delete(schedule)
    db.session.commit()
    logger.info("Schedule for post %s cancelled", post.id)


def publish_scheduled_posts(now=None) -> int:
    """Publish every post whose schedule is due; already published schedules are skipped."""
    now = _to_naive_utc(now) if now else datetime.utcnow()

    published = 0
    for schedule in schedule_repository.due_schedules(now):
        post = schedule.post
        post.published = True
        post.published_at = now
        schedule.status = STATUS_PUBLISHED
        published += 1
        logger.info("Published scheduled post %s", post.id)

    db.session.commit()
    return published

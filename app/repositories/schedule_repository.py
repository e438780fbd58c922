from app.db import db
from app.models.schedule_model import STATUS_SCHEDULED, Schedule


def get_by_post_id(post_id: int):
    return Schedule.query.filter_by(post_id=post_id).first()


def upsert_schedule(post_id: int, publish_at, timezone: str):
    schedule = get_by_post_id(post_id)
    if schedule:
        schedule.publish_at = publish_at
        schedule.timezone = timezone
        schedule.status = STATUS_SCHEDULED
    else:
        schedule = Schedule(
            post_id=post_id,
            publish_at=publish_at,
            timezone=timezone,
            status=STATUS_SCHEDULED,
        )
        db.session.add(schedule)
    return schedule


def due_schedules(now):
    return (
        Schedule.query.filter(
            Schedule.publish_at <= now,
            Schedule.status == STATUS_SCHEDULED,
        )
        .order_by(Schedule.publish_at.asc())
        .all()
    )

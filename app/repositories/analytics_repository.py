from sqlalchemy.exc import IntegrityError

from app.db import db
from app.models.analytics_model import AnalyticsDaily


def _find_row(post_id: int, day):
    return AnalyticsDaily.query.filter_by(post_id=post_id, date=day).first()


def _get_or_create_row(post_id: int, day):
    row = _find_row(post_id, day)
    if row is not None:
        return row

    row = AnalyticsDaily(post_id=post_id, date=day, views=0, reads=0)
    db.session.add(row)
    try:
        db.session.flush()
    except IntegrityError:
        # another request created today's row first
        db.session.rollback()
        row = _find_row(post_id, day)
    return row


def increment(post_id: int, day, field: str):
    row = _get_or_create_row(post_id, day)

    column = getattr(AnalyticsDaily, field)
    setattr(row, field, column + 1)
    db.session.commit()
    return row


def daily_series(post_id: int, since):
    return (
        AnalyticsDaily.query.filter(
            AnalyticsDaily.post_id == post_id,
            AnalyticsDaily.date >= since,
        )
        .order_by(AnalyticsDaily.date.asc())
        .all()
    )

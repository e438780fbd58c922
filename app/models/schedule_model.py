from datetime import datetime

from app.db import db


STATUS_SCHEDULED = "SCHEDULED"
STATUS_PUBLISHED = "PUBLISHED"


class Schedule(db.Model):
    __tablename__ = "schedules"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(
        db.Integer,
        db.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    # Naive UTC.
    publish_at = db.Column(db.DateTime, nullable=False, index=True)
    timezone = db.Column(db.String(64), nullable=False, default="UTC")
    status = db.Column(db.String(20), nullable=False, default=STATUS_SCHEDULED)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

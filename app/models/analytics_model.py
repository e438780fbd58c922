from app.db import db


class AnalyticsDaily(db.Model):
    __tablename__ = "analytics_daily"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(
        db.Integer,
        db.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    date = db.Column(db.Date, nullable=False)
    views = db.Column(db.Integer, nullable=False, default=0)
    reads = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("post_id", "date", name="unique_post_day"),
    )

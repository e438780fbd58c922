from datetime import datetime

from app.db import db
from app.models.tag_model import post_tags


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.String(500), nullable=True)
    content = db.Column(db.Text, nullable=False, default="")
    content_json = db.Column(db.JSON, nullable=True)
    cover_image = db.Column(db.String(500), nullable=True)

    published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    read_time_min = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    author = db.relationship("User", backref=db.backref("posts", lazy="dynamic"))
    category = db.relationship("Category", backref=db.backref("posts", lazy="dynamic"))
    tags = db.relationship(
        "Tag",
        secondary=post_tags,
        lazy="select",
        backref=db.backref("posts", lazy="dynamic"),
        order_by="Tag.name",
    )

    comments = db.relationship(
        "Comment",
        backref="post",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes = db.relationship(
        "Like",
        backref="post",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    schedule = db.relationship(
        "Schedule",
        backref="post",
        uselist=False,
        cascade="all, delete-orphan",
    )
    analytics = db.relationship(
        "AnalyticsDaily",
        backref="post",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

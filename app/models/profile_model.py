from app.db import db


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    display_name = db.Column(db.String(120), nullable=False)
    bio = db.Column(db.Text, nullable=False, default="")
    avatar_object_name = db.Column(db.String(255), nullable=True)
    website_url = db.Column(db.String(255), nullable=True)
    twitter_handle = db.Column(db.String(50), nullable=True)
    github_username = db.Column(db.String(50), nullable=True)
    location = db.Column(db.String(120), nullable=True)

from app.db import db
from app.models.profile_model import Profile


def create_profile_for_user(user_id: int, display_name: str):
    profile = Profile(
        user_id=user_id,
        display_name=display_name,
        bio="",
    )
    db.session.add(profile)
    return profile


def get_by_user_id(user_id: int):
    return Profile.query.filter_by(user_id=user_id).first()


def get_by_user_ids(user_ids):
    if not user_ids:
        return []
    return Profile.query.filter(Profile.user_id.in_(user_ids)).all()

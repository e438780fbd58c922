from app.models.user_model import ROLE_USER, User
from app.db import db
from app.repositories.profile_repository import create_profile_for_user

def get_by_username(username: str):
    return User.query.filter_by(username=username).first()


def get_by_email(email: str):
    return User.query.filter(db.func.lower(User.email) == email.lower()).first()


def create_user(username, password_hash, email=None, name=None, role=ROLE_USER):
    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        role=role,
    )
    db.session.add(user)
    db.session.flush()

    create_profile_for_user(
        user_id=user.id,
        display_name=(name or username).strip(),
    )

    db.session.commit()
    return user

import logging

from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token, create_refresh_token

from app.models.user_model import ROLE_USER
from app.repositories import user_repository
from app.services.errors import NotFoundError, PermissionDeniedError


logger = logging.getLogger(__name__)


def _require_non_empty_string(value):
    return isinstance(value, str) and value.strip()


def register(username, password, email=None, name=None, role=ROLE_USER):
    if not _require_non_empty_string(username) or not _require_non_empty_string(password):
        raise ValueError("Missing fields")

    username = username.strip()
    resolved_name = username
    if name is not None:
        if not _require_non_empty_string(name):
            raise ValueError("Name must be a non-empty string")
        resolved_name = name.strip()

    if email is not None:
        if not _require_non_empty_string(email) or "@" not in email:
            raise ValueError("Invalid email")
        email = email.strip().lower()
        if user_repository.get_by_email(email):
            raise ValueError("Email already registered")

    if user_repository.get_by_username(username):
        raise ValueError("Username already exists")

    password_hash = generate_password_hash(password)
    user = user_repository.create_user(
        username=username,
        password_hash=password_hash,
        email=email,
        name=resolved_name,
        role=role,
    )
    logger.info("Registered user %s", username)
    return user


def login(username, password):
    if not _require_non_empty_string(username) or not _require_non_empty_string(password):
        raise ValueError("Invalid credentials")

    username = username.strip()

    user = user_repository.get_by_username(username)
    if not user or not check_password_hash(user.password_hash, password):
        raise ValueError("Invalid credentials")

    return {
        "access_token": create_access_token(identity=username),
        "refresh_token": create_refresh_token(identity=username)
    }


def refresh_access_token(username):
    return {
        "access_token": create_access_token(identity=username)
    }


def get_current_user(username):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user


def require_admin(username):
    user = get_current_user(username)
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user

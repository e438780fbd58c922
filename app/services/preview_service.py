import logging
from datetime import datetime, timezone

import jwt
from flask import current_app, has_request_context, request

from app.repositories import post_repository
from app.services.errors import NotFoundError
from app.services.post_service import get_owned_post, serialize_single


logger = logging.getLogger(__name__)

TOKEN_TYPE = "preview"
ALGORITHM = "HS256"


class InvalidPreviewTokenError(Exception):
    pass


def _secret():
    return current_app.config["PREVIEW_SECRET_KEY"]


def issue_preview_token(post_id: int, now=None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "post_id": post_id,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + current_app.config["PREVIEW_TOKEN_EXPIRES"],
    }
    return jwt.encode(payload, _secret(), algorithm=ALGORITHM)


def decode_preview_token(token: str) -> int:
    try:
        payload = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidPreviewTokenError("Preview token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidPreviewTokenError("Invalid preview token") from exc

    if payload.get("type") != TOKEN_TYPE or not isinstance(payload.get("post_id"), int):
        raise InvalidPreviewTokenError("Invalid preview token")
    return payload["post_id"]


def create_preview(username: str, post_id: int):
    post = get_owned_post(username, post_id)
    token = issue_preview_token(post.id)
    base_url = current_app.config.get("APP_PUBLIC_BASE_URL", "").rstrip("/")
    if not base_url and has_request_context():
        base_url = request.url_root.rstrip("/")

    logger.info("Preview link issued for post %s", post.id)
    return {
        "preview_url": f"{base_url}/preview/{token}",
        "token": token,
    }


def get_preview(token: str):
    if not token:
        raise ValueError("Preview token is required")

    post_id = decode_preview_token(token)
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found")
    return serialize_single(post)

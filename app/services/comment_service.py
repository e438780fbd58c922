import logging

from app.db import db
from app.repositories import comment_repository, user_repository
from app.repositories.comment_repository import (
    create_comment,
    get_comments_by_post,
    get_root_comments_by_post_id,
)
from app.repositories.profile_repository import get_by_user_ids
from app.services.auth_service import require_admin
from app.services.errors import NotFoundError, PermissionDeniedError
from app.services.post_service import get_visible_post, paginate
from app.services.profile_service import serialize_author
from app.utils.text import sanitize_user_input


logger = logging.getLogger(__name__)

STATUS_FILTERS = {
    "pending": False,
    "approved": True,
    "all": None,
}


def _require_user(username):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user


def _author_map(comments):
    author_ids = {c.author_id for c in comments}
    profiles = {p.user_id: p for p in get_by_user_ids(author_ids)}
    return {
        c.author_id: serialize_author(c.author, profiles.get(c.author_id))
        for c in comments
    }


def serialize_comment(comment, authors=None, include_post=False):
    authors = authors or {}
    payload = {
        "id": comment.id,
        "post_id": comment.post_id,
        "author": authors.get(comment.author_id),
        "body": comment.body,
        "approved": comment.approved,
        "created_at": comment.created_at.isoformat(),
        "parent_id": comment.parent_id,
        "replies": []
    }
    if include_post:
        payload["post"] = {
            "id": comment.post.id,
            "title": comment.post.title,
            "slug": comment.post.slug,
        }
    return payload


def build_comment_tree(comments):
    comment_map = {c["id"]: c for c in comments}
    roots = []

    for comment in comments:
        pid = comment["parent_id"]
        if pid:
            parent = comment_map.get(pid)
            if parent:
                parent["replies"].append(comment)
        else:
            roots.append(comment)

    return roots


def add_comment(username, post_id, body, parent_id=None):
    user = _require_user(username)
    get_visible_post(post_id, username)
    body = sanitize_user_input(body, max_length=2000)
    if not body:
        raise ValueError("Comment body is required")

    comment = create_comment(
        author_id=user.id,
        post_id=post_id,
        body=body,
        parent_id=parent_id
    )

    db.session.commit()
    logger.info("Comment %s on post %s awaiting moderation", comment.id, post_id)
    return comment


def add_standalone_comment(username, post_id, body):
    user = _require_user(username)
    get_visible_post(post_id, username)

    if comment_repository.has_commented(user.id, post_id):
        raise ValueError("You have already commented on this post")

    return add_comment(username, post_id, body)


def get_comments_tree_by_post(post_id: int, page: int, page_size: int, viewer_username=None):
    get_visible_post(post_id, viewer_username)

    page = max(page, 1)
    page_size = min(max(page_size, 1), 50)

    raw_comments = get_comments_by_post(post_id)
    authors = _author_map(raw_comments)
    all_comments = [serialize_comment(c, authors) for c in raw_comments]

    tree = build_comment_tree(all_comments)

    root_comments = get_root_comments_by_post_id(post_id, page, page_size)
    root_ids = {c.id for c in root_comments}

    return [c for c in tree if c["id"] in root_ids]


def list_comments(page: int, limit: int, post_id=None, status=None, viewer_username=None):
    approved = True
    if status and status != "approved":
        if status not in STATUS_FILTERS:
            raise ValueError("Invalid status filter")
        if viewer_username is None:
            raise PermissionDeniedError("Admin access required")
        require_admin(viewer_username)
        approved = STATUS_FILTERS[status]

    meta, comments = paginate(
        comment_repository.comments_query(post_id=post_id, approved=approved),
        page,
        limit,
    )
    authors = _author_map(comments)
    meta["comments"] = [
        serialize_comment(c, authors, include_post=True) for c in comments
    ]
    return meta


def delete_post_comment(username, post_id, comment_id):
    user = _require_user(username)
    comment = comment_repository.get_by_id(comment_id)
    if not comment or comment.post_id != post_id:
        raise NotFoundError("Comment not found")

    if comment.author_id != user.id and comment.post.author_id != user.id:
        raise PermissionDeniedError("Forbidden")

    comment_repository.delete_comment(comment)


def moderate_comment(admin_username, comment_id, approved):
    require_admin(admin_username)
    if not isinstance(approved, bool):
        raise ValueError("approved must be a boolean")

    comment = comment_repository.get_by_id(comment_id)
    if not comment:
        raise NotFoundError("Comment not found")

    comment.approved = approved
    db.session.commit()
    logger.info(
        "Comment %s %s by %s",
        comment_id,
        "approved" if approved else "rejected",
        admin_username,
    )
    return serialize_comment(comment, _author_map([comment]), include_post=True)


def remove_comment(admin_username, comment_id):
    require_admin(admin_username)
    comment = comment_repository.get_by_id(comment_id)
    if not comment:
        raise NotFoundError("Comment not found")

    comment_repository.delete_comment(comment)
    logger.info("Comment %s deleted by %s", comment_id, admin_username)

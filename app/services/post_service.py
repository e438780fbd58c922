import logging
import math
from datetime import datetime

from app.db import db
from app.models.post_model import Post
from app.repositories import category_repository, post_repository, tag_repository
from app.repositories import user_repository
from app.repositories.profile_repository import get_by_user_ids
from app.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from app.services.profile_service import serialize_author
from app.utils.markdown_import import (
    extract_excerpt,
    extract_title,
    markdown_to_document,
    render_markdown,
)
from app.utils.text import calculate_reading_time, sanitize_html, slugify


logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50


def _normalize_paging(page: int, limit: int):
    page = max(page or 1, 1)
    limit = min(max(limit or 10, 1), MAX_PAGE_SIZE)
    return page, limit


def paginate(query, page: int, limit: int):
    page, limit = _normalize_paging(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }, items


def _isoformat(value):
    return value.isoformat() if value else None


def _build_author_map(posts):
    author_ids = {post.author_id for post in posts}
    profiles = {profile.user_id: profile for profile in get_by_user_ids(author_ids)}
    return {
        post.author_id: serialize_author(post.author, profiles.get(post.author_id))
        for post in posts
    }


def serialize_post(post, authors, like_counts, comment_counts, include_content=True):
    payload = {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "cover_image": post.cover_image,
        "published": post.published,
        "published_at": _isoformat(post.published_at),
        "featured": post.featured,
        "view_count": post.view_count,
        "read_time_min": post.read_time_min,
        "author": authors.get(post.author_id),
        "category": (
            {"id": post.category.id, "name": post.category.name, "slug": post.category.slug}
            if post.category else None
        ),
        "tags": [{"id": tag.id, "name": tag.name, "slug": tag.slug} for tag in post.tags],
        "likes": like_counts.get(post.id, 0),
        "comments": comment_counts.get(post.id, 0),
        "created_at": _isoformat(post.created_at),
        "updated_at": _isoformat(post.updated_at),
    }
    if include_content:
        payload["content"] = post.content
        payload["content_json"] = post.content_json
    return payload


def serialize_posts(posts, include_content=False):
    post_ids = [post.id for post in posts]
    authors = _build_author_map(posts)
    like_counts = post_repository.count_likes_by_post(post_ids)
    comment_counts = post_repository.count_comments_by_post(post_ids)
    return [
        serialize_post(post, authors, like_counts, comment_counts, include_content)
        for post in posts
    ]


def serialize_single(post):
    return serialize_posts([post], include_content=True)[0]


def generate_unique_slug(title: str, exclude_post_id=None) -> str:
    base_slug = slugify(title) or "post"
    slug = base_slug
    counter = 1

    while post_repository.slug_taken(slug, exclude_post_id):
        slug = f"{base_slug}-{counter}"
        counter += 1

    return slug


def check_slug(slug: str, exclude_post_id=None):
    normalized = slugify(slug or "")
    if not normalized:
        raise ValueError("Slug is required")

    available = (
        normalized == slug
        and not post_repository.slug_taken(normalized, exclude_post_id)
    )
    return {
        "slug": slug,
        "available": available,
        "suggestion": slug if available else generate_unique_slug(normalized, exclude_post_id),
    }


def _require_user(username):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_owned_post(username: str, post_id: int):
    user = _require_user(username)
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found")
    if post.author_id != user.id:
        raise PermissionDeniedError("Forbidden")
    return post


def _resolve_tags(tag_ids):
    tag_ids = list(dict.fromkeys(tag_ids or []))
    tags = tag_repository.get_by_ids(tag_ids)
    if len(tags) != len(tag_ids):
        raise ValueError("Unknown tag id")
    return tags


def _resolve_category(category_id):
    if category_id is None:
        return None
    category = category_repository.get_by_id(category_id)
    if not category:
        raise ValueError("Unknown category id")
    return category


def _apply_content(post, data):
    if "content" in data:
        post.content = sanitize_html(data["content"])
    if "content_json" in data:
        post.content_json = data["content_json"]

    if post.content_json:
        post.read_time_min = calculate_reading_time(post.content_json)
    else:
        post.read_time_min = calculate_reading_time(post.content)


def create_post(username: str, data: dict):
    user = _require_user(username)

    requested_slug = data.get("slug")
    if requested_slug:
        if post_repository.slug_taken(requested_slug):
            raise ConflictError("Slug already in use")
        slug = requested_slug
    else:
        slug = generate_unique_slug(data["title"])

    post = Post(
        author_id=user.id,
        title=data["title"].strip(),
        slug=slug,
        excerpt=data.get("excerpt"),
        cover_image=data.get("cover_image"),
        published=bool(data.get("published")),
        featured=bool(data.get("featured")),
        content="",
    )
    _apply_content(post, data)
    post.tags = _resolve_tags(data.get("tag_ids"))
    post.category = _resolve_category(data.get("category_id"))

    if post.published:
        post.published_at = datetime.utcnow()

    db.session.add(post)
    db.session.commit()
    logger.info("Post %s created by %s (published=%s)", post.id, username, post.published)
    return serialize_single(post)


def update_post(username: str, post_id: int, data: dict):
    post = get_owned_post(username, post_id)

    if "title" in data:
        post.title = data["title"].strip()

    if "slug" in data and data["slug"] != post.slug:
        if post_repository.slug_taken(data["slug"], exclude_post_id=post.id):
            raise ConflictError("Slug already in use")
        post.slug = data["slug"]

    for field in ("excerpt", "cover_image", "featured"):
        if field in data:
            setattr(post, field, data[field])

    if "content" in data or "content_json" in data:
        _apply_content(post, data)

    if "tag_ids" in data:
        post.tags = _resolve_tags(data["tag_ids"])

    if "category_id" in data:
        post.category = _resolve_category(data["category_id"])

    if "published" in data:
        post.published = bool(data["published"])
        if post.published and not post.published_at:
            post.published_at = datetime.utcnow()

    db.session.commit()
    return serialize_single(post)


def delete_post(username: str, post_id: int):
    post = get_owned_post(username, post_id)
    post.tags = []
    db.session.delete(post)
    db.session.commit()
    logger.info("Post %s deleted by %s", post_id, username)


def _visible_to(post, viewer_username):
    if post.published:
        return True
    return viewer_username is not None and post.author.username == viewer_username


def get_visible_post(post_id: int, viewer_username=None):
    """Drafts exist only for their author; everyone else gets a 404."""
    post = post_repository.get_by_id(post_id)
    if not post or not _visible_to(post, viewer_username):
        raise NotFoundError("Post not found")
    return post


def get_post(post_id: int, viewer_username=None, count_view=True):
    post = get_visible_post(post_id, viewer_username)

    if count_view:
        post_repository.increment_view_count(post)
    return serialize_single(post)


def get_post_by_slug(slug: str, viewer_username=None, count_view=True):
    post = post_repository.get_by_slug(slug)
    if not post or not _visible_to(post, viewer_username):
        raise NotFoundError("Post not found")

    if count_view:
        post_repository.increment_view_count(post)
    return serialize_single(post)


def list_published_posts(page: int, limit: int, **filters):
    query = post_repository.published_posts_query(**filters)
    meta, posts = paginate(query, page, limit)
    meta["posts"] = serialize_posts(posts)
    return meta


def list_posts_by_username(username: str, page: int, limit: int):
    if not user_repository.get_by_username(username):
        raise NotFoundError("User not found")
    return list_published_posts(page, limit, author=username)


def list_my_posts(username: str, page: int, limit: int):
    user = _require_user(username)
    meta, posts = paginate(post_repository.posts_by_author_query(user.id), page, limit)
    meta["posts"] = serialize_posts(posts)
    return meta


def check_slug_impact(username: str, current_slug: str, new_slug: str):
    if not current_slug or not new_slug:
        raise ValueError("Both current and new slug parameters are required")

    post = post_repository.get_by_slug(current_slug)
    if not post:
        raise NotFoundError("Post not found")
    get_owned_post(username, post.id)

    normalized = slugify(new_slug)
    if not normalized:
        raise ValueError("New slug is invalid")

    changed = normalized != post.slug
    available = not changed or not post_repository.slug_taken(normalized, post.id)
    return {
        "post_id": post.id,
        "current": post.slug,
        "new": normalized,
        "changed": changed,
        "available": available,
        "published": post.published,
        "breaks_links": changed and post.published,
        "suggestion": normalized if available else generate_unique_slug(normalized, post.id),
    }


def import_markdown(username: str, text: str, title=None):
    """Create a draft post from a Markdown document."""
    user = _require_user(username)

    title = (title or extract_title(text)).strip()[:200]
    post = Post(
        author_id=user.id,
        title=title,
        slug=generate_unique_slug(title),
        excerpt=extract_excerpt(text) or None,
        content=render_markdown(text),
        content_json=markdown_to_document(text),
        published=False,
    )
    post.read_time_min = calculate_reading_time(post.content_json)

    db.session.add(post)
    db.session.commit()
    logger.info("Post %s imported from Markdown by %s", post.id, username)
    return post

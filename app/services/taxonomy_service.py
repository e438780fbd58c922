import logging

from app.repositories import category_repository, tag_repository
from app.services.errors import ConflictError, NotFoundError
from app.utils.text import slugify


logger = logging.getLogger(__name__)


def serialize_tag(tag, post_count=None):
    payload = {"id": tag.id, "name": tag.name, "slug": tag.slug}
    if post_count is not None:
        payload["post_count"] = post_count
    return payload


def serialize_category(category, post_count=None):
    payload = {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
    }
    if post_count is not None:
        payload["post_count"] = post_count
    return payload


def list_tags():
    return [
        serialize_tag(tag, post_count or 0)
        for tag, post_count in tag_repository.list_tags_with_counts()
    ]


def create_tag(name: str):
    """Return ``(tag, created)``; a name whose slug already exists yields the stored tag."""
    name = name.strip()
    slug = slugify(name)
    if not slug:
        raise ValueError("Tag name must contain letters or digits")

    tag, created = tag_repository.upsert_by_slug(name, slug)
    if created:
        logger.info("Tag %s created", slug)
    return serialize_tag(tag), created


def list_categories():
    return [
        serialize_category(category, category_repository.count_published_posts(category.id))
        for category in category_repository.list_categories()
    ]


def get_category(slug: str):
    category = category_repository.get_by_slug(slug)
    if not category:
        raise NotFoundError("Category not found")
    return serialize_category(
        category,
        category_repository.count_published_posts(category.id),
    )


def create_category(name: str, slug=None, description=None):
    name = name.strip()
    slug = slugify(slug or name)
    if not slug:
        raise ValueError("Category slug is required")

    if category_repository.get_by_slug(slug):
        raise ConflictError("Category already exists")

    category = category_repository.create_category(name, slug, description)
    logger.info("Category %s created", slug)
    return serialize_category(category, 0)

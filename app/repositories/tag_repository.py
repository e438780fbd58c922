from app.db import db
from app.models.post_model import Post
from app.models.tag_model import Tag, post_tags


def list_tags_with_counts():
    published_count = (
        db.session.query(db.func.count(Post.id))
        .select_from(Post)
        .join(post_tags, post_tags.c.post_id == Post.id)
        .filter(post_tags.c.tag_id == Tag.id, Post.published.is_(True))
        .correlate(Tag)
        .scalar_subquery()
    )
    return (
        db.session.query(Tag, published_count)
        .order_by(Tag.name.asc())
        .all()
    )


def get_by_slug(slug: str):
    return Tag.query.filter_by(slug=slug).first()


def get_by_ids(tag_ids):
    if not tag_ids:
        return []
    return Tag.query.filter(Tag.id.in_(tag_ids)).all()


def create_tag(name: str, slug: str):
    tag = Tag(name=name, slug=slug)
    db.session.add(tag)
    db.session.commit()
    return tag


def upsert_by_slug(name: str, slug: str):
    tag = get_by_slug(slug)
    if tag:
        return tag, False
    return create_tag(name, slug), True

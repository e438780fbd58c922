from sqlalchemy import or_
from sqlalchemy.orm import joinedload, selectinload

from app.db import db
from app.models.category_model import Category
from app.models.comment_model import Comment
from app.models.like_model import Like
from app.models.post_model import Post
from app.models.tag_model import Tag
from app.models.user_model import User


def get_by_id(post_id: int):
    return db.session.get(Post, post_id)


def get_by_slug(slug: str):
    return Post.query.filter_by(slug=slug).first()


def slug_taken(slug: str, exclude_post_id=None) -> bool:
    query = Post.query.filter(Post.slug == slug)
    if exclude_post_id is not None:
        query = query.filter(Post.id != exclude_post_id)
    return db.session.query(query.exists()).scalar()


def _with_relations(query):
    return query.options(
        joinedload(Post.author),
        joinedload(Post.category),
        selectinload(Post.tags),
    )


def published_posts_query(tag=None, category=None, author=None, featured=None, search=None):
    query = Post.query.filter(Post.published.is_(True))

    if tag:
        query = query.filter(Post.tags.any(Tag.slug == tag))
    if category:
        query = query.join(Category, Post.category_id == Category.id).filter(
            Category.slug == category
        )
    if author:
        query = query.join(User, Post.author_id == User.id).filter(
            User.username == author
        )
    if featured is not None:
        query = query.filter(Post.featured.is_(featured))
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Post.title.ilike(pattern),
                Post.excerpt.ilike(pattern),
                Post.content.ilike(pattern),
            )
        )

    return _with_relations(query).order_by(
        Post.published_at.desc(),
        Post.id.desc(),
    )


def posts_by_author_query(author_id: int):
    return _with_relations(
        Post.query.filter(Post.author_id == author_id)
    ).order_by(Post.created_at.desc(), Post.id.desc())


def count_likes_by_post(post_ids):
    if not post_ids:
        return {}
    rows = (
        db.session.query(Like.post_id, db.func.count(Like.id))
        .filter(Like.post_id.in_(post_ids))
        .group_by(Like.post_id)
        .all()
    )
    return dict(rows)


def count_comments_by_post(post_ids, approved_only=True):
    if not post_ids:
        return {}
    query = db.session.query(Comment.post_id, db.func.count(Comment.id)).filter(
        Comment.post_id.in_(post_ids)
    )
    if approved_only:
        query = query.filter(Comment.approved.is_(True))
    return dict(query.group_by(Comment.post_id).all())


def count_published_by_author(author_id: int) -> int:
    return Post.query.filter_by(author_id=author_id, published=True).count()


def count_likes_received(author_id: int) -> int:
    return (
        db.session.query(db.func.count(Like.id))
        .select_from(Like)
        .join(Post, Like.post_id == Post.id)
        .filter(Post.author_id == author_id)
        .scalar()
    )


def count_comments_received(author_id: int) -> int:
    return (
        db.session.query(db.func.count(Comment.id))
        .select_from(Comment)
        .join(Post, Comment.post_id == Post.id)
        .filter(Post.author_id == author_id, Comment.approved.is_(True))
        .scalar()
    )


def increment_view_count(post: Post):
    post.view_count = Post.view_count + 1
    db.session.commit()
    db.session.refresh(post)
    return post

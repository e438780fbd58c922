from app.db import db
from app.models.comment_model import Comment
from app.models.post_model import Post
from app.services.errors import NotFoundError


def create_comment(author_id, post_id, body, parent_id=None):
    post = db.session.get(Post, post_id)
    if not post:
        raise NotFoundError("Post not found")

    if parent_id:
        parent = db.session.get(Comment, parent_id)
        if not parent or parent.post_id != post_id:
            raise ValueError("Invalid parent comment")

    comment = Comment(
        author_id=author_id,
        post_id=post_id,
        parent_id=parent_id,
        body=body.strip(),
        approved=False,
    )

    db.session.add(comment)
    return comment


def get_by_id(comment_id: int):
    return db.session.get(Comment, comment_id)


def get_comments_by_post(post_id, approved_only=True):
    query = Comment.query.filter(Comment.post_id == post_id)
    if approved_only:
        query = query.filter(Comment.approved.is_(True))
    return query.order_by(Comment.created_at.desc(), Comment.id.desc()).all()


def get_root_comments_by_post_id(post_id, page, page_size, approved_only=True):
    query = Comment.query.filter(
        Comment.post_id == post_id,
        Comment.parent_id.is_(None),
    )
    if approved_only:
        query = query.filter(Comment.approved.is_(True))
    return (
        query.order_by(Comment.created_at.desc(), Comment.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )


def has_commented(author_id: int, post_id: int) -> bool:
    return (
        Comment.query.filter_by(author_id=author_id, post_id=post_id).first()
        is not None
    )


def comments_query(post_id=None, approved=None):
    query = Comment.query
    if post_id is not None:
        query = query.filter(Comment.post_id == post_id)
    if approved is not None:
        query = query.filter(Comment.approved.is_(approved))
    return query.order_by(Comment.created_at.desc(), Comment.id.desc())


def comments_by_author(author_id: int):
    return (
        Comment.query.filter_by(author_id=author_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def delete_comment(comment: Comment):
    db.session.delete(comment)
    db.session.commit()

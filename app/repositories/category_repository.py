from app.db import db
from app.models.category_model import Category
from app.models.post_model import Post


def list_categories():
    return Category.query.order_by(Category.name.asc()).all()


def get_by_slug(slug: str):
    return Category.query.filter_by(slug=slug).first()


def get_by_id(category_id: int):
    return db.session.get(Category, category_id)


def count_published_posts(category_id: int) -> int:
    return Post.query.filter_by(category_id=category_id, published=True).count()


def create_category(name: str, slug: str, description=None):
    category = Category(name=name, slug=slug, description=description)
    db.session.add(category)
    db.session.commit()
    return category

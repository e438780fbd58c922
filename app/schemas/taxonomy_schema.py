from marshmallow import EXCLUDE, validate

from app.extensions.extensions import ma


class TagInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = ma.Str(required=True, validate=validate.Length(min=1, max=50))


class CategoryInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = ma.Str(required=True, validate=validate.Length(min=1, max=100))
    slug = ma.Str(validate=validate.Length(min=1, max=100))
    description = ma.Str(allow_none=True, validate=validate.Length(max=500))

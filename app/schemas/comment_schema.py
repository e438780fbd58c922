from marshmallow import EXCLUDE, validate

from app.extensions.extensions import ma


class CommentInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    body = ma.Str(required=True, validate=validate.Length(min=1, max=2000))
    parent_id = ma.Int(allow_none=True)


class StandaloneCommentInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    post_id = ma.Int(required=True)
    body = ma.Str(required=True, validate=validate.Length(min=1, max=2000))


from marshmallow import EXCLUDE, validate

from app.extensions.extensions import ma


class PostInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    title = ma.Str(
        required=True,
        validate=[
            validate.Length(min=1, max=200),
            validate.Regexp(r"\s*\S", error="Title cannot be blank"),
        ],
    )
    slug = ma.Str(
        validate=[
            validate.Length(min=1, max=200),
            validate.Regexp(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", error="Invalid slug"),
        ]
    )
    excerpt = ma.Str(allow_none=True, validate=validate.Length(max=500))
    content = ma.Str(load_default="")
    content_json = ma.Dict(allow_none=True)
    cover_image = ma.Url(allow_none=True)
    published = ma.Bool(load_default=False)
    featured = ma.Bool(load_default=False)
    tag_ids = ma.List(ma.Int(), load_default=list)
    category_id = ma.Int(allow_none=True)


class ScheduleInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    publish_at = ma.DateTime(required=True)
    timezone = ma.Str(load_default="UTC", validate=validate.Length(min=1, max=64))


class PostReferenceSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    post_id = ma.Int(required=True)


class MarkdownImportSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    markdown = ma.Str(
        required=True,
        validate=[
            validate.Length(min=1, max=100000),
            validate.Regexp(r"\s*\S", error="Markdown content is required"),
        ],
    )
    title = ma.Str(
        allow_none=True,
        validate=[
            validate.Length(min=1, max=200),
            validate.Regexp(r"\s*\S", error="Title cannot be blank"),
        ],
    )

from marshmallow import EXCLUDE, validate

from app.extensions.extensions import ma


class NotificationSettingsSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email_notifications = ma.Bool(required=True)
    new_followers = ma.Bool(required=True)
    new_comments = ma.Bool(required=True)
    new_likes = ma.Bool(required=True)
    weekly_digest = ma.Bool(required=True)
    product_updates = ma.Bool(required=True)


class AccountSettingsSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    display_name = ma.Str(required=True, validate=validate.Length(min=1, max=50))
    email = ma.Email(allow_none=True)


class WaitlistSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = ma.Email(required=True, error_messages={"invalid": "Valid email address is required"})

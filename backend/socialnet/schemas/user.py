"""User resource schemas."""

from __future__ import annotations

from marshmallow import RAISE, Schema, fields, validate


class UserSchema(Schema):
    """Public representation of a user. There is no password field to dump."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    display_name = fields.String(allow_none=True)
    profile_image = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    website = fields.String(allow_none=True)
    location = fields.String(allow_none=True)
    birth_date = fields.Date(allow_none=True)
    is_verified = fields.Boolean()
    is_private = fields.Boolean()
    is_active = fields.Boolean()
    last_active_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class ProfileUpdateSchema(Schema):
    """Partial update of one's own profile. Unknown keys are rejected."""

    class Meta:
        unknown = RAISE

    first_name = fields.String(allow_none=True, validate=validate.Length(max=50))
    last_name = fields.String(allow_none=True, validate=validate.Length(max=50))
    display_name = fields.String(allow_none=True, validate=validate.Length(max=100))
    profile_image = fields.String(
        allow_none=True, validate=[validate.URL(), validate.Length(max=500)]
    )
    cover_image = fields.String(
        allow_none=True, validate=[validate.URL(), validate.Length(max=500)]
    )
    bio = fields.String(allow_none=True, validate=validate.Length(max=500))
    website = fields.String(allow_none=True, validate=[validate.URL(), validate.Length(max=255)])
    location = fields.String(allow_none=True, validate=validate.Length(max=100))
    birth_date = fields.Date(allow_none=True)

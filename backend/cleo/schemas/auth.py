"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, validate


class OpaqueToken(fields.Field):
    """A token string. Any other JSON value loads as ``None`` (no usable token)."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str | None:
        return value if isinstance(value, str) else None


class LoginSchema(Schema):
    """Input payload for authenticating a user.

    ``email`` is a login handle; bootstrap accounts use bare names like
    ``admin``, so address syntax is not validated.
    """

    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=1024))


class RefreshSchema(Schema):
    """Input payload for refreshing an access token. A missing or unusable value is an unknown token."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = OpaqueToken(load_default=None, allow_none=True)


class LogoutSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = OpaqueToken(load_default=None, allow_none=True)


class UserSchema(Schema):
    """Public user representation."""

    id = fields.String(required=True)
    email = fields.String(required=True)
    role = fields.String(required=True)


class LoginResponseSchema(Schema):
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")
    expires_in = fields.Integer(required=True)
    user = fields.Nested(UserSchema, required=True)


class RefreshResponseSchema(Schema):
    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")
    expires_in = fields.Integer(required=True)


class IdentitySchema(Schema):
    """Response payload exposing the verified token identity."""

    id = fields.String(required=True)
    email = fields.String(required=True)
    role = fields.String(required=True)

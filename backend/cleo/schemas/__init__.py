"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    IdentitySchema,
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshResponseSchema,
    RefreshSchema,
    UserSchema,
)

__all__ = [
    "IdentitySchema",
    "LoginResponseSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshResponseSchema",
    "RefreshSchema",
    "UserSchema",
]

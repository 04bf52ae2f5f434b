from .dto import AuthTokenConfig, LoginIn, LoginOut, LogoutIn, RefreshIn, RefreshOut
from .service import SessionService

__all__ = [
    "AuthTokenConfig",
    "LoginIn",
    "LoginOut",
    "LogoutIn",
    "RefreshIn",
    "RefreshOut",
    "SessionService",
]

from .service import BearerAuthenticator, Identity, ensure_role, extract_bearer

__all__ = ["BearerAuthenticator", "Identity", "ensure_role", "extract_bearer"]

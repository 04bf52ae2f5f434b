from cleo.models.refresh_token import RefreshToken
from cleo.models.user import Role, User

__all__ = [
    "RefreshToken",
    "Role",
    "User",
]

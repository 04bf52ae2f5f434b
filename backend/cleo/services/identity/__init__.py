from .dto import BootstrapUserIn, UserRecord
from .service import CredentialStore

__all__ = ["BootstrapUserIn", "CredentialStore", "UserRecord"]

from .werkzeug_hasher import WerkzeugPasswordHasher

__all__ = ["WerkzeugPasswordHasher"]

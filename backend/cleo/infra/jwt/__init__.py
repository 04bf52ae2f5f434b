from .token_codec import DEFAULT_ISSUER, JWTTokenCodec

__all__ = ["DEFAULT_ISSUER", "JWTTokenCodec"]

"""Shared API helpers: JSON framing, timing and the auth decorators."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from cleo.core.auth import get_auth
from cleo.services.authz import Identity, ensure_role

F = TypeVar("F", bound=Callable[..., Any])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def current_identity() -> Identity | None:
    """Return the identity resolved by :func:`require_auth` for this request."""

    return g.get("identity")


def require_auth(func: F) -> F:
    """Verify the bearer token and store the caller on ``g.identity``.

    Raises :class:`~cleo.services._shared.errors.MissingBearerToken` or
    :class:`~cleo.services._shared.errors.InvalidToken`; the error handlers
    turn them into 401 problem responses.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = get_auth().authenticator.authenticate(request.headers.get("Authorization"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: str) -> Callable[[F], F]:
    """Allow the view only for identities whose role is one of ``roles``.

    Must be stacked *below* :func:`require_auth`; without it every call is
    rejected as ``unauthenticated``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            ensure_role(current_identity(), roles)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator

"""Tagged outcome values returned by session operations.

Session operations never raise for expected authentication failures; they
return ``Ok(value)`` or ``Err(fault)`` and let the caller decide how to frame
the outcome (HTTP response, CLI message, test assertion).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from cleo.services._shared.errors import AuthFault

T = TypeVar("T")
F = TypeVar("F", bound=AuthFault)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[F]):
    fault: F

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the carried fault (used by HTTP views to reach the error handler)."""
        raise self.fault


Result = Ok[T] | Err[AuthFault]

__all__ = ["Err", "Ok", "Result"]

"""Exception types raised and surfaced by cadence."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class CadenceError(Exception):
    """Base error for the cadence library."""


class DetachedError(CadenceError, RuntimeError):
    """Raised when a primitive is used after its consumer detached."""


class ErrorKind(StrEnum):
    TRANSPORT = "transport"
    UNSUCCESSFUL = "unsuccessful"
    DECODE = "decode"


class FetchError(CadenceError):
    """Failure of an async operation, as surfaced in ``Failed`` state.

    The subclass (and :attr:`kind`) records where the operation failed;
    consumers see all of them through the same ``error`` slot.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    @classmethod
    def from_exception(cls, exc: BaseException) -> FetchError:
        """Normalize any exception into a FetchError, chaining the original."""
        if isinstance(exc, FetchError):
            return exc
        error = TransportError(str(exc) or "An error occurred")
        error.__cause__ = exc
        return error

    def __repr__(self) -> str:
        if self.status is None:
            return f"{type(self).__name__}({self.message!r})"
        return f"{type(self).__name__}({self.message!r}, status={self.status})"


class TransportError(FetchError):
    """Raised when the operation could not be performed at all."""

    kind = ErrorKind.TRANSPORT


class UnsuccessfulOutcome(FetchError):
    """Raised when the operation completed but reported failure."""

    kind = ErrorKind.UNSUCCESSFUL


class DecodeError(FetchError):
    """Raised when a successful payload could not be interpreted."""

    kind = ErrorKind.DECODE

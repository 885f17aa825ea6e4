"""Error taxonomy for SNS message validation."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stage at which a message was rejected."""

    MISSING_KEY = "MissingKey"
    INVALID_TYPE = "InvalidType"
    INVALID_CERT = "InvalidCert"
    INCORRECT_SIGNATURE = "IncorrectSignature"
    MALFORMED_JSON = "MalformedJSON"

    def __str__(self) -> str:
        return self.value


class SNSError(Exception):
    """Raised when an SNS message is rejected.

    Callers should branch on :attr:`kind` rather than on the exception class;
    every failure of the validator is reported through this single type.
    """

    def __init__(self, kind: ErrorKind | str, message: str) -> None:
        super().__init__(message)
        self._kind = ErrorKind(kind)
        self._message = message

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    def is_kind(self, kind: ErrorKind | str) -> bool:
        """Return ``True`` if the error is exactly ``kind``."""
        try:
            return self._kind is ErrorKind(kind)
        except ValueError:
            return False

    def __repr__(self) -> str:
        return f"SNSError({self._kind.value!r}, {self._message!r})"


__all__ = ["ErrorKind", "SNSError"]

"""
Decode failures — the two error kinds a parse can end with.

A parse either produces a full ParsedCertificate or fails with exactly one
DecodeErrorKind. Malformed individual attributes never show up here: the
mapper and the CNPJ engine resolve them to "" or None.

BAD_PASSWORD_OR_CORRUPT is a single kind: the PKCS#12 primitive
raises the same ValueError for a MAC mismatch and for broken DER, so there is
no reliable signal to split it on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique


@unique
class DecodeErrorKind(Enum):
    """Failure kinds surfaced to callers of the parser."""

    BAD_PASSWORD_OR_CORRUPT = "BAD_PASSWORD_OR_CORRUPT"
    """Decryption / MAC verification failed, or the ASN.1 structure is malformed."""

    NO_CERTIFICATE_FOUND = "NO_CERTIFICATE_FOUND"
    """The container decoded fine but holds no certificate."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carried on the failure track.

    >>> desc = FailureDescription(DecodeErrorKind.NO_CERTIFICATE_FOUND, "empty")
    >>> desc.kind
    <DecodeErrorKind.NO_CERTIFICATE_FOUND: 'NO_CERTIFICATE_FOUND'>
    """

    kind: DecodeErrorKind
    message: str
    exception: BaseException | None = field(default=None, repr=False)


class DecodeError(Exception):
    """
    Raised by parse_certificate() when the container cannot be turned into a record.

    `kind` is the only field callers should branch on; the wording of
    `message` is not part of the contract.
    """

    def __init__(self, kind: DecodeErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def from_failure(cls, failure: FailureDescription) -> DecodeError:
        error = cls(failure.kind, failure.message)
        error.__cause__ = failure.exception
        return error

    def __repr__(self) -> str:
        return f"DecodeError({self.kind.value}: {self.message!r})"

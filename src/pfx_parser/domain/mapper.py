"""
Attribute mapper — turn a selected CertificateEntry into a ParsedCertificate.

Side-effect free: the same entry and the same `now` always give the same
record. Distinguished-name fields are looked up by their RFC 4514 short
name; attributes whose value cannot be read resolve to "" instead of
failing the parse.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from cryptography import x509

from pfx_parser.domain.cnpj import extract_cnpj
from pfx_parser.domain.models import (
    CertificateEntry,
    IssuerName,
    ParsedCertificate,
    SubjectName,
    Validity,
)
from pfx_parser.domain.oids import ICP_BRASIL_ISSUER_MARKER

_ONE_DAY = timedelta(days=1)


# ─────────────────────── Distinguished Names ───────────────────────


def _read_name(read: Callable[[], x509.Name]) -> list[tuple[str, str]]:
    """
    Flatten a Name into (short_name, value) pairs in encounter order.

    A Name that cryptography refuses to parse yields no pairs. Unregistered
    OIDs come back under their dotted form and never match a short name.
    """
    try:
        attributes = list(read())
    except ValueError:
        return []

    pairs: list[tuple[str, str]] = []
    for attribute in attributes:
        value = attribute.value
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        pairs.append((attribute.rfc4514_attribute_name, value))
    return pairs


def _first(pairs: Iterable[tuple[str, str]], short_name: str) -> str:
    return next((value for name, value in pairs if name == short_name), "")


def _all(pairs: Iterable[tuple[str, str]], short_name: str) -> tuple[str, ...]:
    return tuple(value for name, value in pairs if name == short_name)


def _subject(certificate: x509.Certificate) -> SubjectName:
    pairs = _read_name(lambda: certificate.subject)
    return SubjectName(
        cn=_first(pairs, "CN"),
        o=_first(pairs, "O"),
        ou=_all(pairs, "OU"),
        c=_first(pairs, "C"),
        st=_first(pairs, "ST"),
        l=_first(pairs, "L"),
    )


def _issuer(certificate: x509.Certificate) -> IssuerName:
    pairs = _read_name(lambda: certificate.issuer)
    return IssuerName(cn=_first(pairs, "CN"), o=_first(pairs, "O"))


# ─────────────────────── Validity ───────────────────────


def days_remaining(not_after: datetime, now: datetime) -> int:
    """
    Ceiling of |not_after - now| in whole days, negated once now > not_after.

    Computed on timedelta integers so sub-second gaps still count as a day.
    """
    distance = abs(not_after - now)
    days = -((-distance) // _ONE_DAY)
    return -days if now > not_after else days


def compute_validity(not_before: datetime, not_after: datetime, now: datetime) -> Validity:
    return Validity(
        not_before=not_before,
        not_after=not_after,
        is_valid=not_before <= now <= not_after,
        days_remaining=days_remaining(not_after, now),
    )


# ─────────────────────── Public API ───────────────────────


def fingerprint(der: bytes) -> str:
    """Lowercase hex SHA-1 of the certificate DER."""
    return hashlib.sha1(der).hexdigest()  # noqa: S324


def map_certificate(entry: CertificateEntry, now: datetime | None = None) -> ParsedCertificate:
    """
    Build the ParsedCertificate for an entry.

    `now` defaults to the current UTC instant; pass an aware datetime to pin
    the clock.
    """
    certificate = entry.certificate
    now = now if now is not None else datetime.now(UTC)
    issuer = _issuer(certificate)

    return ParsedCertificate(
        subject=_subject(certificate),
        issuer=issuer,
        validity=compute_validity(
            certificate.not_valid_before_utc,
            certificate.not_valid_after_utc,
            now,
        ),
        serial_number=format(certificate.serial_number, "x"),
        fingerprint=fingerprint(entry.der),
        cnpj=extract_cnpj(certificate),
        is_icp_brasil=ICP_BRASIL_ISSUER_MARKER in issuer.o.lower(),
    )

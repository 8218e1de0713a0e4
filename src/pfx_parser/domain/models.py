"""
Domain models — immutable records for decoded container entries and parse output.

CertificateEntry is what the decoder hands to the selector: one X.509
certificate found inside the PKCS#12 container, tagged with whether the
container paired it with a private key. ParsedCertificate is the only thing
that leaves the core.

All models are frozen dataclasses. Every string field of ParsedCertificate
is always present ("" when the certificate lacks it) so consumers never have
to branch on presence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding


@dataclass(frozen=True, slots=True)
class CertificateEntry:
    """
    One certificate bag decoded from the container.

    `der` is the exact DER encoding of the certificate; the fingerprint is
    computed over it. Key material is never stored, only whether the
    container carried a key for this certificate.
    """

    der: bytes = field(repr=False)
    certificate: x509.Certificate = field(repr=False, compare=False)
    has_private_key: bool = False
    friendly_name: str | None = None

    @classmethod
    def from_certificate(
        cls,
        certificate: x509.Certificate,
        has_private_key: bool = False,
        friendly_name: str | None = None,
    ) -> CertificateEntry:
        return cls(
            der=certificate.public_bytes(Encoding.DER),
            certificate=certificate,
            has_private_key=has_private_key,
            friendly_name=friendly_name,
        )


@dataclass(frozen=True, slots=True)
class SubjectName:
    """Subject distinguished-name fields. OU is the only repeatable field."""

    cn: str = ""
    o: str = ""
    ou: tuple[str, ...] = ()
    c: str = ""
    st: str = ""
    l: str = ""  # noqa: E741


@dataclass(frozen=True, slots=True)
class IssuerName:
    cn: str = ""
    o: str = ""


@dataclass(frozen=True, slots=True)
class Validity:
    """
    Validity window evaluated against a single instant.

    is_valid is True iff not_before <= now <= not_after. days_remaining is
    the ceiling of the absolute distance to not_after in days, negative once
    now is past not_after.
    """

    not_before: datetime
    not_after: datetime
    is_valid: bool
    days_remaining: int


@dataclass(frozen=True, slots=True)
class ParsedCertificate:
    """
    Identity, validity and CNPJ of the entity certificate inside a PKCS#12 container.

    `fingerprint` is the lowercase hex SHA-1 over the certificate DER.
    `cnpj` is None or exactly 14 ASCII digits, unformatted.
    """

    subject: SubjectName
    issuer: IssuerName
    validity: Validity
    serial_number: str
    fingerprint: str
    cnpj: str | None
    is_icp_brasil: bool

    def to_dict(self) -> dict[str, Any]:
        """Render with the short-name/camelCase keys downstream consumers expect."""
        return {
            "subject": {
                "CN": self.subject.cn,
                "O": self.subject.o,
                "OU": list(self.subject.ou),
                "C": self.subject.c,
                "ST": self.subject.st,
                "L": self.subject.l,
            },
            "issuer": {
                "CN": self.issuer.cn,
                "O": self.issuer.o,
            },
            "validity": {
                "notBefore": self.validity.not_before.isoformat(),
                "notAfter": self.validity.not_after.isoformat(),
                "isValid": self.validity.is_valid,
                "daysRemaining": self.validity.days_remaining,
            },
            "serialNumber": self.serial_number,
            "fingerprint": self.fingerprint,
            "cnpj": self.cnpj,
            "isICPBrasil": self.is_icp_brasil,
        }

"""Certificate status derived from a parsed validity window."""

from __future__ import annotations

from enum import Enum, unique

from pfx_parser.domain.models import ParsedCertificate

DEFAULT_EXPIRING_SOON_DAYS = 30


@unique
class CertificateStatus(Enum):
    VALID = "VALID"
    EXPIRED = "EXPIRED"
    EXPIRING_SOON = "EXPIRING_SOON"
    INVALID = "INVALID"
    # Not produced by certificate_status(); callers use it before a parse has run.
    PENDING = "PENDING"


def certificate_status(
    parsed: ParsedCertificate,
    expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> CertificateStatus:
    """
    Classify a parsed certificate.

    Outside its window before not_before → INVALID, past not_after → EXPIRED.
    Inside the window with at most `expiring_soon_days` left → EXPIRING_SOON.
    """
    validity = parsed.validity
    if not validity.is_valid:
        if validity.days_remaining < 0:
            return CertificateStatus.EXPIRED
        return CertificateStatus.INVALID
    if validity.days_remaining <= expiring_soon_days:
        return CertificateStatus.EXPIRING_SOON
    return CertificateStatus.VALID

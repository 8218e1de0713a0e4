"""Unit tests for certificate status classification."""

from __future__ import annotations

from datetime import timedelta

import pytest

from pfx_parser.domain.mapper import map_certificate
from pfx_parser.domain.status import CertificateStatus, certificate_status
from tests.factories import NOT_AFTER, NOT_BEFORE, make_certificate, make_entry


@pytest.fixture(scope="module")
def entry():
    return make_entry(make_certificate())


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (NOT_BEFORE - timedelta(days=1), CertificateStatus.INVALID),
        (NOT_BEFORE + timedelta(days=1), CertificateStatus.VALID),
        (NOT_AFTER - timedelta(days=31), CertificateStatus.VALID),
        (NOT_AFTER - timedelta(days=30), CertificateStatus.EXPIRING_SOON),
        (NOT_AFTER, CertificateStatus.EXPIRING_SOON),
        (NOT_AFTER + timedelta(seconds=1), CertificateStatus.EXPIRED),
    ],
    ids=["not-yet-valid", "fresh", "31-days-left", "30-days-left", "last-instant", "expired"],
)
def test_status(entry, now, expected: CertificateStatus) -> None:
    assert certificate_status(map_certificate(entry, now=now)) is expected


def test_custom_threshold(entry) -> None:
    """
    GIVEN 45 days left and a 60-day threshold
    WHEN classified
    THEN EXPIRING_SOON.
    """
    parsed = map_certificate(entry, now=NOT_AFTER - timedelta(days=45))
    assert certificate_status(parsed, expiring_soon_days=60) is CertificateStatus.EXPIRING_SOON
    assert certificate_status(parsed, expiring_soon_days=30) is CertificateStatus.VALID


def test_pending_is_never_derived(entry) -> None:
    statuses = {
        certificate_status(map_certificate(entry, now=NOT_BEFORE + timedelta(days=d)))
        for d in range(-5, 400, 15)
    }
    assert CertificateStatus.PENDING not in statuses

"""
Certificate selector — pick the entity certificate among the decoded entries.

Containers exported by Brazilian certificate authorities often bundle the
chain (entity, intermediate, root). The entity certificate is the one that
carries a CNPJ, so the selector walks the entries in decoder order and takes
the first one the CNPJ engine resolves. When none resolves, the first entry
is reported.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pfx_parser.domain.cnpj import extract_cnpj
from pfx_parser.domain.errors import DecodeErrorKind
from pfx_parser.domain.models import CertificateEntry
from pfx_parser.domain.result import Result

log = structlog.get_logger()


def select_certificate(entries: Sequence[CertificateEntry]) -> Result[CertificateEntry]:
    """
    Choose the entry to report.

    Returns Result.failure(NO_CERTIFICATE_FOUND) for an empty sequence.
    """
    if not entries:
        return Result.failure(
            DecodeErrorKind.NO_CERTIFICATE_FOUND,
            "No certificate found in the PKCS#12 container",
        )
    if len(entries) == 1:
        return Result.success(entries[0])

    for index, entry in enumerate(entries):
        if extract_cnpj(entry.certificate) is not None:
            log.debug("selector.chosen", index=index, total=len(entries), reason="cnpj")
            return Result.success(entry)

    log.debug("selector.chosen", index=0, total=len(entries), reason="first")
    return Result.success(entries[0])

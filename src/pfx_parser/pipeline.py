"""
Pipeline — decode → select → map, connected on the result track.

Domain layer — PURE BUSINESS LOGIC. The only collaborator with real work
behind it (decryption) is injected via the ContainerDecoder port.

  decoder.decode(data, password)
    → select_certificate(entries)
      → map_certificate(entry, now)

Each stage returns Result[T]; the first failure short-circuits the rest.
parse_certificate() is the exception-raising facade over run_pipeline()
for callers that do not compose Results.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from pfx_parser.adapters.pkcs12_decoder import Pkcs12ContainerDecoder
from pfx_parser.domain.errors import DecodeError
from pfx_parser.domain.mapper import map_certificate
from pfx_parser.domain.models import ParsedCertificate
from pfx_parser.domain.ports import ContainerDecoder
from pfx_parser.domain.result import Result
from pfx_parser.domain.selector import select_certificate

log = structlog.get_logger()


def run_pipeline(
    data: bytes,
    password: str,
    decoder: ContainerDecoder,
    now: datetime | None = None,
) -> Result[ParsedCertificate]:
    """
    Parse a PKCS#12 container into a ParsedCertificate.

    Flow:
      1. Decrypt the container and enumerate its certificates
      2. Select the entity certificate (first one with a CNPJ, else the first)
      3. Map subject, issuer, validity, fingerprint and CNPJ

    Returns Result[ParsedCertificate] on success, or the failure of the
    first stage that failed. Never a partially populated record.
    """
    return (
        decoder.decode(data, password)
        .flat_map(select_certificate)
        .map(lambda entry: map_certificate(entry, now=now))
        .peek(
            lambda parsed: log.info(
                "parser.complete",
                serial=parsed.serial_number,
                has_cnpj=parsed.cnpj is not None,
                is_icp_brasil=parsed.is_icp_brasil,
                is_valid=parsed.validity.is_valid,
            )
        )
    )


def parse_certificate(
    data: bytes,
    password: str,
    now: datetime | None = None,
) -> ParsedCertificate:
    """
    Parse a PKCS#12 container, raising DecodeError on failure.

    Pass password="" for containers exported without protection.
    """
    result = run_pipeline(data, password, decoder=Pkcs12ContainerDecoder(), now=now)
    if result.is_failure():
        raise DecodeError.from_failure(result.error())
    return result.value()

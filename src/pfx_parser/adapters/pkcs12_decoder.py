"""
PKCS#12 container decoder adapter — framing check + decryption + bag enumeration.

Adapter layer — implements the ContainerDecoder port using:
  - asn1crypto: outer PFX framing (version, authSafe content type)
  - cryptography (PyCA): MAC verification, PBE key derivation, decryption
    of the authenticated safe, X.509 loading

Pipeline:
  raw .pfx bytes
    → asn1crypto: pkcs12.Pfx.load() → reject anything that is not a PFX
    → cryptography: pkcs12.load_pkcs12(data, password)
    → list[CertificateEntry] (domain model)

Entry order: the certificate paired with the private key first (when the
container has one), then the additional certificates in the order the
container stores them. The selector relies on this order.
"""

from __future__ import annotations

import structlog
from asn1crypto import pkcs12 as asn1_pkcs12
from cryptography.hazmat.primitives.serialization import pkcs12

from pfx_parser.domain.errors import DecodeErrorKind
from pfx_parser.domain.models import CertificateEntry
from pfx_parser.domain.result import Result

log = structlog.get_logger()

# asn1crypto may render the version as the bare integer or as its named value.
_PFX_VERSIONS = (3, "v3")


# ─────────────────────── Framing ───────────────────────


def _check_framing(data: bytes) -> None:
    """
    Parse the outer PFX SEQUENCE and raise ValueError if it is not one.

    asn1crypto parses lazily, so the fields are read explicitly to force
    decoding of the parts that identify a PKCS#12 container.
    """
    if not data:
        raise ValueError("Empty container")
    pfx = asn1_pkcs12.Pfx.load(data, strict=True)
    version = pfx["version"].native
    if version not in _PFX_VERSIONS:
        raise ValueError(f"Unsupported PFX version: {version!r}")
    content_type = pfx["auth_safe"]["content_type"].native
    if content_type not in ("data", "signed_data"):
        raise ValueError(f"Unsupported authSafe content type: {content_type!r}")


# ─────────────────────── Decryption ───────────────────────


def _decrypt(data: bytes, password: str) -> pkcs12.PKCS12KeyAndCertificates:
    """Empty password means an unprotected container."""
    if password:
        return pkcs12.load_pkcs12(data, password.encode("utf-8"))
    try:
        return pkcs12.load_pkcs12(data, None)
    except ValueError:
        # Some exporters compute the MAC over an explicit empty string.
        return pkcs12.load_pkcs12(data, b"")


def _load_entries(data: bytes, password: str) -> list[CertificateEntry]:
    _check_framing(data)
    loaded = _decrypt(data, password)

    entries: list[CertificateEntry] = []
    if loaded.cert is not None:
        entries.append(
            _to_entry(loaded.cert, has_private_key=loaded.key is not None)
        )
    entries.extend(
        _to_entry(additional, has_private_key=False)
        for additional in loaded.additional_certs
    )
    return entries


def _to_entry(bag: pkcs12.PKCS12Certificate, has_private_key: bool) -> CertificateEntry:
    friendly_name = None
    if bag.friendly_name:
        friendly_name = bag.friendly_name.decode("utf-8", errors="replace")
    return CertificateEntry.from_certificate(
        bag.certificate,
        has_private_key=has_private_key,
        friendly_name=friendly_name,
    )


def _ensure_not_empty(entries: list[CertificateEntry]) -> Result[list[CertificateEntry]]:
    if not entries:
        return Result.failure(
            DecodeErrorKind.NO_CERTIFICATE_FOUND,
            "No certificate found in the PKCS#12 container",
        )
    return Result.success(entries)


# ─────────────────────── Public Decoder Class ───────────────────────


class Pkcs12ContainerDecoder:
    """
    Decode a password-protected PKCS#12 container into certificate entries.

    Implements the ContainerDecoder port.
    All exceptions are caught at this adapter boundary via Result.from_computation().
    """

    def decode(self, data: bytes, password: str) -> Result[list[CertificateEntry]]:
        """
        Decrypt the container and return its certificates in documented order.

        Returns Result.failure(BAD_PASSWORD_OR_CORRUPT) when the framing is
        wrong, the MAC does not verify or decryption fails; wrong password
        and corruption are not told apart.
        Returns Result.failure(NO_CERTIFICATE_FOUND) when the container
        decrypts but holds no certificate.
        """
        return (
            Result.from_computation(
                lambda: _load_entries(data, password),
                DecodeErrorKind.BAD_PASSWORD_OR_CORRUPT,
                "Invalid password or corrupted PKCS#12 container",
            )
            .flat_map(_ensure_not_empty)
            .peek(
                lambda entries: log.info(
                    "decoder.complete",
                    certificates=len(entries),
                    with_private_key=sum(1 for e in entries if e.has_private_key),
                )
            )
            .peek_failure(
                lambda err: log.warning(
                    "decoder.failed",
                    kind=err.kind.value,
                    error=type(err.exception).__name__ if err.exception else None,
                )
            )
        )

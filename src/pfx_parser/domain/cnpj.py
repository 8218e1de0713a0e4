"""
CNPJ extraction engine — resolve the 14-digit Brazilian taxpayer ID of a certificate.

Issuing authorities embed the CNPJ in different places, so resolution is an
ordered rule list; the first rule that yields a value wins and later rules
are not evaluated:

  1. subject_attribute  — subject attribute tagged 2.16.76.1.3.3
  2. san_other_name     — Subject Alternative Name otherName tagged 2.16.76.1.3.3
  3. common_name        — ":" or whitespace followed by exactly 14 digits in the CN

Rules 1 and 2 keep only the digits of the raw value and match only when
exactly 14 remain. No mod-11 check digit validation happens here:
extraction is format-only.

Every rule is a pure function of the certificate. A malformed subject, SAN
extension or otherName value means "no match" for that rule, never an error.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeAlias

import structlog
from asn1crypto import core
from cryptography import x509
from cryptography.x509.oid import NameOID

from pfx_parser.domain.oids import ICP_BRASIL_CNPJ

log = structlog.get_logger()

CNPJ_LENGTH = 14

# Separator, then exactly 14 ASCII digits not followed by another digit.
# The separator itself is a non-digit, so a longer run before it cannot leak in.
CNPJ_IN_COMMON_NAME = re.compile(r"[:\s]([0-9]{14})(?![0-9])")

_NON_DIGITS = re.compile(r"[^0-9]")

CnpjRule: TypeAlias = Callable[[x509.Certificate], str | None]


def _digits_only(raw: str) -> str | None:
    """Digits of `raw` when there are exactly CNPJ_LENGTH of them, else None."""
    digits = _NON_DIGITS.sub("", raw)
    return digits if len(digits) == CNPJ_LENGTH else None


def _as_text(value: str | bytes) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


# ─────────────────────── Rules ───────────────────────


def from_subject_attribute(certificate: x509.Certificate) -> str | None:
    """Rule 1: subject attribute with the ICP-Brasil CNPJ OID."""
    try:
        attributes = certificate.subject.get_attributes_for_oid(ICP_BRASIL_CNPJ)
    except ValueError:
        return None
    for attribute in attributes:
        cnpj = _digits_only(_as_text(attribute.value))
        if cnpj is not None:
            return cnpj
    return None


def _decode_other_name_value(raw: bytes) -> str | None:
    """
    Decode the DER value of an otherName into text.

    ICP-Brasil issuers use OCTET STRING, PrintableString, UTF8String or
    IA5String here; anything asn1crypto cannot load resolves to None.
    """
    try:
        native = core.load(raw).native
    except (ValueError, TypeError):
        return None
    if isinstance(native, (str, bytes)):
        return _as_text(native)
    return None


def from_san_other_name(certificate: x509.Certificate) -> str | None:
    """Rule 2: Subject Alternative Name otherName with the ICP-Brasil CNPJ OID."""
    # A repeated extension or an unsupported GeneralName makes the whole
    # extension list unreadable.
    try:
        san = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except (
        x509.ExtensionNotFound,
        x509.DuplicateExtension,
        x509.UnsupportedGeneralNameType,
        ValueError,
    ):
        return None
    for other_name in san.value.get_values_for_type(x509.OtherName):
        if other_name.type_id != ICP_BRASIL_CNPJ:
            continue
        text = _decode_other_name_value(other_name.value)
        if text is None:
            continue
        cnpj = _digits_only(text)
        if cnpj is not None:
            return cnpj
    return None


def from_common_name(certificate: x509.Certificate) -> str | None:
    """Rule 3: "<name>:<14 digits>" or "<name> <14 digits>" in the subject CN."""
    try:
        attributes = certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    except ValueError:
        return None
    if not attributes:
        return None
    match = CNPJ_IN_COMMON_NAME.search(_as_text(attributes[0].value))
    if match is None:
        return None
    return match.group(1)


CNPJ_RULES: tuple[tuple[str, CnpjRule], ...] = (
    ("subject_attribute", from_subject_attribute),
    ("san_other_name", from_san_other_name),
    ("common_name", from_common_name),
)


# ─────────────────────── Public API ───────────────────────


def extract_cnpj(certificate: x509.Certificate) -> str | None:
    """
    Resolve the CNPJ of a certificate, or None.

    Rules run in CNPJ_RULES order; the first non-None value is returned.
    """
    for name, rule in CNPJ_RULES:
        cnpj = rule(certificate)
        if cnpj is not None:
            log.debug("cnpj.resolved", rule=name)
            return cnpj
    return None


def format_cnpj(value: str) -> str:
    """
    Apply the 00.000.000/0000-00 display mask.

    Non-digits are dropped first; partial inputs are masked as far as their
    digits go and the result never exceeds 18 characters.

        >>> format_cnpj("12345678000199")
        '12.345.678/0001-99'
        >>> format_cnpj("1234567")
        '12.345.67'
    """
    masked = _NON_DIGITS.sub("", value)
    masked = re.sub(r"^([0-9]{2})([0-9])", r"\1.\2", masked, count=1)
    masked = re.sub(r"^([0-9]{2})\.([0-9]{3})([0-9])", r"\1.\2.\3", masked, count=1)
    masked = re.sub(r"\.([0-9]{3})([0-9])", r".\1/\2", masked, count=1)
    masked = re.sub(r"([0-9]{4})([0-9])", r"\1-\2", masked, count=1)
    return masked[:18]

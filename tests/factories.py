"""
Builders for in-memory X.509 certificates and PKCS#12 containers.

Every container used by the suite is produced here with cryptography, so no
binary fixtures (and no real taxpayer data) live in the repository. EC P-256
keys keep generation fast.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from asn1crypto import core
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    NoEncryption,
    pkcs12,
)
from cryptography.x509.oid import NameOID

from pfx_parser.domain.models import CertificateEntry
from pfx_parser.domain.oids import ICP_BRASIL_CNPJ

NOT_BEFORE = datetime(2025, 1, 10, 12, 0, 0, tzinfo=UTC)
NOT_AFTER = datetime(2026, 1, 10, 12, 0, 0, tzinfo=UTC)

ICP_ISSUER_O = "ICP-Brasil"
ICP_ISSUER_CN = "AC SOLUTI Multipla v5"


def make_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


def other_name_octet_string(value: str) -> x509.OtherName:
    """SAN otherName with the CNPJ OID and an OCTET STRING value, as ICP-Brasil issues it."""
    return x509.OtherName(ICP_BRASIL_CNPJ, core.OctetString(value.encode("ascii")).dump())


def other_name_printable(value: str) -> x509.OtherName:
    return x509.OtherName(ICP_BRASIL_CNPJ, core.PrintableString(value).dump())


def make_certificate(
    common_name: str = "ACME LTDA",
    *,
    organization: str | None = "ACME LTDA",
    organizational_units: Sequence[str] = (),
    country: str | None = "BR",
    state: str | None = "SP",
    locality: str | None = "Sao Paulo",
    subject_cnpj: str | None = None,
    san: Sequence[x509.GeneralName] = (),
    issuer_cn: str = ICP_ISSUER_CN,
    issuer_o: str | None = ICP_ISSUER_O,
    not_before: datetime = NOT_BEFORE,
    not_after: datetime = NOT_AFTER,
    serial_number: int | None = None,
    key: ec.EllipticCurvePrivateKey | None = None,
) -> x509.Certificate:
    """
    Build a certificate signed by a throwaway issuer key.

    Subject attributes are added in the order C, ST, L, O, OU..., CN, then
    the CNPJ attribute when `subject_cnpj` is given.
    """
    key = key or make_key()

    subject_attributes: list[x509.NameAttribute] = []
    if country is not None:
        subject_attributes.append(x509.NameAttribute(NameOID.COUNTRY_NAME, country))
    if state is not None:
        subject_attributes.append(x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, state))
    if locality is not None:
        subject_attributes.append(x509.NameAttribute(NameOID.LOCALITY_NAME, locality))
    if organization is not None:
        subject_attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
    subject_attributes.extend(
        x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, unit)
        for unit in organizational_units
    )
    subject_attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    if subject_cnpj is not None:
        subject_attributes.append(x509.NameAttribute(ICP_BRASIL_CNPJ, subject_cnpj))

    issuer_attributes = [x509.NameAttribute(NameOID.COUNTRY_NAME, "BR")]
    if issuer_o is not None:
        issuer_attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, issuer_o))
    issuer_attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, issuer_cn))

    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name(subject_attributes))
        .issuer_name(x509.Name(issuer_attributes))
        .public_key(key.public_key())
        .serial_number(serial_number or x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
    )
    if san:
        builder = builder.add_extension(x509.SubjectAlternativeName(list(san)), critical=False)

    return builder.sign(make_key(), hashes.SHA256())


def make_entry(certificate: x509.Certificate, has_private_key: bool = False) -> CertificateEntry:
    return CertificateEntry.from_certificate(certificate, has_private_key=has_private_key)


def make_pfx(
    certificate: x509.Certificate | None = None,
    key: ec.EllipticCurvePrivateKey | None = None,
    cas: Sequence[x509.Certificate] = (),
    password: str = "secret",
) -> bytes:
    """
    Serialize a PKCS#12 container.

    An empty password produces an unprotected container.
    """
    encryption = BestAvailableEncryption(password.encode("utf-8")) if password else NoEncryption()
    return pkcs12.serialize_key_and_certificates(
        b"entity",
        key,
        certificate,
        list(cas) or None,
        encryption,
    )


def make_entity_pfx(password: str = "secret", **certificate_kwargs: object) -> bytes:
    """Container with a private key and its matching entity certificate."""
    key = make_key()
    certificate = make_certificate(key=key, **certificate_kwargs)  # type: ignore[arg-type]
    return make_pfx(certificate, key, password=password)


def with_duplicated_extension(
    certificate: x509.Certificate, extension_oid: x509.ObjectIdentifier
) -> x509.Certificate:
    """
    Re-encode a certificate with one of its extensions present twice.

    The signature no longer matches the TBS bytes; nothing in the parser
    verifies it.
    """
    parsed = asn1_x509.Certificate.load(certificate.public_bytes(Encoding.DER))
    tbs = parsed["tbs_certificate"]
    extensions = list(tbs["extensions"])
    repeated = next(e for e in extensions if e["extn_id"].dotted == extension_oid.dotted_string)
    tbs["extensions"] = [*extensions, asn1_x509.Extension.load(repeated.dump())]
    return x509.load_der_x509_certificate(parsed.dump())

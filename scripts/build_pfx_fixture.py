"""
Build a sample ICP-Brasil-style PKCS#12 container for manual CLI runs.

Infrastructure script — writes a self-signed chain bundled the way A1
certificates are distributed by Brazilian certificate authorities, so the
pfx-parser command can be tried without a real certificate.

Output structure:
  PFX (password-protected, AES-256 + HMAC-SHA256)
  ├── key bag        — entity private key (EC P-256)
  ├── cert bag       — entity certificate
  │     subject CN = "<company>:<cnpj>"
  │     SAN otherName 2.16.76.1.3.3 = OCTET STRING "<cnpj>"
  └── cert bags      — "AC Intermediaria" and "AC Raiz" (O = ICP-Brasil)

Usage:
  python scripts/build_pfx_fixture.py [output.pfx] [password]
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

from asn1crypto import core
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import BestAvailableEncryption, pkcs12
from cryptography.x509.oid import NameOID

ICP_BRASIL_CNPJ = x509.ObjectIdentifier("2.16.76.1.3.3")

COMPANY = "EMPRESA EXEMPLO LTDA"
CNPJ = "11222333000181"
DEFAULT_OUTPUT = Path("sample.pfx")
DEFAULT_PASSWORD = "exemplo"


def _name(common_name: str, organization: str) -> x509.Name:
    return x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "BR"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])


def _issue(
    subject: x509.Name,
    subject_key: ec.EllipticCurvePrivateKey,
    issuer: x509.Name,
    issuer_key: ec.EllipticCurvePrivateKey,
    *,
    is_ca: bool,
    san: x509.SubjectAlternativeName | None = None,
) -> x509.Certificate:
    now = datetime.now(UTC)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(subject_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365 if not is_ca else 3650))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
    )
    if san is not None:
        builder = builder.add_extension(san, critical=False)
    return builder.sign(issuer_key, hashes.SHA256())


def build_sample(output: Path, password: str) -> Path:
    """Build the sample container and return the output path."""
    root_key = ec.generate_private_key(ec.SECP256R1())
    intermediate_key = ec.generate_private_key(ec.SECP256R1())
    entity_key = ec.generate_private_key(ec.SECP256R1())

    root_name = _name("AC Raiz Exemplo", "ICP-Brasil")
    intermediate_name = _name("AC Intermediaria Exemplo", "ICP-Brasil")

    root = _issue(root_name, root_key, root_name, root_key, is_ca=True)
    intermediate = _issue(intermediate_name, intermediate_key, root_name, root_key, is_ca=True)

    cnpj_other_name = x509.OtherName(ICP_BRASIL_CNPJ, core.OctetString(CNPJ.encode("ascii")).dump())
    entity = _issue(
        _name(f"{COMPANY}:{CNPJ}", COMPANY),
        entity_key,
        intermediate_name,
        intermediate_key,
        is_ca=False,
        san=x509.SubjectAlternativeName([cnpj_other_name]),
    )

    pfx = pkcs12.serialize_key_and_certificates(
        COMPANY.encode("utf-8"),
        entity_key,
        entity,
        [intermediate, root],
        BestAvailableEncryption(password.encode("utf-8")),
    )
    output.write_bytes(pfx)

    print(f"✓ {output} ({len(pfx)} bytes)")
    print(f"  Entity: {COMPANY}:{CNPJ}")
    print("  Chain:  AC Intermediaria Exemplo → AC Raiz Exemplo")
    return output


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT
    secret = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_PASSWORD
    build_sample(target, secret)

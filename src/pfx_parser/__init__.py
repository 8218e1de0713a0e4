"""
pfx_parser — ICP-Brasil PKCS#12 certificate parser.

Decrypts a password-protected .pfx/.p12 container, selects the entity
certificate it carries and reports subject/issuer identity, the validity
window and the CNPJ embedded by the issuing authority.

Built on a Railway-Oriented result track: every stage returns a Result,
and parse_certificate() turns a failure into a typed DecodeError.
"""

__version__ = "0.1.0"

from pfx_parser.domain.errors import DecodeError, DecodeErrorKind
from pfx_parser.domain.models import ParsedCertificate
from pfx_parser.pipeline import parse_certificate, run_pipeline

__all__ = [
    "DecodeError",
    "DecodeErrorKind",
    "ParsedCertificate",
    "parse_certificate",
    "run_pipeline",
]

"""
Ports — Protocol-based interfaces for infrastructure adapters.

The pipeline depends on these contracts only. Adapters satisfy them
structurally by implementing the methods, no inheritance needed:

  Domain ← Ports (protocols) ← Adapters (implementations)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pfx_parser.domain.models import CertificateEntry
from pfx_parser.domain.result import Result


@runtime_checkable
class ContainerDecoder(Protocol):
    """
    Port: decrypt a PKCS#12 container and enumerate its certificates.

    The implementation handles:
      1. Outer ASN.1 framing (PFX structure)
      2. MAC verification and PBE key derivation from the password
      3. Decryption of the authenticated safe
      4. Enumeration of certificate bags, in a stable documented order

    All-or-nothing: either every certificate entry is returned or the result
    is a failure. An empty password means "no password".
    """

    def decode(self, data: bytes, password: str) -> Result[list[CertificateEntry]]: ...

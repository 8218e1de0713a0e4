"""
Object identifiers used by ICP-Brasil certificates.

ICP-Brasil (DOC-ICP-04) reserves the 2.16.76.1.3 arc for identity data
embedded in subject attributes and in Subject Alternative Name otherName
entries. Only the legal-entity CNPJ is interpreted by this package.
"""

from __future__ import annotations

from cryptography.x509 import ObjectIdentifier

# 14-digit CNPJ of the legal entity holding the certificate.
ICP_BRASIL_CNPJ = ObjectIdentifier("2.16.76.1.3.3")

# Substring of the issuer O attribute identifying the ICP-Brasil hierarchy.
ICP_BRASIL_ISSUER_MARKER = "icp-brasil"

"""
Shared test fixtures for the pfx-parser test suite.

Containers are generated in memory (see tests/factories.py). Generation is
cheap but not free, so the common ones are session-scoped.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
import structlog
from cryptography import x509

from pfx_parser.adapters.pkcs12_decoder import Pkcs12ContainerDecoder
from tests.factories import (
    NOT_AFTER,
    NOT_BEFORE,
    make_certificate,
    make_entity_pfx,
    make_key,
    make_pfx,
    other_name_octet_string,
)

PASSWORD = "s3nh@-Forte"
CNPJ_FROM_OID = "11222333000181"
CNPJ_FROM_CN = "99888777000166"


@pytest.fixture(autouse=True)
def _quiet_structlog():
    """
    Route log events to a ReturnLogger and disable logger caching.

    Module-level loggers would otherwise keep whatever sink was active the
    first time they were used, including a CliRunner stream from another test.
    """
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture()
def decoder() -> Pkcs12ContainerDecoder:
    return Pkcs12ContainerDecoder()


@pytest.fixture(scope="session")
def entity_pfx() -> bytes:
    """
    Password-protected container with key + ICP-Brasil entity certificate.

    The CNPJ sits in a SAN otherName; the CN carries a different CNPJ-like
    suffix so rule priority is observable.
    """
    return make_entity_pfx(
        password=PASSWORD,
        common_name=f"ACME LTDA:{CNPJ_FROM_CN}",
        organizational_units=("Certificado PJ A1", "Presencial", "12345678000100"),
        san=(other_name_octet_string("11.222.333/0001-81"),),
    )


@pytest.fixture(scope="session")
def unprotected_pfx() -> bytes:
    """Container exported without a password."""
    return make_entity_pfx(password="", common_name=f"PADARIA SOL LTDA:{CNPJ_FROM_OID}")


@pytest.fixture(scope="session")
def chain_pfx() -> tuple[bytes, list[x509.Certificate]]:
    """
    Container with three bundled certificates and no key.

    Only the second one carries a resolvable CNPJ.
    """
    root = make_certificate("AC Raiz Brasileira v10", organization="ICP-Brasil")
    entity = make_certificate(f"ACME LTDA:{CNPJ_FROM_OID}")
    intermediate = make_certificate("AC SOLUTI v5", organization="ICP-Brasil")
    certificates = [root, entity, intermediate]
    return make_pfx(cas=certificates, password=PASSWORD), certificates


@pytest.fixture(scope="session")
def key_only_pfx() -> bytes:
    """Container that decrypts fine but holds no certificate bag."""
    return make_pfx(key=make_key(), password=PASSWORD)


@pytest.fixture()
def inside_window():
    """An instant comfortably inside [NOT_BEFORE, NOT_AFTER]."""
    return NOT_BEFORE + timedelta(days=100)


@pytest.fixture()
def after_window():
    return NOT_AFTER + timedelta(days=3, hours=1)

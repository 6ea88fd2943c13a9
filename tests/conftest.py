"""
Shared fixtures: a frozen clock, fresh stores, and an API client wired
to them through dependency overrides.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from riskdesk.config import DEFAULT_RISK_CONFIG
from riskdesk.main import (
    app,
    get_client_registry,
    get_clock,
    get_config_store,
    get_document_store,
)
from riskdesk.schemas import ClientCreate
from riskdesk.services.client_registry import ClientRegistry
from riskdesk.services.config_store import RiskConfigStore
from riskdesk.services.document_store import DocumentStore

NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def default_config():
    return DEFAULT_RISK_CONFIG.model_copy(deep=True)


@pytest.fixture
def config_store(clock):
    return RiskConfigStore(clock=clock)


@pytest.fixture
def registry(clock):
    return ClientRegistry(clock=clock)


@pytest.fixture
def document_store(tmp_path, clock):
    return DocumentStore(tmp_path / "uploads", max_bytes=1024, clock=clock)


@pytest.fixture
def boris():
    return ClientCreate(
        first_name="Boris",
        last_name="Ivanov",
        dob="1978-11-23",
        address="456 High St, Moscow",
        country="Russia",
        postal_code="101000",
        job="CEO",
        industry="Oil & Gas",
        pep=True,
    )


@pytest.fixture
def alice():
    return ClientCreate(
        first_name="Alice",
        last_name="Thompson",
        dob="1985-04-12",
        address="123 Maple Ave, London",
        country="United Kingdom",
        postal_code="SW1A 1AA",
        job="Software Engineer",
        industry="Technology",
        pep=False,
    )


@pytest.fixture
def api(config_store, registry, document_store, clock):
    app.dependency_overrides[get_config_store] = lambda: config_store
    app.dependency_overrides[get_client_registry] = lambda: registry
    app.dependency_overrides[get_document_store] = lambda: document_store
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()

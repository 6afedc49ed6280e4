"""Shared fixtures: in-memory stores and an offering service built on them."""

import os

import pytest

# keep tests off any real database configured in a local .env
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB", "edc_backend_test")

from app.services.offering_service import OfferingService  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryAssetStore,
    InMemoryContractDefinitionStore,
    InMemoryPolicyDefinitionStore,
)


@pytest.fixture
def asset_store():
    return InMemoryAssetStore()


@pytest.fixture
def policy_store():
    return InMemoryPolicyDefinitionStore()


@pytest.fixture
def contract_store():
    return InMemoryContractDefinitionStore()


@pytest.fixture
def service(asset_store, policy_store, contract_store):
    return OfferingService(asset_store, policy_store, contract_store)

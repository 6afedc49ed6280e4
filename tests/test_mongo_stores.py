"""
Mongo store adapter tests.

The Motor collection is replaced by an AsyncMock; the tests check document
mapping and the translation of driver errors into persistence errors.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from app.core.errors import DuplicateIdError, EntityNotFoundError, PersistenceError
from app.db.client import build_stores
from app.db.stores import MongoAssetStore, MongoContractDefinitionStore, MongoPolicyDefinitionStore
from app.services.transform_service import OfferingTransformer
from tests.factories import asset_entry, contract_request, policy_request

transformer = OfferingTransformer()


def _collection():
    collection = AsyncMock()
    collection.replace_one.return_value = MagicMock(matched_count=1)
    return collection


@pytest.mark.asyncio
async def test_create_stores_entity_under_its_id():
    collection = _collection()
    asset = transformer.to_asset(asset_entry("a1"))

    await MongoAssetStore(collection).create(asset)

    doc = collection.insert_one.await_args.args[0]
    assert doc["_id"] == "a1"
    assert "id" not in doc
    assert doc["dataAddress"]["properties"]["type"] == "HttpData"


@pytest.mark.asyncio
async def test_find_by_id_maps_document_back():
    collection = _collection()
    policy = transformer.to_policy_definition(policy_request("p1"))
    doc = policy.model_dump(mode="json")
    doc["_id"] = doc.pop("id")
    collection.find_one.return_value = doc

    found = await MongoPolicyDefinitionStore(collection).find_by_id("p1")

    collection.find_one.assert_awaited_once_with({"_id": "p1"})
    assert found == policy


@pytest.mark.asyncio
async def test_find_by_id_unknown_returns_none():
    collection = _collection()
    collection.find_one.return_value = None

    assert await MongoAssetStore(collection).find_by_id("nope") is None


@pytest.mark.asyncio
async def test_duplicate_key_is_duplicate_id_error():
    collection = _collection()
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")
    contract = transformer.to_contract_definition(contract_request("c1"))

    with pytest.raises(DuplicateIdError) as exc_info:
        await MongoContractDefinitionStore(collection).save(contract)

    assert exc_info.value.entity_id == "c1"


@pytest.mark.asyncio
async def test_driver_error_is_persistence_error():
    collection = _collection()
    collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")

    with pytest.raises(PersistenceError):
        await MongoAssetStore(collection).create(transformer.to_asset(asset_entry("a1")))


@pytest.mark.asyncio
async def test_update_replaces_whole_document():
    collection = _collection()
    contract = transformer.to_contract_definition(contract_request("c1"))

    await MongoContractDefinitionStore(collection).update(contract)

    query, doc = collection.replace_one.await_args.args
    assert query == {"_id": "c1"}
    assert doc["assetsSelector"] == [{"operandLeft": "id", "operator": "=", "operandRight": "a1"}]


@pytest.mark.asyncio
async def test_update_unknown_id_fails():
    collection = _collection()
    collection.replace_one.return_value = MagicMock(matched_count=0)

    with pytest.raises(EntityNotFoundError):
        await MongoAssetStore(collection).update(transformer.to_asset(asset_entry("a1")))


@pytest.mark.asyncio
async def test_deletes_are_idempotent():
    collection = _collection()
    collection.delete_one.return_value = MagicMock(deleted_count=0)

    await MongoAssetStore(collection).delete_by_id("a1")
    await MongoPolicyDefinitionStore(collection).delete("p1")
    await MongoContractDefinitionStore(collection).delete_by_id("c1")

    assert [c.args[0] for c in collection.delete_one.await_args_list] == [{"_id": "a1"}, {"_id": "p1"}, {"_id": "c1"}]


def test_build_stores_uses_configured_collections():
    db = MagicMock()

    assets, policies, contracts = build_stores(db)

    assert isinstance(assets, MongoAssetStore)
    assert isinstance(policies, MongoPolicyDefinitionStore)
    assert isinstance(contracts, MongoContractDefinitionStore)
    assert [c.args[0] for c in db.__getitem__.call_args_list] == ["assets", "policy_definitions", "contract_definitions"]

"""
Store adapters for offering entities.

This module defines the store contracts consumed by the offering service
and their MongoDB implementations. Each store owns one collection and keys
its documents by entity id (``_id``), so a create with an existing id is
rejected by the primary key index.

The three stores are independent: there is no transaction spanning them.
Callers that need all-or-nothing behaviour across stores must compensate
themselves (see `app.services.compensation`).

Contract common to all stores:
    - ``find_by_id`` returns None when the id is unknown.
    - ``create``/``save`` raise `DuplicateIdError` when the id exists.
    - ``update`` raises `EntityNotFoundError` when the id does not exist.
    - deletes are idempotent and never fail on an unknown id.
    - any other backend failure is raised as `PersistenceError`.
"""

from typing import Generic, Optional, Protocol, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.errors import DuplicateIdError, EntityNotFoundError, PersistenceError
from app.models.asset import Asset
from app.models.contract import ContractDefinition
from app.models.policy import PolicyDefinition


class AssetStore(Protocol):
    async def find_by_id(self, asset_id: str) -> Optional[Asset]: ...
    async def create(self, asset: Asset) -> None: ...
    async def update(self, asset: Asset) -> None: ...
    async def delete_by_id(self, asset_id: str) -> None: ...


class PolicyDefinitionStore(Protocol):
    async def find_by_id(self, policy_id: str) -> Optional[PolicyDefinition]: ...
    async def create(self, policy: PolicyDefinition) -> None: ...
    async def update(self, policy: PolicyDefinition) -> None: ...
    async def delete(self, policy_id: str) -> None: ...


class ContractDefinitionStore(Protocol):
    async def find_by_id(self, contract_id: str) -> Optional[ContractDefinition]: ...
    async def save(self, contract: ContractDefinition) -> None: ...
    async def update(self, contract: ContractDefinition) -> None: ...
    async def delete_by_id(self, contract_id: str) -> None: ...


M = TypeVar("M", bound=BaseModel)


class _MongoStore(Generic[M]):
    """Shared document mapping and error translation for the Mongo stores."""

    model: Type[M]
    kind: str

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    def _to_doc(self, entity: M) -> dict:
        doc = entity.model_dump(mode="json")
        doc["_id"] = doc.pop("id")
        return doc

    def _from_doc(self, doc: dict) -> M:
        doc = dict(doc)
        doc["id"] = doc.pop("_id")
        return self.model.model_validate(doc)

    async def find_by_id(self, entity_id: str) -> Optional[M]:
        try:
            doc = await self._collection.find_one({"_id": entity_id})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to read {self.kind} {entity_id}: {e}", entity_id) from e
        return self._from_doc(doc) if doc else None

    async def _insert(self, entity: M) -> None:
        try:
            await self._collection.insert_one(self._to_doc(entity))
        except DuplicateKeyError as e:
            raise DuplicateIdError(f"{self.kind} with id {entity.id} already exists", entity.id) from e
        except PyMongoError as e:
            raise PersistenceError(f"Failed to create {self.kind} {entity.id}: {e}", entity.id) from e

    async def update(self, entity: M) -> None:
        try:
            result = await self._collection.replace_one({"_id": entity.id}, self._to_doc(entity))
        except PyMongoError as e:
            raise PersistenceError(f"Failed to update {self.kind} {entity.id}: {e}", entity.id) from e
        if result.matched_count == 0:
            raise EntityNotFoundError(f"{self.kind} with id {entity.id} not found", entity.id)

    async def _delete(self, entity_id: str) -> None:
        try:
            await self._collection.delete_one({"_id": entity_id})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to delete {self.kind} {entity_id}: {e}", entity_id) from e


class MongoAssetStore(_MongoStore[Asset]):
    model = Asset
    kind = "asset"

    async def create(self, asset: Asset) -> None:
        await self._insert(asset)

    async def delete_by_id(self, asset_id: str) -> None:
        await self._delete(asset_id)


class MongoPolicyDefinitionStore(_MongoStore[PolicyDefinition]):
    model = PolicyDefinition
    kind = "policy definition"

    async def create(self, policy: PolicyDefinition) -> None:
        await self._insert(policy)

    async def delete(self, policy_id: str) -> None:
        await self._delete(policy_id)


class MongoContractDefinitionStore(_MongoStore[ContractDefinition]):
    model = ContractDefinition
    kind = "contract definition"

    async def save(self, contract: ContractDefinition) -> None:
        await self._insert(contract)

    async def delete_by_id(self, contract_id: str) -> None:
        await self._delete(contract_id)

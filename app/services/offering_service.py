"""
Offering service.

This module implements the use-case operations that create or update an
offering: an asset, a policy definition and a contract definition handled
as one logical unit across three stores that share no transaction.

Create persists the three entities in the fixed order asset -> policy
definition -> contract definition. If any write fails, every entity
attempted so far, the failing one included, is deleted again before the
original error is reported.
This is best-effort compensation, not atomicity: a failing delete is logged
and the entity it targeted remains in its store.

Update is an upsert per sub-request. Each present sub-request is created
when its id is unknown and replaced when it exists. There is no
compensation on update; a failure leaves earlier upserts of the same call
in place, and re-running the same update converges.

Neither operation checks that the contract definition's policy ids
reference existing policy definitions.
"""

from typing import Optional

import structlog

from app.core.errors import MissingField, OfferingError, PersistenceFailure
from app.db.stores import AssetStore, ContractDefinitionStore, PolicyDefinitionStore
from app.models.asset import Asset
from app.models.contract import ContractDefinition
from app.models.policy import PolicyDefinition
from app.schemas.offering import CreateOfferingDto, PolicyDefinitionRequestDto, UpdateOfferingDto
from app.services.compensation import Step, StepFailed, run_with_compensation
from app.services.transform_service import OfferingTransformer

logger = structlog.get_logger(__name__)


class OfferingService:
    """
    Coordinates offering writes across the asset, policy and contract stores.

    Args:
        asset_store (AssetStore): Store holding assets.
        policy_store (PolicyDefinitionStore): Store holding policy definitions.
        contract_store (ContractDefinitionStore): Store holding contract definitions.
        transformer (OfferingTransformer): Converts request DTOs to domain entities.
    """

    def __init__(
        self,
        asset_store: AssetStore,
        policy_store: PolicyDefinitionStore,
        contract_store: ContractDefinitionStore,
        transformer: Optional[OfferingTransformer] = None,
    ):
        self.asset_store = asset_store
        self.policy_store = policy_store
        self.contract_store = contract_store
        self.transformer = transformer or OfferingTransformer()

    # ------------------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------------------

    async def create(self, dto: Optional[CreateOfferingDto]) -> None:
        """
        Creates the asset, policy definition and contract definition.

        All inputs are validated and transformed before any store is
        touched. If persisting one entity fails, the ones attempted so far
        are deleted again and the original failure is raised.

        Args:
            dto (CreateOfferingDto): Offering with all three sub-requests.

        Raises:
            MissingField: If the offering or one of its sub-requests is absent.
            InvalidInput: If a sub-request cannot be transformed.
            PersistenceFailure: If a store write failed. Raised after
                compensation; its cause is the store's error.
        """

        self._validate_create(dto)

        asset = self.transformer.to_asset(dto.assetEntry)
        policy = self.transformer.to_policy_definition(dto.policyDefinitionRequest)
        contract = self.transformer.to_contract_definition(dto.contractDefinitionRequest)

        await self._persist(asset, policy, contract)
        logger.info("offering.created", asset_id=asset.id, policy_id=policy.id, contract_id=contract.id)

    def _validate_create(self, dto: Optional[CreateOfferingDto]) -> None:
        if dto is None:
            raise MissingField("CreateOfferingDto")
        if dto.assetEntry is None:
            raise MissingField("assetEntry", "No AssetEntry provided")
        if dto.policyDefinitionRequest is None:
            raise MissingField("policyDefinitionRequest", "No PolicyDefinitionRequest provided")
        if dto.contractDefinitionRequest is None:
            raise MissingField("contractDefinitionRequest", "No ContractDefinitionRequest provided")

    async def _persist(self, asset: Asset, policy: PolicyDefinition, contract: ContractDefinition) -> None:
        steps = [
            Step(
                "asset",
                lambda: self.asset_store.create(asset),
                lambda: self.asset_store.delete_by_id(asset.id),
            ),
            Step(
                "policy definition",
                lambda: self.policy_store.create(policy),
                lambda: self.policy_store.delete(policy.id),
            ),
            Step(
                "contract definition",
                lambda: self.contract_store.save(contract),
                lambda: self.contract_store.delete_by_id(contract.id),
            ),
        ]
        try:
            await run_with_compensation(steps)
        except StepFailed as e:
            logger.error("offering.create.failed", step=e.step, error=str(e.cause))
            raise PersistenceFailure(e.cause, step=e.step) from e.cause

    # ------------------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------------------

    async def update(self, dto: Optional[UpdateOfferingDto]) -> None:
        """
        Upserts every sub-request present in the offering.

        Absent sub-requests leave their entity untouched. Present ones are
        transformed first, so a malformed sub-request fails before any
        write. Writes then run in the order asset -> policy definition ->
        contract definition and are not rolled back on failure.

        Args:
            dto (UpdateOfferingDto): Offering with any subset of sub-requests.

        Raises:
            MissingField: If the offering itself is absent.
            InvalidInput: If a present sub-request cannot be transformed.
            PersistenceFailure: If a store call failed.
        """

        if dto is None:
            raise MissingField("UpdateOfferingDto")

        asset = self.transformer.to_asset(dto.assetEntry) if dto.assetEntry is not None else None
        contract = (
            self.transformer.to_contract_definition(dto.contractDefinitionRequest)
            if dto.contractDefinitionRequest is not None
            else None
        )
        policy_request = dto.policyDefinitionRequest
        policy = (
            self.transformer.to_policy_definition(policy_request)
            if policy_request is not None and policy_request.policy is not None
            else None
        )

        if asset is not None:
            await self._guard("asset", self._upsert_asset(asset))
        if policy_request is not None:
            await self._guard("policy definition", self._upsert_policy(policy_request, policy))
        if contract is not None:
            await self._guard("contract definition", self._upsert_contract(contract))

    async def _upsert_asset(self, asset: Asset) -> None:
        existing = await self.asset_store.find_by_id(asset.id)
        if existing is None:
            await self.asset_store.create(asset)
            logger.info("offering.asset.created", asset_id=asset.id)
        else:
            await self.asset_store.update(asset.model_copy(update={"createdAt": existing.createdAt}))
            logger.info("offering.asset.updated", asset_id=asset.id)

    async def _upsert_policy(self, request: PolicyDefinitionRequestDto, policy: Optional[PolicyDefinition]) -> None:
        existing = await self.policy_store.find_by_id(request.id)
        if existing is None:
            if policy is None:
                # no body to create from; fails as invalid input
                policy = self.transformer.to_policy_definition(request)
            await self.policy_store.create(policy)
            logger.info("offering.policy.created", policy_id=request.id)
        elif policy is None:
            logger.warning("offering.policy.update_skipped", policy_id=request.id, reason="policy body is null")
        else:
            await self.policy_store.update(policy.model_copy(update={"createdAt": existing.createdAt}))
            logger.info("offering.policy.updated", policy_id=request.id)

    async def _upsert_contract(self, contract: ContractDefinition) -> None:
        existing = await self.contract_store.find_by_id(contract.id)
        if existing is None:
            await self.contract_store.save(contract)
            logger.info("offering.contract.created", contract_id=contract.id)
        else:
            await self.contract_store.update(contract.model_copy(update={"createdAt": existing.createdAt}))
            logger.info("offering.contract.updated", contract_id=contract.id)

    async def _guard(self, step: str, upsert) -> None:
        try:
            await upsert
        except OfferingError:
            raise
        except Exception as e:
            logger.error("offering.update.failed", step=step, error=str(e))
            raise PersistenceFailure(e, step=step) from e

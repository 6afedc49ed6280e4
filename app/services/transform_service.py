"""
Offering transform stage.

This module converts the validated request DTOs of an offering into the
three domain entities persisted by the stores. Every conversion is pure:
no store is read or written here, so a failure at this stage never leaves
anything behind.

Each request type has its own named transform, called directly by the
offering service:

    - ``AssetEntryDto``               -> ``to_asset``
    - ``PolicyDefinitionRequestDto``  -> ``to_policy_definition``
    - ``ContractDefinitionRequestDto`` -> ``to_contract_definition``

All failures are raised as ``InvalidInput`` carrying the underlying cause.
"""

from typing import List

from pydantic import ValidationError

from app.core.errors import InvalidInput
from app.models.asset import Asset, DataAddress
from app.models.contract import ContractDefinition, Criterion
from app.models.policy import Constraint, Policy, PolicyDefinition, Rule
from app.schemas.offering import (
    AssetEntryDto,
    ContractDefinitionRequestDto,
    CriterionDto,
    PermissionDto,
    PolicyDefinitionRequestDto,
    PolicyDto,
)


class PolicyBuildError(ValueError):
    """Raised when a policy payload cannot be turned into a `Policy`."""


def build_policy(dto: PolicyDto) -> Policy:
    """
    Builds an ODRL `Policy` from its request payload.

    Actions and operators are normalised (``odrl:use`` -> ``USE``,
    ``odrl:gteq`` or ``>=`` -> ``GEQ``); anything that does not map to a
    known action or operator makes the whole policy invalid.

    Args:
        dto (PolicyDto): Policy payload from the request.

    Returns:
        Policy: The domain policy.

    Raises:
        PolicyBuildError: If the payload is absent or structurally invalid.
    """

    if dto is None:
        raise PolicyBuildError("policy is missing")

    try:
        return Policy(
            type=dto.type,
            permission=_build_rules(dto.permission),
            prohibition=_build_rules(dto.prohibition),
            obligation=_build_rules(dto.obligation),
        )
    except ValidationError as e:
        raise PolicyBuildError(_first_error(e)) from e


def _build_rules(permissions: List[PermissionDto]) -> List[Rule]:
    return [
        Rule(
            action=p.action,
            constraint=[
                Constraint(leftOperand=c.leftOperand, operator=c.operator, rightOperand=c.rightOperand)
                for c in (p.constraints or [])
            ],
        )
        for p in permissions
    ]


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err.get("loc", ()))
    return f"{location}: {err['msg']}" if location else err["msg"]


class OfferingTransformer:
    """
    Transform stage of the offering service.

    Kept as an object so it can be injected into `OfferingService` and
    replaced in tests.
    """

    def to_asset(self, dto: AssetEntryDto) -> Asset:
        """
        Converts an asset entry into an `Asset`.

        The data address properties are passed through verbatim; only the
        `type` key required by `DataAddress` is checked. Malformed values
        (a bad URL, an unknown type) are not detected here and surface
        when the data plane uses the address.

        Raises:
            InvalidInput: If the data address is absent or has no `type`.
        """

        try:
            return Asset(
                id=dto.id,
                dataAddress=DataAddress(properties=dto.dataAddressProperties or {}),
                properties=dto.assetProperties or {},
                privateProperties=dto.privateAssetProperties or {},
            )
        except ValidationError as e:
            raise InvalidInput(f"Failed to transform AssetEntryDto: {_first_error(e)}", field="assetEntry") from e

    def to_policy_definition(self, dto: PolicyDefinitionRequestDto) -> PolicyDefinition:
        """
        Converts a policy definition request into a `PolicyDefinition`.

        Raises:
            InvalidInput: If the embedded policy is absent or invalid. The
                message carries the builder's cause.
        """

        try:
            policy = build_policy(dto.policy)
        except PolicyBuildError as e:
            raise InvalidInput(f"Failed to transform PolicyDto: {e}", field="policyDefinitionRequest") from e
        return PolicyDefinition(id=dto.id, policy=policy)

    def to_contract_definition(self, dto: ContractDefinitionRequestDto) -> ContractDefinition:
        """
        Converts a contract definition request into a `ContractDefinition`.

        Criteria are mapped one to one and keep their order. An empty
        selector is legal; an absent one is not.

        Raises:
            InvalidInput: If `assetsSelector` is None.
        """

        if dto.assetsSelector is None:
            raise InvalidInput(
                "Failed to transform ContractDefinitionRequestDto: assetsSelector is missing",
                field="contractDefinitionRequest",
            )
        return ContractDefinition(
            id=dto.id,
            accessPolicyId=dto.accessPolicyId,
            contractPolicyId=dto.contractPolicyId,
            assetsSelector=_criteria(dto.assetsSelector),
        )


def _criteria(dtos: List[CriterionDto]) -> List[Criterion]:
    return [Criterion(operandLeft=c.operandLeft, operator=c.operator, operandRight=c.operandRight) for c in dtos]

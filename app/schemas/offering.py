"""
Offering request schemas.

This module defines the Pydantic schemas accepted by the use-case API to
create or update an offering: one asset, one policy definition and one
contract definition submitted together.

Schemas:
    - AssetEntryDto: asset id, data address and metadata.
    - PolicyDto / PermissionDto / ConstraintDto: ODRL-style policy payload.
    - PolicyDefinitionRequestDto: policy id plus its (optional) policy body.
    - CriterionDto / ContractDefinitionRequestDto: contract definition payload.
    - CreateOfferingDto / UpdateOfferingDto: the offering envelope.

The three sub-requests of the envelope are optional at schema level on
purpose. Whether they are required depends on the operation, and the
offering service reports missing ones with an error naming the field.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AssetEntryDto(BaseModel):
    """
    Asset part of an offering.

    Example:
        >>> entry = AssetEntryDto(
        ...     id="asset-001",
        ...     dataAddressProperties={"type": "HttpData", "baseUrl": "https://data.server.com"},
        ...     assetProperties={"name": "Weather Dataset"},
        ... )
    """

    id: str
    """Unique identifier of the asset."""

    dataAddressProperties: Optional[Dict[str, str]] = None
    """Data address properties; must contain at least `type`."""

    assetProperties: Optional[Dict[str, Any]] = None
    """Public asset metadata."""

    privateAssetProperties: Optional[Dict[str, Any]] = None
    """Provider-only asset metadata."""


class ConstraintDto(BaseModel):
    leftOperand: str
    operator: Any
    rightOperand: Any = None


class PermissionDto(BaseModel):
    """A single rule: an action and the constraints under which it applies."""

    action: Any = "USE"
    constraints: Optional[List[ConstraintDto]] = None


class PolicyDto(BaseModel):
    """
    Policy payload embedded in a policy definition request.

    Example:
        >>> PolicyDto(permission=[PermissionDto(action="USE")])
    """

    permission: List[PermissionDto] = Field(default_factory=list)
    prohibition: List[PermissionDto] = Field(default_factory=list)
    obligation: List[PermissionDto] = Field(default_factory=list)
    type: str = "Set"


class PolicyDefinitionRequestDto(BaseModel):
    id: str
    """Unique identifier of the policy definition."""

    policy: Optional[PolicyDto] = None
    """Policy body. Required on create; may be omitted on update."""


class CriterionDto(BaseModel):
    operandLeft: Any
    operator: str
    operandRight: Any = None


class ContractDefinitionRequestDto(BaseModel):
    """
    Contract definition part of an offering.

    ``assetsSelector`` distinguishes absent from empty: ``None`` is
    rejected by the transform stage, ``[]`` is a legal selector.

    Example:
        >>> ContractDefinitionRequestDto(
        ...     id="contract-001",
        ...     accessPolicyId="policy-001",
        ...     contractPolicyId="policy-001",
        ...     assetsSelector=[CriterionDto(operandLeft="id", operator="=", operandRight="asset-001")],
        ... )
    """

    id: str
    accessPolicyId: str
    contractPolicyId: str
    assetsSelector: Optional[List[CriterionDto]] = None


class CreateOfferingDto(BaseModel):
    """
    Offering envelope for the create operation.

    All three sub-requests are required by the create operation.

    Example:
        >>> POST /wrapper/use-case-api/create-offer
        {
            "assetEntry": {"id": "asset-001", "dataAddressProperties": {"type": "HttpData"}},
            "policyDefinitionRequest": {"id": "policy-001", "policy": {"permission": [{"action": "USE"}]}},
            "contractDefinitionRequest": {
                "id": "contract-001",
                "accessPolicyId": "policy-001",
                "contractPolicyId": "policy-001",
                "assetsSelector": []
            }
        }
    """

    assetEntry: Optional[AssetEntryDto] = None
    policyDefinitionRequest: Optional[PolicyDefinitionRequestDto] = None
    contractDefinitionRequest: Optional[ContractDefinitionRequestDto] = None


class UpdateOfferingDto(CreateOfferingDto):
    """Offering envelope for the update operation; every sub-request is optional."""

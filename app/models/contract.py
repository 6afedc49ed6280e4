"""
Contract definition model.

A contract definition binds an access policy and a contract policy to the
set of assets matched by its selector. The policy ids are plain references:
they are not checked against the policy store, so a contract definition may
point at a policy that does not exist (a dangling reference, not an error).
"""

from typing import Any, List

from pydantic import BaseModel, Field

from app.util.clock import now_millis


class Criterion(BaseModel):
    """
    A single asset selector expression.

    Example:
        >>> Criterion(operandLeft="id", operator="=", operandRight="asset-001")
    """

    operandLeft: Any
    operator: str
    operandRight: Any = None


class ContractDefinition(BaseModel):
    """
    Represents a contract definition in the EDC ecosystem.

    Example:
        >>> contract = ContractDefinition(
        ...     id="contract-1234",
        ...     accessPolicyId="policy-access-001",
        ...     contractPolicyId="policy-contract-001",
        ...     assetsSelector=[Criterion(operandLeft="id", operator="=", operandRight="asset-001")]
        ... )
        >>> print(contract.id)
        contract-1234
    """

    id: str
    """Unique identifier of the contract definition."""

    accessPolicyId: str
    """Identifier of the access policy that regulates data access."""

    contractPolicyId: str
    """Identifier of the contract policy that defines usage conditions."""

    assetsSelector: List[Criterion] = Field(default_factory=list)
    """Ordered criteria selecting the assets this contract applies to."""

    createdAt: int = Field(default_factory=now_millis)
    """Creation timestamp in epoch milliseconds."""

"""
Policy model definition.

This module defines the data models that represent access and usage
policies. Policies follow the ODRL (Open Digital Rights Language)
model and describe permissions, prohibitions, and obligations
that regulate how data can be used and shared between connectors.

The models follow a hierarchical structure:
- Operator: comparison operator used in a constraint.
- Constraint: a condition (leftOperand, operator, rightOperand).
- Rule: a single permission, prohibition, or obligation.
- Policy: groups rules into a complete ODRL policy.
- PolicyDefinition: top-level entity that gives a policy a stable id.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from app.util.clock import now_millis


class Operator(str, Enum):
    EQ = "EQ"
    NEQ = "NEQ"
    GT = "GT"
    GEQ = "GEQ"
    LT = "LT"
    LEQ = "LEQ"
    IN = "IN"
    HAS_PART = "HAS_PART"
    IS_A = "IS_A"
    IS_ALL_OF = "IS_ALL_OF"
    IS_ANY_OF = "IS_ANY_OF"
    IS_NONE_OF = "IS_NONE_OF"


_OPERATOR_SYMBOLS = {
    "=": Operator.EQ,
    "!=": Operator.NEQ,
    ">": Operator.GT,
    ">=": Operator.GEQ,
    "<": Operator.LT,
    "<=": Operator.LEQ,
}

_ODRL_OPERATOR_NAMES = {
    "EQ": Operator.EQ,
    "NEQ": Operator.NEQ,
    "GT": Operator.GT,
    "GTEQ": Operator.GEQ,
    "LT": Operator.LT,
    "LTEQ": Operator.LEQ,
    "ISPARTOF": Operator.IN,
    "HASPART": Operator.HAS_PART,
    "ISA": Operator.IS_A,
    "ISALLOF": Operator.IS_ALL_OF,
    "ISANYOF": Operator.IS_ANY_OF,
    "ISNONEOF": Operator.IS_NONE_OF,
}


class Constraint(BaseModel):
    """
    Defines a constraint that applies to a policy rule.

    A constraint expresses a conditional restriction or requirement
    on the application of a rule (e.g., "purpose EQ research").

    Example:
        >>> constraint = Constraint(
        ...     leftOperand="purpose",
        ...     operator="odrl:eq",
        ...     rightOperand="research"
        ... )
        >>> constraint.operator
        <Operator.EQ: 'EQ'>
    """

    leftOperand: str
    """Left operand of the constraint (e.g., 'purpose', 'spatial')."""

    operator: Operator
    """Operator defining the relationship between operands."""

    rightOperand: Any
    """Right operand or value of the constraint."""

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, v):
        # accepts 'EQ', 'eq', 'odrl:eq', 'odrl:gteq', '>=', {"@id": "odrl:eq"}
        if isinstance(v, dict):
            v = v.get("@id") or v.get("id")
        if isinstance(v, str):
            if v in _OPERATOR_SYMBOLS:
                return _OPERATOR_SYMBOLS[v]
            name = v.split(":")[-1].upper()
            if name in Operator.__members__:
                return Operator[name]
            return _ODRL_OPERATOR_NAMES.get(name.replace("_", ""), v)
        return v


class Action(str, Enum):
    USE = "USE"
    READ = "READ"
    WRITE = "WRITE"
    MODIFY = "MODIFY"
    DELETE = "DELETE"
    LOG = "LOG"
    NOTIFY = "NOTIFY"
    ANONYMIZE = "ANONYMIZE"


class Rule(BaseModel):
    """
    Defines a single rule in a policy (permission, prohibition, or obligation).

    Example:
        >>> rule = Rule(
        ...     action="odrl:use",
        ...     constraint=[
        ...         Constraint(leftOperand="purpose", operator="EQ", rightOperand="research")
        ...     ]
        ... )
        >>> rule.action
        <Action.USE: 'USE'>
    """

    action: Action
    """Type of action that the rule allows, forbids, or obliges."""

    constraint: List[Constraint] = Field(default_factory=list)
    """Constraints that must all hold for the rule to apply."""

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, v):
        # accepts 'odrl:use', 'use', 'USE', {"type": "USE"}
        if isinstance(v, dict):
            v = v.get("type") or v.get("@id")
        if isinstance(v, str):
            v = v.split(":")[-1].upper()
        return v


class Policy(BaseModel):
    """
    Defines the complete structure of an ODRL policy.

    Example:
        >>> policy = Policy(permission=[Rule(action="USE")])
        >>> policy.type
        'Set'
    """

    permission: List[Rule] = Field(default_factory=list)
    """List of allowed actions under this policy."""

    prohibition: List[Rule] = Field(default_factory=list)
    """List of forbidden actions under this policy."""

    obligation: List[Rule] = Field(default_factory=list)
    """List of required actions under this policy."""

    type: str = Field(default="Set")
    """Type of policy according to ODRL ('Set' by default)."""


class PolicyDefinition(BaseModel):
    """
    Represents a stored policy definition.

    Contract definitions reference policy definitions by ``id`` through
    their ``accessPolicyId`` and ``contractPolicyId`` fields.

    Example:
        >>> definition = PolicyDefinition(
        ...     id="policy-001",
        ...     policy=Policy(permission=[Rule(action="USE")])
        ... )
        >>> print(definition.id)
        policy-001
    """

    id: str
    """Unique identifier of the policy definition."""

    policy: Policy
    """Full policy containing permissions, prohibitions, and obligations."""

    createdAt: int = Field(default_factory=now_millis)
    """Creation timestamp in epoch milliseconds."""

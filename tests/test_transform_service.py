"""
Transform stage tests.

Tests cover:
    - Asset, policy definition and contract definition conversion
    - Action and operator normalisation in the policy builder
    - Validation failures raised as InvalidInput with the underlying cause
"""

import pytest

from app.core.errors import InvalidInput
from app.models.policy import Action, Operator
from app.schemas.offering import (
    ConstraintDto,
    ContractDefinitionRequestDto,
    CriterionDto,
    PermissionDto,
    PolicyDefinitionRequestDto,
    PolicyDto,
)
from app.services.transform_service import OfferingTransformer, PolicyBuildError, build_policy
from tests.factories import asset_entry, contract_request, policy_request

transformer = OfferingTransformer()


def test_to_asset_copies_fields():
    asset = transformer.to_asset(asset_entry("a1"))

    assert asset.id == "a1"
    assert asset.dataAddress.type == "HttpData"
    assert asset.dataAddress.properties["baseUrl"] == "https://data.server.com/weather"
    assert asset.properties == {"name": "Weather Dataset"}
    assert asset.privateProperties == {"owner": "provider"}


def test_to_asset_defaults_missing_property_maps():
    asset = transformer.to_asset(asset_entry("a1", assetProperties=None, privateAssetProperties=None))

    assert asset.properties == {}
    assert asset.privateProperties == {}


def test_to_asset_passes_unknown_data_address_properties_through():
    entry = asset_entry("a1", dataAddressProperties={"type": "Custom", "whatever": "not-a-url"})

    asset = transformer.to_asset(entry)

    assert asset.dataAddress.properties == {"type": "Custom", "whatever": "not-a-url"}


@pytest.mark.parametrize("properties", [{}, None, {"baseUrl": "https://x"}])
def test_to_asset_without_data_address_type_fails(properties):
    with pytest.raises(InvalidInput) as exc_info:
        transformer.to_asset(asset_entry("a1", dataAddressProperties=properties))

    assert exc_info.value.field == "assetEntry"
    assert "type" in exc_info.value.message


def test_to_policy_definition_builds_rules():
    request = PolicyDefinitionRequestDto(
        id="p1",
        policy=PolicyDto(
            permission=[
                PermissionDto(
                    action="odrl:use",
                    constraints=[ConstraintDto(leftOperand="purpose", operator="odrl:eq", rightOperand="research")],
                )
            ],
            prohibition=[PermissionDto(action="delete")],
        ),
    )

    definition = transformer.to_policy_definition(request)

    assert definition.id == "p1"
    rule = definition.policy.permission[0]
    assert rule.action is Action.USE
    assert rule.constraint[0].operator is Operator.EQ
    assert rule.constraint[0].rightOperand == "research"
    assert definition.policy.prohibition[0].action is Action.DELETE
    assert definition.policy.obligation == []


@pytest.mark.parametrize(
    "raw, expected",
    [(">=", Operator.GEQ), ("odrl:gteq", Operator.GEQ), ({"@id": "odrl:isAnyOf"}, Operator.IS_ANY_OF), ("in", Operator.IN)],
)
def test_build_policy_normalises_operators(raw, expected):
    policy = build_policy(
        PolicyDto(permission=[PermissionDto(constraints=[ConstraintDto(leftOperand="x", operator=raw, rightOperand=1)])])
    )

    assert policy.permission[0].constraint[0].operator is expected


def test_build_policy_rejects_unknown_action():
    with pytest.raises(PolicyBuildError):
        build_policy(PolicyDto(permission=[PermissionDto(action="TELEPORT")]))


def test_to_policy_definition_wraps_builder_cause():
    request = PolicyDefinitionRequestDto(
        id="p1",
        policy=PolicyDto(
            permission=[PermissionDto(constraints=[ConstraintDto(leftOperand="x", operator="roughly", rightOperand=1)])]
        ),
    )

    with pytest.raises(InvalidInput) as exc_info:
        transformer.to_policy_definition(request)

    assert exc_info.value.message.startswith("Failed to transform PolicyDto:")
    assert isinstance(exc_info.value.__cause__, PolicyBuildError)


def test_to_policy_definition_without_policy_fails():
    with pytest.raises(InvalidInput) as exc_info:
        transformer.to_policy_definition(PolicyDefinitionRequestDto(id="p1", policy=None))

    assert "policy is missing" in exc_info.value.message


def test_to_contract_definition_keeps_criteria_order():
    request = ContractDefinitionRequestDto(
        id="c1",
        accessPolicyId="p-access",
        contractPolicyId="p-contract",
        assetsSelector=[
            CriterionDto(operandLeft="id", operator="=", operandRight="a2"),
            CriterionDto(operandLeft="id", operator="in", operandRight=["a1", "a3"]),
        ],
    )

    contract = transformer.to_contract_definition(request)

    assert contract.accessPolicyId == "p-access"
    assert contract.contractPolicyId == "p-contract"
    assert [c.operandRight for c in contract.assetsSelector] == ["a2", ["a1", "a3"]]
    assert contract.assetsSelector[1].operator == "in"


def test_to_contract_definition_accepts_empty_selector():
    request = contract_request()
    request.assetsSelector = []

    assert transformer.to_contract_definition(request).assetsSelector == []


def test_to_contract_definition_rejects_absent_selector():
    request = contract_request()
    request.assetsSelector = None

    with pytest.raises(InvalidInput) as exc_info:
        transformer.to_contract_definition(request)

    assert exc_info.value.field == "contractDefinitionRequest"


def test_policy_request_factory_is_valid():
    assert transformer.to_policy_definition(policy_request()).policy.permission[0].action is Action.USE

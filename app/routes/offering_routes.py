"""
Offering routes.

This module defines the use-case API endpoints that create or update a
complete offering (asset, policy definition and contract definition) in a
single request.

Both endpoints delegate to `app.services.offering_service.OfferingService`.
Errors raised by the service are translated into HTTP responses by the
exception handlers registered in `app.main`.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from app.schemas.offering import CreateOfferingDto, UpdateOfferingDto
from app.services.offering_service import OfferingService

router = APIRouter()


def get_offering_service(request: Request) -> OfferingService:
    """Returns the offering service assembled on application startup."""
    return request.app.state.offering_service


@router.post("/create-offer", status_code=204)
async def create_offer_route(
    data: Optional[CreateOfferingDto] = Body(default=None),
    service: OfferingService = Depends(get_offering_service),
):
    """
    Create an asset, a policy definition and a contract definition at once.

    Either all three entities are persisted or, on a store failure, the
    ones already written are deleted again before the error is returned.

    Returns:
        Response: Empty 204 response.

    Raises:
        400: If a sub-request is missing or malformed.
        500: If a store rejected a write.

    Example:
        >>> POST /wrapper/use-case-api/create-offer
        {
            "assetEntry": {"id": "asset-001", "dataAddressProperties": {"type": "HttpData"}},
            "policyDefinitionRequest": {"id": "policy-001", "policy": {"permission": [{"action": "USE"}]}},
            "contractDefinitionRequest": {
                "id": "contract-001",
                "accessPolicyId": "policy-001",
                "contractPolicyId": "policy-001",
                "assetsSelector": [{"operandLeft": "id", "operator": "=", "operandRight": "asset-001"}]
            }
        }
    """

    await service.create(data)
    return Response(status_code=204)


@router.post("/update-offer", status_code=204)
async def update_offer_route(
    data: Optional[UpdateOfferingDto] = Body(default=None),
    service: OfferingService = Depends(get_offering_service),
):
    """
    Create or update each sub-request present in the offering.

    Omitted sub-requests leave the corresponding entity untouched.

    Returns:
        Response: Empty 204 response.

    Raises:
        400: If a present sub-request is malformed.
        500: If a store call failed. Earlier upserts are not rolled back.

    Example:
        >>> POST /wrapper/use-case-api/update-offer
        {
            "assetEntry": {"id": "asset-001", "dataAddressProperties": {"type": "HttpData"}}
        }
    """

    await service.update(data)
    return Response(status_code=204)

"""Swaps router for swap requests and their lifecycle."""

from typing import Optional

from fastapi import APIRouter, Query, status

from ..dependencies import CurrentUser, SwapServiceDep
from ..schemas.swap_schemas import (
    SwapCreate,
    SwapListType,
    SwapResponse,
    SwapStatusUpdate,
    SwapWithDetails,
)

router = APIRouter(
    prefix="/api/swaps",
    tags=["swaps"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"},
        409: {"description": "Conflict"},
        422: {"description": "Business rule violated"},
    },
)


@router.post(
    "",
    response_model=SwapResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a swap",
    description="Ask the owner of an approved, available item for a direct or points swap",
)
async def create_swap(
    swap_data: SwapCreate,
    current_user: CurrentUser,
    swap_service: SwapServiceDep,
) -> SwapResponse:
    """Request a swap.

    Example:
        POST /api/swaps
        {"item_id": 123, "swap_type": "points", "message": "Still available?"}

        Response (201): the stored swap with "status": "pending"
    """
    return await swap_service.create_swap(swap_data, current_user)


@router.get(
    "",
    response_model=list[SwapWithDetails],
    summary="List my swaps",
    description="Swaps the caller requested, received, or both when no type is given",
)
async def list_swaps(
    current_user: CurrentUser,
    swap_service: SwapServiceDep,
    list_type: Optional[SwapListType] = Query(
        default=None, alias="type", description="requested or received"
    ),
) -> list[SwapWithDetails]:
    return await swap_service.list_swaps(current_user, list_type)


@router.get(
    "/{swap_id}",
    response_model=SwapWithDetails,
    summary="Get swap",
    description="One swap, visible to its participants and admins",
)
async def get_swap(
    swap_id: int,
    current_user: CurrentUser,
    swap_service: SwapServiceDep,
) -> SwapWithDetails:
    return await swap_service.get_swap(swap_id, current_user)


@router.patch(
    "/{swap_id}/status",
    response_model=SwapResponse,
    summary="Update swap status",
    description="Accept, reject or complete a swap; completion settles points and availability",
)
async def update_swap_status(
    swap_id: int,
    update: SwapStatusUpdate,
    current_user: CurrentUser,
    swap_service: SwapServiceDep,
) -> SwapResponse:
    """Move a swap along its lifecycle.

    Only the item owner or an admin may call this. Allowed moves are
    pending to accepted or rejected, and accepted to completed or rejected.

    Example:
        PATCH /api/swaps/7/status
        {"status": "completed"}
    """
    return await swap_service.update_status(swap_id, update.status, current_user)

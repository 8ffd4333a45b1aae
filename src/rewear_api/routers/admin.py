"""Admin router for listing moderation and statistics.

Every endpoint requires the caller's stored record to be an admin.
"""

from fastapi import APIRouter, Depends

from ..dependencies import AdminServiceDep, AdminUser, require_admin_user
from ..schemas.item_schemas import ItemStatusUpdate, ItemWithUser
from ..schemas.transaction_schemas import AdminStats

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_user)],  # All endpoints require an admin
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    },
)


@router.get(
    "/items/pending",
    response_model=list[ItemWithUser],
    summary="Moderation queue",
    description="Listings awaiting approval, newest first",
)
async def pending_items(admin_service: AdminServiceDep) -> list[ItemWithUser]:
    return await admin_service.list_pending_items()


@router.patch(
    "/items/{item_id}/status",
    response_model=ItemWithUser,
    summary="Moderate item",
    description="Approve or reject a listing; first approval pays the owner a bonus",
)
async def moderate_item(
    item_id: int,
    update: ItemStatusUpdate,
    admin: AdminUser,
    admin_service: AdminServiceDep,
) -> ItemWithUser:
    """Set a listing's moderation status.

    Example:
        PATCH /api/admin/items/123/status
        {"status": "approved"}
    """
    return await admin_service.moderate_item(item_id, update.status, admin.id)


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="Site statistics",
    description="Counts of users, items, swaps and pending items",
)
async def stats(admin_service: AdminServiceDep) -> AdminStats:
    return await admin_service.get_stats()

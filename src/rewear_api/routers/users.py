"""User-scoped router: a user's own listings and points ledger.

Both endpoints only answer for the caller's own ``user_id``.
"""

from fastapi import APIRouter

from ..dependencies import ItemServiceDep, SelfUser, UserServiceDep
from ..schemas.item_schemas import ItemResponse
from ..schemas.transaction_schemas import PointTransactionResponse

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    },
)


@router.get(
    "/{user_id}/items",
    response_model=list[ItemResponse],
    summary="Get my items",
    description="Every listing of the caller, whatever its moderation status",
)
async def get_user_items(user: SelfUser, item_service: ItemServiceDep) -> list[ItemResponse]:
    return await item_service.get_user_items(user.id)


@router.get(
    "/{user_id}/transactions",
    response_model=list[PointTransactionResponse],
    summary="Get my points history",
    description="The caller's points ledger, newest first",
)
async def get_user_transactions(
    user: SelfUser, user_service: UserServiceDep
) -> list[PointTransactionResponse]:
    return await user_service.list_transactions(user.id)

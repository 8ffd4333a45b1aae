"""Items router for listings.

This module provides the public catalogue (filtered list, featured shelf,
single item) and listing creation for authenticated users.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from ..dependencies import CurrentUser, ItemServiceDep
from ..models.item import ItemStatus
from ..schemas.item_schemas import (
    ItemCreate,
    ItemListRequest,
    ItemResponse,
    ItemWithUser,
)

router = APIRouter(
    prefix="/api/items",
    tags=["items"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Not found"},
        500: {"description": "Internal server error"},
    },
)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new item",
    description="List a new item owned by the authenticated user; it awaits admin approval",
)
async def create_item(
    item_data: ItemCreate,
    current_user: CurrentUser,
    item_service: ItemServiceDep,
) -> ItemResponse:
    """Create a new listing for the authenticated user.

    Example:
        POST /api/items
        {
            "title": "Vintage Denim Jacket",
            "category": "Outerwear",
            "size": "M",
            "condition": "Like New",
            "point_value": 50,
            "tags": ["denim"],
            "images": ["https://images.example.com/jacket.jpg"]
        }

        Response (201): the stored item with "status": "pending"
    """
    return await item_service.create_item(item_data, current_user.id)


@router.get(
    "",
    response_model=list[ItemWithUser],
    summary="Browse items",
    description="List items with their owners; approved items unless another status is requested",
)
async def list_items(
    item_service: ItemServiceDep,
    status_filter: ItemStatus = Query(
        default=ItemStatus.APPROVED, alias="status", description="Moderation status"
    ),
    category: Optional[str] = Query(default=None, max_length=50, description="Category"),
    search: Optional[str] = Query(
        default=None, max_length=100, description="Text in title, description or brand"
    ),
    limit: Optional[int] = Query(default=None, ge=1, description="Maximum number of items"),
) -> list[ItemWithUser]:
    """Browse the catalogue.

    Example:
        GET /api/items?category=Outerwear&search=denim&limit=10
    """
    request = ItemListRequest(
        status=status_filter, category=category, search=search, limit=limit
    )
    return await item_service.list_items(request)


@router.get(
    "/featured",
    response_model=list[ItemWithUser],
    summary="Featured items",
    description="Newest approved items for the landing page",
)
async def featured_items(item_service: ItemServiceDep) -> list[ItemWithUser]:
    return await item_service.get_featured()


@router.get(
    "/{item_id}",
    response_model=ItemWithUser,
    summary="Get item",
    description="Get one item with its owner",
)
async def get_item(item_id: int, item_service: ItemServiceDep) -> ItemWithUser:
    """Get a single item.

    Raises:
        NotFoundException: If the item does not exist
    """
    return await item_service.get_item(item_id)

"""Item service for business logic operations.

This module provides business logic for listings: creating them on behalf of
the caller, the public catalogue with its filters, the featured shelf and the
owner's own listing view.
"""

from sqlmodel import Session

from ..config import Settings
from ..database import atomic
from ..exceptions import DatabaseException, NotFoundException
from ..logging_config import get_logger, log_database_operation
from ..models.item import Item, ItemStatus
from ..models.user import User
from ..repositories.item_repository import ItemRepository, ItemRepositoryError
from ..schemas.item_schemas import (
    ItemCreate,
    ItemListRequest,
    ItemResponse,
    ItemWithUser,
    UserSummary,
)

logger = get_logger("item_service")


def to_item_with_user(item: Item, user: User) -> ItemWithUser:
    """Render an item together with a public summary of its owner."""
    return ItemWithUser(
        **ItemResponse.model_validate(item).model_dump(),
        user=UserSummary.model_validate(user),
    )


class ItemService:
    """Service for item business logic operations.

    Catalogue reads are public; creating a listing needs an authenticated
    owner and always starts the listing in moderation.
    """

    def __init__(self, session: Session, settings: Settings) -> None:
        """Initialize item service with database session.

        Args:
            session: SQLModel database session
            settings: Application settings (featured shelf size)
        """
        self.session = session
        self.settings = settings
        self.item_repository = ItemRepository(session)

    async def create_item(self, item_data: ItemCreate, user_id: str) -> ItemResponse:
        """Create a new listing owned by ``user_id``.

        Args:
            item_data: Validated listing data
            user_id: ID of the user who will own the item

        Returns:
            Created item response, status pending

        Raises:
            DatabaseException: If item creation fails
        """
        logger.info(
            f"Creating item for user {user_id}",
            extra={
                "user_id": user_id,
                "item_title": item_data.title,
                "point_value": item_data.point_value,
            },
        )

        item = Item(
            **item_data.model_dump(),
            user_id=user_id,
            status=ItemStatus.PENDING.value,
            is_available=True,
        )

        try:
            with atomic(self.session):
                item = self.item_repository.create(item)
            self.session.refresh(item)
        except ItemRepositoryError as e:
            log_database_operation(
                operation="INSERT", table="items", success=False, error=e.message, user_id=user_id
            )
            logger.error(
                f"Database error creating item for user {user_id}: {e.message}",
                extra={"user_id": user_id},
            )
            raise DatabaseException("Failed to create item", operation="create_item") from e

        log_database_operation(
            operation="INSERT", table="items", success=True, user_id=user_id, item_id=item.id
        )
        return ItemResponse.model_validate(item)

    async def list_items(self, request: ItemListRequest) -> list[ItemWithUser]:
        """Get the catalogue filtered by the request.

        Args:
            request: Status, category, search and limit filters

        Returns:
            Matching items with their owners, newest first
        """
        try:
            rows = self.item_repository.list_with_users(
                status=request.status.value if request.status else None,
                category=request.category,
                search=request.search,
                limit=request.limit,
            )
        except ItemRepositoryError as e:
            raise DatabaseException("Failed to list items", operation="list_items") from e

        return [to_item_with_user(item, user) for item, user in rows]

    async def get_featured(self) -> list[ItemWithUser]:
        """Get the newest approved items for the landing page."""
        try:
            rows = self.item_repository.featured(self.settings.featured_items_limit)
        except ItemRepositoryError as e:
            raise DatabaseException("Failed to get featured items", operation="featured_items") from e

        return [to_item_with_user(item, user) for item, user in rows]

    async def get_item(self, item_id: int) -> ItemWithUser:
        """Get one item with its owner.

        Raises:
            NotFoundException: If the item does not exist
        """
        try:
            row = self.item_repository.get_with_user(item_id)
        except ItemRepositoryError as e:
            raise DatabaseException("Failed to get item", operation="get_item") from e

        if row is None:
            raise NotFoundException("Item", item_id)

        item, user = row
        return to_item_with_user(item, user)

    async def get_user_items(self, user_id: str) -> list[ItemResponse]:
        """Get every listing of a user regardless of moderation status."""
        try:
            items = self.item_repository.list_for_user(user_id)
        except ItemRepositoryError as e:
            raise DatabaseException("Failed to get user items", operation="user_items") from e

        return [ItemResponse.model_validate(item) for item in items]

"""Admin service: moderation queue, listing moderation and site statistics."""

from sqlmodel import Session

from ..config import Settings
from ..exceptions import DatabaseException, NotFoundException
from ..logging_config import get_logger
from ..models.item import ItemStatus
from ..repositories import REPOSITORY_ERRORS
from ..repositories.item_repository import ItemRepository
from ..repositories.swap_repository import SwapRepository
from ..repositories.user_repository import UserRepository
from ..schemas.item_schemas import ItemWithUser
from ..schemas.transaction_schemas import AdminStats
from .item_service import to_item_with_user
from .settlement_service import SettlementService

logger = get_logger("admin_service")


class AdminService:
    """Service for administrator operations.

    Callers are expected to have been checked for admin rights already.
    """

    def __init__(self, session: Session, settings: Settings) -> None:
        self.session = session
        self.settings = settings
        self.item_repository = ItemRepository(session)
        self.swap_repository = SwapRepository(session)
        self.user_repository = UserRepository(session)
        self.settlement_service = SettlementService(session, settings)

    async def list_pending_items(self) -> list[ItemWithUser]:
        """Get listings awaiting moderation, newest first."""
        try:
            rows = self.item_repository.list_with_users(status=ItemStatus.PENDING.value)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to list pending items", operation="pending_items") from e

        return [to_item_with_user(item, user) for item, user in rows]

    async def moderate_item(self, item_id: int, status: ItemStatus, admin_id: str) -> ItemWithUser:
        """Set a listing's moderation status.

        Approving a listing that was not approved yet pays its owner the
        approval bonus.

        Args:
            item_id: Listing to moderate
            status: New moderation status
            admin_id: Admin performing the change

        Returns:
            The moderated item with its owner

        Raises:
            NotFoundException: If the item does not exist
        """
        logger.info(
            f"Admin {admin_id} setting item {item_id} to {status.value}",
            extra={"user_id": admin_id, "item_id": item_id, "status": status.value},
        )
        await self.settlement_service.set_listing_status(item_id, status)

        try:
            row = self.item_repository.get_with_user(item_id)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to get item", operation="moderate_item") from e

        if row is None:
            raise NotFoundException("Item", item_id)

        item, user = row
        return to_item_with_user(item, user)

    async def get_stats(self) -> AdminStats:
        """Get site-wide counters."""
        try:
            return AdminStats(
                total_users=self.user_repository.count(),
                total_items=self.item_repository.count(),
                total_swaps=self.swap_repository.count(),
                pending_items=self.item_repository.count(status=ItemStatus.PENDING.value),
            )
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to get statistics", operation="admin_stats") from e

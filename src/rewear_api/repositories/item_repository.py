"""Item repository for database operations.

This module provides the ItemRepository class that handles all database
operations for listings: creation, filtered catalogue queries joined with the
owning user, moderation status changes and availability updates.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, and_, desc, select

from ..models.item import Item, ItemStatus
from ..models.user import User


def _escape_like(text: str) -> str:
    """Make ``%`` and ``_`` match literally in a LIKE pattern escaped with ``\\``."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ItemRepositoryError(Exception):
    """Raised when an item query or write fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class ItemRepository:
    """Repository for item database operations.

    List queries return ``(Item, User)`` pairs so callers can render the
    owner alongside each listing without lazy loading. Every list is
    ordered newest first with the id as tie-break.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    @staticmethod
    def _newest_first(statement):
        return statement.order_by(desc(Item.created_at), desc(Item.id))

    def create(self, item: Item) -> Item:
        """Persist a new item.

        Args:
            item: Item to insert; ``status`` and ``is_available`` keep their
                defaults unless set by the caller

        Returns:
            Item: The created item with its id populated

        Raises:
            ItemRepositoryError: If the owner does not exist or the write fails
        """
        try:
            self.session.add(item)
            self.session.flush()
            self.session.refresh(item)
            return item
        except IntegrityError as e:
            raise ItemRepositoryError(
                f"Failed to create item: user_id {item.user_id} does not exist",
                original_error=e,
            ) from e
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while creating item: {str(e)}",
                original_error=e,
            ) from e

    def get_by_id(self, item_id: int) -> Optional[Item]:
        """Get an item by ID.

        Args:
            item_id: ID of the item to retrieve

        Returns:
            Item: The item if found, None otherwise
        """
        try:
            statement = select(Item).where(Item.id == item_id)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while retrieving item {item_id}: {str(e)}",
                original_error=e,
            ) from e

    def get_with_user(self, item_id: int) -> Optional[tuple[Item, User]]:
        """Get an item together with its owner.

        Args:
            item_id: ID of the item to retrieve

        Returns:
            ``(item, owner)`` if the item exists, None otherwise
        """
        try:
            statement = (
                select(Item, User)
                .join(User, User.id == Item.user_id)
                .where(Item.id == item_id)
            )
            row = self.session.exec(statement).first()
            return tuple(row) if row else None
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while retrieving item {item_id}: {str(e)}",
                original_error=e,
            ) from e

    def list_with_users(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[tuple[Item, User]]:
        """List items joined with their owners.

        Each filter is optional and the ones given are combined with AND.

        Args:
            status: Moderation status to match
            category: Exact category to match
            search: Case-insensitive substring of title, description or brand
            owner_id: Owner to match
            limit: Maximum number of rows

        Returns:
            List of ``(item, owner)`` pairs, newest first

        Example:
            rows = repository.list_with_users(status="approved", search="denim")
        """
        try:
            conditions = []

            if status:
                conditions.append(Item.status == status)

            if category:
                conditions.append(Item.category == category)

            if owner_id:
                conditions.append(Item.user_id == owner_id)

            if search:
                search_pattern = f"%{_escape_like(search.lower())}%"
                conditions.append(
                    or_(
                        func.lower(Item.title).like(search_pattern, escape="\\"),
                        func.lower(Item.description).like(search_pattern, escape="\\"),
                        func.lower(Item.brand).like(search_pattern, escape="\\"),
                    )
                )

            statement = select(Item, User).join(User, User.id == Item.user_id)
            if conditions:
                statement = statement.where(and_(*conditions))
            statement = self._newest_first(statement)
            if limit is not None:
                statement = statement.limit(limit)

            return [tuple(row) for row in self.session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while listing items: {str(e)}",
                original_error=e,
            ) from e

    def list_for_user(self, user_id: str) -> list[Item]:
        """Get every item a user owns, whatever its status.

        Args:
            user_id: Owner whose items to retrieve

        Returns:
            List of items, newest first
        """
        try:
            statement = self._newest_first(select(Item).where(Item.user_id == user_id))
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while retrieving items for user {user_id}: "
                f"{str(e)}",
                original_error=e,
            ) from e

    def featured(self, limit: int) -> list[tuple[Item, User]]:
        """Newest approved listings for the landing page."""
        return self.list_with_users(status=ItemStatus.APPROVED.value, limit=limit)

    def update_status(self, item_id: int, status: str) -> bool:
        """Set the moderation status of an item if it differs.

        The check and the write are one conditional UPDATE, so two
        concurrent approvals cannot both observe a change.

        Args:
            item_id: ID of the item to update
            status: New moderation status

        Returns:
            bool: True if the status changed, False if the item already had
            it or does not exist
        """
        try:
            statement = (
                update(Item)
                .where(Item.id == item_id, Item.status != status)
                .values(status=status, updated_at=datetime.utcnow())
            )
            result = self.session.execute(statement)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while updating item {item_id}: {str(e)}",
                original_error=e,
            ) from e

    def mark_unavailable(self, item_id: int) -> bool:
        """Flip an available item to unavailable.

        Returns:
            True if the item was available and is now taken, False if it
            was already unavailable or does not exist
        """
        try:
            statement = (
                update(Item)
                .where(Item.id == item_id, Item.is_available == True)  # noqa: E712
                .values(is_available=False, updated_at=datetime.utcnow())
            )
            result = self.session.execute(statement)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while updating availability of item {item_id}: "
                f"{str(e)}",
                original_error=e,
            ) from e

    def count(self, status: Optional[str] = None) -> int:
        """Count items, optionally only those with the given status.

        Args:
            status: Moderation status to match

        Returns:
            int: Number of matching items
        """
        try:
            statement = select(func.count(Item.id))
            if status:
                statement = statement.where(Item.status == status)
            return self.session.exec(statement).one() or 0
        except SQLAlchemyError as e:
            raise ItemRepositoryError(
                f"Database error while counting items: {str(e)}",
                original_error=e,
            ) from e

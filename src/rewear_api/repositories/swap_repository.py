"""Swap repository for database operations.

This module provides the SwapRepository class: swap creation, hydrated
queries joining the requester, the owner, the item and the item's owner, and
the compare-and-set status update used by the swap workflow.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import aliased
from sqlmodel import Session, and_, desc, select

from ..models.item import Item
from ..models.swap import Swap
from ..models.user import User


class SwapRepositoryError(Exception):
    """Raised when a swap query or write fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


@dataclass
class SwapDetails:
    """A swap with every related row it references."""

    swap: Swap
    requester: User
    owner: User
    item: Item
    item_owner: User


class SwapRepository:
    """Repository for swap database operations."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def _details_statement(self):
        requester = aliased(User, name="requester")
        owner = aliased(User, name="owner")
        item_owner = aliased(User, name="item_owner")

        return (
            select(Swap, requester, owner, Item, item_owner)
            .join(requester, requester.id == Swap.requester_id)
            .join(owner, owner.id == Swap.owner_id)
            .join(Item, Item.id == Swap.item_id)
            .join(item_owner, item_owner.id == Item.user_id)
        )

    def create(self, swap: Swap) -> Swap:
        """Persist a new swap request.

        Args:
            swap: Swap to insert

        Returns:
            Swap: The created swap with its id populated

        Raises:
            SwapRepositoryError: If a referenced row is missing or the write fails
        """
        try:
            self.session.add(swap)
            self.session.flush()
            self.session.refresh(swap)
            return swap
        except IntegrityError as e:
            raise SwapRepositoryError(
                "Failed to create swap: referenced user or item does not exist",
                original_error=e,
            ) from e
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while creating swap: {str(e)}",
                original_error=e,
            ) from e

    def get_by_id(self, swap_id: int) -> Optional[Swap]:
        try:
            statement = select(Swap).where(Swap.id == swap_id)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while retrieving swap {swap_id}: {str(e)}",
                original_error=e,
            ) from e

    def get_with_details(self, swap_id: int) -> Optional[SwapDetails]:
        """Get one swap hydrated with its users and item.

        Args:
            swap_id: ID of the swap

        Returns:
            SwapDetails if found, None otherwise
        """
        try:
            statement = self._details_statement().where(Swap.id == swap_id)
            row = self.session.exec(statement).first()
            return SwapDetails(*row) if row else None
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while retrieving swap {swap_id}: {str(e)}",
                original_error=e,
            ) from e

    def list_with_details(
        self,
        requester_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        participant_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[SwapDetails]:
        """List hydrated swaps matching every given filter.

        Args:
            requester_id: Only swaps requested by this user
            owner_id: Only swaps for items this user owns
            participant_id: Only swaps where this user is requester or owner
            status: Only swaps in this status

        Returns:
            List of SwapDetails, newest first
        """
        try:
            conditions = []

            if requester_id:
                conditions.append(Swap.requester_id == requester_id)

            if owner_id:
                conditions.append(Swap.owner_id == owner_id)

            if participant_id:
                conditions.append(
                    or_(
                        Swap.requester_id == participant_id,
                        Swap.owner_id == participant_id,
                    )
                )

            if status:
                conditions.append(Swap.status == status)

            statement = self._details_statement()
            if conditions:
                statement = statement.where(and_(*conditions))
            statement = statement.order_by(desc(Swap.created_at), desc(Swap.id))

            return [SwapDetails(*row) for row in self.session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while listing swaps: {str(e)}",
                original_error=e,
            ) from e

    def transition_status(self, swap_id: int, expected: str, new_status: str) -> bool:
        """Compare-and-set the swap status.

        Args:
            swap_id: ID of the swap
            expected: Status the swap must currently have
            new_status: Status to write

        Returns:
            bool: True if this call moved the swap, False if its status was
            no longer ``expected``
        """
        try:
            statement = (
                update(Swap)
                .where(Swap.id == swap_id, Swap.status == expected)
                .values(status=new_status, updated_at=datetime.utcnow())
            )
            result = self.session.execute(statement)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while updating swap {swap_id}: {str(e)}",
                original_error=e,
            ) from e

    def count(self) -> int:
        try:
            statement = select(func.count(Swap.id))
            return self.session.exec(statement).one() or 0
        except SQLAlchemyError as e:
            raise SwapRepositoryError(
                f"Database error while counting swaps: {str(e)}",
                original_error=e,
            ) from e

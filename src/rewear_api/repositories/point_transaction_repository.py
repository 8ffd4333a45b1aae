"""Points ledger repository.

Entries are only ever inserted; there is no update or delete.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, desc, select

from ..models.point_transaction import PointTransaction


class PointTransactionRepositoryError(Exception):
    """Raised when a ledger query or write fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class PointTransactionRepository:
    """Repository for the points ledger."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: PointTransaction) -> PointTransaction:
        """Append one ledger entry.

        Args:
            entry: Entry to insert

        Returns:
            PointTransaction: The stored entry
        """
        try:
            self.session.add(entry)
            self.session.flush()
            self.session.refresh(entry)
            return entry
        except SQLAlchemyError as e:
            raise PointTransactionRepositoryError(
                f"Database error while recording transaction for user "
                f"{entry.user_id}: {str(e)}",
                original_error=e,
            ) from e

    def list_for_user(self, user_id: str) -> list[PointTransaction]:
        """Get a user's ledger, newest first."""
        try:
            statement = (
                select(PointTransaction)
                .where(PointTransaction.user_id == user_id)
                .order_by(desc(PointTransaction.created_at), desc(PointTransaction.id))
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise PointTransactionRepositoryError(
                f"Database error while retrieving transactions for user "
                f"{user_id}: {str(e)}",
                original_error=e,
            ) from e

"""User repository for database operations.

This module provides the data access layer for users, including the upsert
used when identity claims arrive and the arithmetic balance updates used by
swap settlement and the listing bonus.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..models.user import DEFAULT_STARTING_POINTS, User, UserUpsert

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserRepositoryError(Exception):
    """Base exception for user repository errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class UserRepository:
    """Repository for user database operations.

    Writes are flushed, never committed: the calling service owns the
    transaction boundary.
    """

    def __init__(self, session: Session) -> None:
        """Initialize user repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID.

        Args:
            user_id: Identity subject to search for

        Returns:
            User if found, None otherwise

        Raises:
            UserRepositoryError: If database operation fails
        """
        try:
            statement = select(User).where(User.id == user_id)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to get user by ID {user_id}: {str(e)}",
                original_error=e
            ) from e

    def upsert(
        self,
        user_data: UserUpsert,
        starting_points: int = DEFAULT_STARTING_POINTS,
    ) -> User:
        """Insert the user or refresh its profile fields in one statement.

        Runs ``INSERT ... ON CONFLICT (id) DO UPDATE`` so concurrent first
        logins for the same subject both succeed. Existing users keep their
        points and admin flag; only the profile fields copied from identity
        claims are overwritten.

        Args:
            user_data: Profile data keyed by identity subject
            starting_points: Balance for a newly created user

        Returns:
            The stored user

        Raises:
            UserRepositoryError: If database operation fails or the backend
                has no upsert support
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise UserRepositoryError(f"Upsert is not supported on {dialect}")

        now = datetime.utcnow()
        profile = user_data.model_dump(exclude={"id"})
        statement = (
            insert(User)
            .values(
                id=user_data.id,
                points=starting_points,
                is_admin=False,
                created_at=now,
                updated_at=now,
                **profile,
            )
            .on_conflict_do_update(
                index_elements=["id"],
                set_={**profile, "updated_at": now},
            )
        )

        try:
            self.session.execute(statement)
            return self.session.get(User, user_data.id, populate_existing=True)
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to upsert user {user_data.id}: {str(e)}",
                original_error=e
            ) from e

    def adjust_points(self, user_id: str, delta: int) -> bool:
        """Add ``delta`` to the balance with a single arithmetic UPDATE.

        Args:
            user_id: Account to change
            delta: Signed amount

        Returns:
            True if a row was updated
        """
        try:
            statement = (
                update(User)
                .where(User.id == user_id)
                .values(points=User.points + delta, updated_at=datetime.utcnow())
            )
            result = self.session.execute(statement)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to adjust points for user {user_id}: {str(e)}",
                original_error=e
            ) from e

    def debit_points(self, user_id: str, amount: int) -> bool:
        """Subtract ``amount`` only if the balance covers it.

        Args:
            user_id: Account to debit
            amount: Non-negative amount

        Returns:
            True if the debit happened, False if the balance was too low
            or the user does not exist
        """
        try:
            statement = (
                update(User)
                .where(User.id == user_id, User.points >= amount)
                .values(points=User.points - amount, updated_at=datetime.utcnow())
            )
            result = self.session.execute(statement)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to debit points for user {user_id}: {str(e)}",
                original_error=e
            ) from e

    def get_points(self, user_id: str) -> Optional[int]:
        """Read the current balance straight from the database."""
        try:
            statement = select(User.points).where(User.id == user_id)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to read points for user {user_id}: {str(e)}",
                original_error=e
            ) from e

    def count(self) -> int:
        """Get total count of users.

        Returns:
            Total number of users

        Raises:
            UserRepositoryError: If database operation fails
        """
        try:
            statement = select(func.count(User.id))
            return self.session.exec(statement).one() or 0
        except SQLAlchemyError as e:
            raise UserRepositoryError(
                f"Failed to count users: {str(e)}",
                original_error=e
            ) from e

"""User service for business logic operations.

This module keeps stored users in step with identity claims and exposes the
caller's points ledger.
"""

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..config import Settings
from ..database import atomic
from ..exceptions import ConflictException, DatabaseException
from ..logging_config import get_logger, log_database_operation
from ..models.user import User, UserUpsert
from ..repositories import REPOSITORY_ERRORS
from ..repositories.point_transaction_repository import PointTransactionRepository
from ..repositories.user_repository import UserRepository, UserRepositoryError
from ..schemas.auth_schemas import IdentityClaims
from ..schemas.transaction_schemas import PointTransactionResponse

logger = get_logger("user_service")


def _is_email_conflict(error: Exception | None) -> bool:
    """Tell a duplicate email apart from other integrity failures."""
    return isinstance(error, IntegrityError) and "email" in str(error.orig).lower()


class UserService:
    """Service for user business logic operations."""

    def __init__(self, session: Session, settings: Settings) -> None:
        """Initialize user service with database session.

        Args:
            session: SQLModel database session
            settings: Application settings (starting balance)
        """
        self.session = session
        self.settings = settings
        self.repository = UserRepository(session)
        self.transaction_repository = PointTransactionRepository(session)

    async def sync_from_identity(self, claims: IdentityClaims) -> User:
        """Create or refresh the user described by identity claims.

        New users start with the configured points balance; existing users
        only have their profile fields refreshed.

        Args:
            claims: Verified identity claims

        Returns:
            User: The stored user

        Raises:
            ConflictException: If the email already belongs to another user
            DatabaseException: If the write fails
        """
        user_data = UserUpsert(
            id=claims.sub,
            email=claims.email,
            first_name=claims.first_name,
            last_name=claims.last_name,
            profile_image_url=claims.profile_image_url,
        )

        try:
            with atomic(self.session):
                user = self.repository.upsert(
                    user_data, starting_points=self.settings.starting_points
                )
        except UserRepositoryError as e:
            if _is_email_conflict(e.original_error):
                logger.warning(
                    f"Email already registered to another user: {claims.email}",
                    extra={"user_id": claims.sub},
                )
                raise ConflictException(
                    "Email address is already registered", resource="user", identifier=claims.sub
                ) from e
            log_database_operation(
                operation="UPSERT", table="users", success=False, error=e.message, user_id=claims.sub
            )
            raise DatabaseException("Failed to store user", operation="upsert_user") from e

        return user

    async def list_transactions(self, user_id: str) -> list[PointTransactionResponse]:
        """Get a user's points ledger, newest first.

        Args:
            user_id: Owner of the ledger

        Returns:
            List of ledger entries
        """
        try:
            entries = self.transaction_repository.list_for_user(user_id)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException(
                "Failed to get transactions", operation="list_transactions"
            ) from e

        return [PointTransactionResponse.model_validate(entry) for entry in entries]

"""Swap service for business logic operations.

This module provides the swap workflow: requesting an item, listing the
caller's swaps, and moving a swap through its status lifecycle. Completion
is delegated to ``SettlementService``.
"""

from sqlmodel import Session

from ..config import Settings
from ..database import atomic
from ..exceptions import (
    AuthorizationException,
    BusinessLogicException,
    ConflictException,
    DatabaseException,
    NotFoundException,
)
from ..logging_config import SecurityLoggingMixin, get_logger, log_database_operation
from ..models.item import ItemStatus
from ..models.swap import Swap, SwapStatus, SwapType, can_transition
from ..models.user import User
from ..repositories import REPOSITORY_ERRORS
from ..repositories.item_repository import ItemRepository
from ..repositories.swap_repository import SwapDetails, SwapRepository
from ..repositories.user_repository import UserRepository
from ..schemas.item_schemas import UserSummary
from ..schemas.swap_schemas import (
    SwapCreate,
    SwapListType,
    SwapResponse,
    SwapWithDetails,
)
from .item_service import to_item_with_user
from .settlement_service import SettlementService

logger = get_logger("swap_service")


def to_swap_with_details(details: SwapDetails) -> SwapWithDetails:
    """Render a hydrated swap."""
    return SwapWithDetails(
        **SwapResponse.model_validate(details.swap).model_dump(),
        requester=UserSummary.model_validate(details.requester),
        owner=UserSummary.model_validate(details.owner),
        item=to_item_with_user(details.item, details.item_owner),
    )


class SwapService(SecurityLoggingMixin):
    """Service for swap business logic operations."""

    def __init__(self, session: Session, settings: Settings) -> None:
        """Initialize swap service with database session.

        Args:
            session: SQLModel database session
            settings: Application settings
        """
        super().__init__()
        self.session = session
        self.settings = settings
        self.swap_repository = SwapRepository(session)
        self.item_repository = ItemRepository(session)
        self.user_repository = UserRepository(session)
        self.settlement_service = SettlementService(session, settings)

    async def create_swap(self, swap_data: SwapCreate, requester: User) -> SwapResponse:
        """Request a swap for an item.

        The owner is taken from the item. The item must be approved and
        still available, must not belong to the requester, and for points
        swaps the requester must currently hold at least its point value.

        Args:
            swap_data: Validated swap request
            requester: Authenticated caller

        Returns:
            Created swap, status pending

        Raises:
            NotFoundException: If the item does not exist
            ConflictException: If the item is not approved or not available
            BusinessLogicException: If the item is the requester's own or the
                requester cannot afford it
        """
        try:
            item = self.item_repository.get_by_id(swap_data.item_id)
            if item is None:
                raise NotFoundException("Item", swap_data.item_id)

            if item.status != ItemStatus.APPROVED.value or not item.is_available:
                raise ConflictException(
                    "Item is not available for swapping", resource="item", identifier=item.id
                )

            if item.user_id == requester.id:
                raise BusinessLogicException(
                    "You cannot request a swap for your own item", rule="not_own_item"
                )

            if swap_data.swap_type == SwapType.POINTS:
                balance = self.user_repository.get_points(requester.id) or 0
                if balance < item.point_value:
                    raise BusinessLogicException(
                        f"Insufficient points: {item.point_value} required, {balance} available",
                        rule="requester_balance_covers_point_value",
                    )

            with atomic(self.session):
                swap = self.swap_repository.create(
                    Swap(
                        requester_id=requester.id,
                        owner_id=item.user_id,
                        item_id=item.id,
                        swap_type=swap_data.swap_type.value,
                        status=SwapStatus.PENDING.value,
                        message=swap_data.message,
                    )
                )
            self.session.refresh(swap)
        except REPOSITORY_ERRORS as e:
            log_database_operation(
                operation="INSERT", table="swaps", success=False, error=e.message, user_id=requester.id
            )
            raise DatabaseException("Failed to create swap", operation="create_swap") from e

        log_database_operation(
            operation="INSERT", table="swaps", success=True, user_id=requester.id, swap_id=swap.id
        )
        logger.info(
            f"Swap {swap.id} requested for item {swap.item_id}",
            extra={"swap_id": swap.id, "user_id": requester.id, "swap_type": swap.swap_type},
        )
        return SwapResponse.model_validate(swap)

    async def list_swaps(
        self, user: User, list_type: SwapListType | None = None
    ) -> list[SwapWithDetails]:
        """List the caller's swaps.

        Args:
            user: Authenticated caller
            list_type: ``requested`` for swaps the caller asked for,
                ``received`` for swaps on the caller's items, None for both

        Returns:
            Hydrated swaps, newest first
        """
        filters: dict[str, str] = {}
        if list_type == SwapListType.REQUESTED:
            filters["requester_id"] = user.id
        elif list_type == SwapListType.RECEIVED:
            filters["owner_id"] = user.id
        else:
            filters["participant_id"] = user.id

        try:
            rows = self.swap_repository.list_with_details(**filters)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to list swaps", operation="list_swaps") from e

        return [to_swap_with_details(details) for details in rows]

    async def get_swap(self, swap_id: int, user: User) -> SwapWithDetails:
        """Get one swap visible to the caller.

        Raises:
            NotFoundException: If the swap does not exist
            AuthorizationException: If the caller is neither a participant nor an admin
        """
        try:
            details = self.swap_repository.get_with_details(swap_id)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to get swap", operation="get_swap") from e

        if details is None:
            raise NotFoundException("Swap", swap_id)

        if user.id not in (details.swap.requester_id, details.swap.owner_id) and not user.is_admin:
            self.log_authorization_failure(
                user_id=user.id, resource=f"swap:{swap_id}", action="read", reason="not a participant"
            )
            raise AuthorizationException("You do not have access to this swap")

        return to_swap_with_details(details)

    async def update_status(
        self, swap_id: int, new_status: SwapStatus, actor: User
    ) -> SwapResponse:
        """Move a swap to a new status.

        Only the item owner or an admin may change a swap. Completing a swap
        settles it.

        Args:
            swap_id: Swap to update
            new_status: Target status
            actor: Authenticated caller

        Returns:
            The updated swap

        Raises:
            NotFoundException: If the swap does not exist
            AuthorizationException: If the caller is not the owner or an admin
            ConflictException: If the transition is not allowed or the swap
                changed concurrently
        """
        try:
            swap = self.swap_repository.get_by_id(swap_id)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to get swap", operation="update_swap_status") from e

        if swap is None:
            raise NotFoundException("Swap", swap_id)

        if actor.id != swap.owner_id and not actor.is_admin:
            self.log_authorization_failure(
                user_id=actor.id,
                resource=f"swap:{swap_id}",
                action=f"set_status:{new_status.value}",
                reason="not the item owner",
            )
            raise AuthorizationException("Only the item owner or an admin can update this swap")

        current_status = swap.status
        if not can_transition(current_status, new_status):
            raise ConflictException(
                f"Cannot change swap status from {current_status} to {new_status.value}",
                resource="swap",
                identifier=swap_id,
            )

        if new_status == SwapStatus.COMPLETED:
            swap = await self.settlement_service.complete_swap(swap_id, current_status)
            return SwapResponse.model_validate(swap)

        try:
            with atomic(self.session):
                if not self.swap_repository.transition_status(
                    swap_id, current_status, new_status.value
                ):
                    raise ConflictException(
                        "Swap status changed concurrently", resource="swap", identifier=swap_id
                    )
            self.session.refresh(swap)
        except REPOSITORY_ERRORS as e:
            raise DatabaseException("Failed to update swap", operation="update_swap_status") from e

        logger.info(
            f"Swap {swap_id} moved from {current_status} to {new_status.value}",
            extra={"swap_id": swap_id, "user_id": actor.id},
        )
        return SwapResponse.model_validate(swap)

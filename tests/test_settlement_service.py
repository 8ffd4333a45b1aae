"""Unit tests for SettlementService.

Covers swap completion for both swap types, listing moderation with the
approval bonus, and rollback of partially applied settlements.
"""

import pytest
from sqlmodel import Session

from rewear_api.config import Settings
from rewear_api.exceptions import (
    BusinessLogicException,
    ConflictException,
    DatabaseException,
    NotFoundException,
)
from rewear_api.models.item import ItemStatus
from rewear_api.models.point_transaction import TransactionType
from rewear_api.models.swap import Swap, SwapStatus, SwapType
from rewear_api.repositories.point_transaction_repository import PointTransactionRepositoryError
from rewear_api.services.settlement_service import SettlementService


@pytest.fixture
def service(test_session: Session, test_settings: Settings) -> SettlementService:
    return SettlementService(test_session, test_settings)


@pytest.fixture
def make_swap(test_session: Session):
    def _make(requester, item, swap_type=SwapType.POINTS, status=SwapStatus.ACCEPTED) -> Swap:
        swap = Swap(
            requester_id=requester.id,
            owner_id=item.user_id,
            item_id=item.id,
            swap_type=swap_type.value,
            status=status.value,
        )
        test_session.add(swap)
        test_session.commit()
        test_session.refresh(swap)
        return swap

    return _make


class TestCompleteSwap:
    """Test cases for SettlementService.complete_swap."""

    @pytest.mark.asyncio
    async def test_points_swap_moves_points_and_writes_ledger(
        self, service, make_swap, requester, owner, approved_item, db_state_checker
    ):
        """Test a 50 point item redeemed by a 100 point requester."""
        swap = make_swap(requester, approved_item)

        completed = await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert completed.status == SwapStatus.COMPLETED.value
        assert db_state_checker.points(requester.id) == 50
        assert db_state_checker.points(owner.id) == 150
        assert db_state_checker.item(approved_item.id).is_available is False

        spent = db_state_checker.ledger(requester.id)
        earned = db_state_checker.ledger(owner.id)
        assert [(e.amount, e.type) for e in spent] == [(-50, TransactionType.SPENT.value)]
        assert [(e.amount, e.type) for e in earned] == [(50, TransactionType.EARNED.value)]
        assert spent[0].description == "Redeemed Vintage Denim Jacket"
        assert earned[0].description == "Earned from Vintage Denim Jacket"
        assert spent[0].related_item_id == approved_item.id
        assert spent[0].amount + earned[0].amount == 0

    @pytest.mark.asyncio
    async def test_balances_match_ledger(
        self, service, make_swap, requester, owner, approved_item, db_state_checker
    ):
        swap = make_swap(requester, approved_item)

        await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        for user in (requester, owner):
            assert db_state_checker.points(user.id) == 100 + db_state_checker.ledger_sum(user.id)

    @pytest.mark.asyncio
    async def test_direct_swap_moves_no_points(
        self, service, make_swap, requester, owner, approved_item, db_state_checker
    ):
        swap = make_swap(requester, approved_item, swap_type=SwapType.DIRECT)

        await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert db_state_checker.points(requester.id) == 100
        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.count_transactions() == 0
        assert db_state_checker.item(approved_item.id).is_available is False

    @pytest.mark.asyncio
    async def test_second_completion_conflicts(
        self, service, make_swap, requester, owner, approved_item, db_state_checker
    ):
        """Test a swap is paid out at most once."""
        swap = make_swap(requester, approved_item)
        await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        with pytest.raises(ConflictException):
            await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert db_state_checker.points(requester.id) == 50
        assert db_state_checker.points(owner.id) == 150
        assert db_state_checker.count_transactions() == 2

    @pytest.mark.asyncio
    async def test_insufficient_points_writes_nothing(
        self, service, make_swap, factory, owner, approved_item, db_state_checker
    ):
        poor = factory.create_user("poor", points=20)
        swap = make_swap(poor, approved_item)

        with pytest.raises(BusinessLogicException) as exc_info:
            await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert exc_info.value.status_code == 422
        assert db_state_checker.points("poor") == 20
        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.count_transactions() == 0
        assert db_state_checker.item(approved_item.id).is_available is True
        assert service.swap_repository.get_by_id(swap.id).status == SwapStatus.ACCEPTED.value

    @pytest.mark.asyncio
    async def test_ledger_failure_rolls_back_everything(
        self, service, make_swap, requester, owner, approved_item, db_state_checker, monkeypatch
    ):
        """Test a failure after the balances moved leaves no partial state."""
        swap = make_swap(requester, approved_item)

        def failing_create(entry):
            raise PointTransactionRepositoryError("disk full")

        monkeypatch.setattr(service.transaction_repository, "create", failing_create)

        with pytest.raises(DatabaseException):
            await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert db_state_checker.points(requester.id) == 100
        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.item(approved_item.id).is_available is True
        assert service.swap_repository.get_by_id(swap.id).status == SwapStatus.ACCEPTED.value

    @pytest.mark.asyncio
    async def test_unavailable_item_conflicts(
        self, service, make_swap, factory, requester, owner, db_state_checker
    ):
        item = factory.create_item(owner, is_available=False)
        swap = make_swap(requester, item)

        with pytest.raises(ConflictException) as exc_info:
            await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

        assert exc_info.value.message == "Item is no longer available"
        assert db_state_checker.points(requester.id) == 100
        assert service.swap_repository.get_by_id(swap.id).status == SwapStatus.ACCEPTED.value

    @pytest.mark.asyncio
    async def test_stale_expected_status_conflicts(
        self, service, make_swap, requester, approved_item
    ):
        swap = make_swap(requester, approved_item, status=SwapStatus.PENDING)

        with pytest.raises(ConflictException):
            await service.complete_swap(swap.id, SwapStatus.ACCEPTED.value)

    @pytest.mark.asyncio
    async def test_missing_swap(self, service):
        with pytest.raises(NotFoundException):
            await service.complete_swap(9999, SwapStatus.ACCEPTED.value)


class TestSetListingStatus:
    """Test cases for SettlementService.set_listing_status."""

    @pytest.mark.asyncio
    async def test_approval_pays_bonus_once(
        self, service, factory, owner, db_state_checker
    ):
        item = factory.create_item(owner, title="Wool Coat", status=ItemStatus.PENDING)

        approved = await service.set_listing_status(item.id, ItemStatus.APPROVED)
        await service.set_listing_status(item.id, ItemStatus.APPROVED)

        assert approved.status == ItemStatus.APPROVED.value
        assert db_state_checker.points(owner.id) == 110
        entries = db_state_checker.ledger(owner.id)
        assert [(e.amount, e.type) for e in entries] == [(10, TransactionType.BONUS.value)]
        assert entries[0].description == "Bonus for listing Wool Coat"

    @pytest.mark.asyncio
    async def test_ledger_failure_rolls_back_bonus(
        self, service, factory, owner, db_state_checker, monkeypatch
    ):
        """Test the status change, balance and bonus entry commit together or not at all."""
        item = factory.create_item(owner, status=ItemStatus.PENDING)

        def failing_create(entry):
            raise PointTransactionRepositoryError("disk full")

        monkeypatch.setattr(service.transaction_repository, "create", failing_create)

        with pytest.raises(DatabaseException):
            await service.set_listing_status(item.id, ItemStatus.APPROVED)

        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.item(item.id).status == ItemStatus.PENDING.value
        assert db_state_checker.count_transactions() == 0

    @pytest.mark.asyncio
    async def test_rejection_pays_nothing(self, service, factory, owner, db_state_checker):
        item = factory.create_item(owner, status=ItemStatus.PENDING)

        rejected = await service.set_listing_status(item.id, ItemStatus.REJECTED)

        assert rejected.status == ItemStatus.REJECTED.value
        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.count_transactions() == 0

    @pytest.mark.asyncio
    async def test_zero_bonus(
        self, test_session, test_settings, factory, owner, db_state_checker
    ):
        service = SettlementService(
            test_session, test_settings.model_copy(update={"approval_bonus_points": 0})
        )
        item = factory.create_item(owner, status=ItemStatus.PENDING)

        await service.set_listing_status(item.id, ItemStatus.APPROVED)

        assert db_state_checker.points(owner.id) == 100
        assert db_state_checker.count_transactions() == 0

    @pytest.mark.asyncio
    async def test_missing_item(self, service):
        with pytest.raises(NotFoundException):
            await service.set_listing_status(9999, ItemStatus.APPROVED)

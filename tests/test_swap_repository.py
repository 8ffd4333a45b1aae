"""Unit tests for SwapRepository and PointTransactionRepository."""

import pytest
from sqlmodel import Session

from rewear_api.models.point_transaction import PointTransaction, TransactionType
from rewear_api.models.swap import Swap, SwapStatus, SwapType
from rewear_api.repositories.point_transaction_repository import PointTransactionRepository
from rewear_api.repositories.swap_repository import SwapRepository


def make_swap(session: Session, requester, owner, item, status=SwapStatus.PENDING) -> Swap:
    swap = Swap(
        requester_id=requester.id,
        owner_id=owner.id,
        item_id=item.id,
        swap_type=SwapType.POINTS.value,
        status=status.value,
        message="Interested!",
    )
    session.add(swap)
    session.commit()
    session.refresh(swap)
    return swap


class TestSwapRepository:
    """Test cases for SwapRepository."""

    @pytest.fixture
    def repository(self, test_session: Session) -> SwapRepository:
        return SwapRepository(test_session)

    def test_get_with_details_hydrates_every_relation(
        self, repository: SwapRepository, test_session: Session, requester, owner, approved_item
    ):
        swap = make_swap(test_session, requester, owner, approved_item)

        details = repository.get_with_details(swap.id)

        assert details.swap.id == swap.id
        assert details.requester.id == requester.id
        assert details.owner.id == owner.id
        assert details.item.id == approved_item.id
        assert details.item_owner.id == owner.id
        assert repository.get_with_details(9999) is None

    def test_list_by_side(
        self, repository: SwapRepository, test_session: Session, factory, requester, owner
    ):
        mine = factory.create_item(requester, title="Requester's coat")
        theirs = factory.create_item(owner, title="Owner's coat")
        requested = make_swap(test_session, requester, owner, theirs)
        received = make_swap(test_session, owner, requester, mine)

        as_requester = repository.list_with_details(requester_id=requester.id)
        as_owner = repository.list_with_details(owner_id=requester.id)
        both = repository.list_with_details(participant_id=requester.id)

        assert [d.swap.id for d in as_requester] == [requested.id]
        assert [d.swap.id for d in as_owner] == [received.id]
        assert [d.swap.id for d in both] == [received.id, requested.id]

    def test_list_by_status(
        self, repository: SwapRepository, test_session: Session, requester, owner, approved_item
    ):
        make_swap(test_session, requester, owner, approved_item)
        accepted = make_swap(test_session, requester, owner, approved_item, SwapStatus.ACCEPTED)

        rows = repository.list_with_details(status=SwapStatus.ACCEPTED.value)

        assert [d.swap.id for d in rows] == [accepted.id]

    def test_transition_status_compare_and_set(
        self, repository: SwapRepository, test_session: Session, requester, owner, approved_item
    ):
        swap = make_swap(test_session, requester, owner, approved_item)

        assert repository.transition_status(swap.id, "pending", "accepted") is True
        assert repository.transition_status(swap.id, "pending", "rejected") is False
        test_session.commit()

        assert repository.get_by_id(swap.id).status == "accepted"

    def test_count(
        self, repository: SwapRepository, test_session: Session, requester, owner, approved_item
    ):
        assert repository.count() == 0
        make_swap(test_session, requester, owner, approved_item)
        assert repository.count() == 1


class TestPointTransactionRepository:
    """Test cases for PointTransactionRepository."""

    @pytest.fixture
    def repository(self, test_session: Session) -> PointTransactionRepository:
        return PointTransactionRepository(test_session)

    def test_list_newest_first(
        self, repository: PointTransactionRepository, test_session: Session, owner, approved_item
    ):
        repository.create(
            PointTransaction(
                user_id=owner.id, amount=10, type=TransactionType.BONUS.value,
                description="Bonus for listing Jacket", related_item_id=approved_item.id,
            )
        )
        repository.create(
            PointTransaction(
                user_id=owner.id, amount=50, type=TransactionType.EARNED.value,
                description="Earned from Jacket", related_item_id=approved_item.id,
            )
        )
        test_session.commit()

        entries = repository.list_for_user(owner.id)

        assert [entry.amount for entry in entries] == [50, 10]
        assert repository.list_for_user("nobody") == []

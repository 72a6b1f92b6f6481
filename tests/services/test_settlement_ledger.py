from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fintrack.core.exceptions import (
    InvalidAmountError,
    InvalidInputError,
    InvalidTransitionError,
)
from fintrack.models.settlement import SettlementStatus
from fintrack.models.shared_expense import Participant
from fintrack.services.settlement_ledger import (
    cancel_settlement,
    complete_settlement,
    create_settlement,
    mark_participant_settled,
)

NOW = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)


def _participant(**kwargs):
    return Participant(user_email="bob@example.com", user_name="Bob", amount_owed=Decimal("40"), **kwargs)


def test_mark_participant_settled_records_payment():
    participant = _participant()

    settled = mark_participant_settled(participant, 40)

    assert settled.is_settled is True
    assert settled.amount_paid == Decimal("40")
    assert settled.id == participant.id
    assert participant.is_settled is False
    assert settled.outstanding() == Decimal("0")


def test_partial_payment_still_settles_the_share():
    settled = mark_participant_settled(_participant(), Decimal("25"))

    assert settled.is_settled is True
    assert settled.outstanding() == Decimal("15")


def test_settled_share_cannot_be_settled_again():
    settled = mark_participant_settled(_participant(), 40)

    with pytest.raises(InvalidTransitionError):
        mark_participant_settled(settled, 40)


def test_negative_payment_is_rejected():
    with pytest.raises(InvalidAmountError):
        mark_participant_settled(_participant(), -1)


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), "-Infinity"])
def test_non_finite_payment_is_rejected(amount):
    participant = _participant()

    with pytest.raises(InvalidAmountError):
        mark_participant_settled(participant, amount)
    assert participant.is_settled is False


def test_create_settlement_starts_pending():
    settlement = create_settlement("bob@example.com", "alice@example.com", 40, description="Dinner")

    assert settlement.status == SettlementStatus.PENDING
    assert settlement.amount == Decimal("40")
    assert settlement.settled_at is None
    assert settlement.is_terminal is False


@pytest.mark.parametrize("amount", [0, -10, Decimal("0.00")])
def test_create_settlement_requires_positive_amount(amount):
    with pytest.raises(InvalidAmountError):
        create_settlement("bob@example.com", "alice@example.com", amount)


def test_create_settlement_rejects_paying_yourself():
    with pytest.raises(InvalidInputError):
        create_settlement("bob@example.com", "bob@example.com", 10)


def test_complete_stamps_settled_at():
    settlement = create_settlement("bob@example.com", "alice@example.com", 40)

    completed = complete_settlement(settlement, NOW)

    assert completed.status == SettlementStatus.COMPLETED
    assert completed.settled_at == NOW
    assert completed.is_terminal is True
    assert settlement.status == SettlementStatus.PENDING


def test_cancel_leaves_settled_at_empty():
    cancelled = cancel_settlement(create_settlement("bob@example.com", "alice@example.com", 40), NOW)

    assert cancelled.status == SettlementStatus.CANCELLED
    assert cancelled.settled_at is None


@pytest.mark.parametrize("finish", [complete_settlement, cancel_settlement])
@pytest.mark.parametrize("then", [complete_settlement, cancel_settlement])
def test_terminal_settlements_cannot_move(finish, then):
    done = finish(create_settlement("bob@example.com", "alice@example.com", 40), NOW)

    with pytest.raises(InvalidTransitionError):
        then(done, NOW)

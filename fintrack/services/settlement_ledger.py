"""
Settlement ledger - state transitions for shares and settlements.

Participant share:   owed -> settled        (one-way)
Settlement record:   pending -> completed   (terminal, stamps settled_at)
                     pending -> cancelled   (terminal)

These functions only validate and return the new state; persisting it and
notifying people is the calling service's job.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import structlog

from fintrack.core.exceptions import (
    InvalidAmountError,
    InvalidInputError,
    InvalidTransitionError,
)
from fintrack.models.settlement import Settlement, SettlementStatus
from fintrack.models.shared_expense import Participant

logger = structlog.get_logger(__name__)


def _amount(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def mark_participant_settled(participant: Participant, amount_paid) -> Participant:
    """Record a confirmed payment and close the participant's share."""
    paid = _amount(amount_paid)
    if not paid.is_finite() or paid < 0:
        raise InvalidAmountError(f"Amount paid must be a non-negative number, got {paid}")
    if participant.is_settled:
        raise InvalidTransitionError(
            f"Share of {participant.user_email} is already settled"
        )

    logger.info(
        "participant_settled",
        participant_id=str(participant.id),
        user_email=participant.user_email,
        amount_paid=float(paid),
    )
    return participant.model_copy(update={"amount_paid": paid, "is_settled": True})


def create_settlement(
    payer: str,
    payee: str,
    amount,
    shared_expense_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Settlement:
    """Build a new pending settlement. Amount must be positive."""
    value = _amount(amount)
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError(f"Settlement amount must be positive, got {value}")
    if payer == payee:
        raise InvalidInputError("Payer and payee must be different people")

    return Settlement(
        from_user_email=payer,
        to_user_email=payee,
        amount=value,
        shared_expense_id=shared_expense_id,
        description=description,
        status=SettlementStatus.PENDING,
    )


def _transition(settlement: Settlement, target: SettlementStatus, **changes) -> Settlement:
    if settlement.status != SettlementStatus.PENDING:
        raise InvalidTransitionError(
            f"Settlement {settlement.id} is {settlement.status.value}, "
            f"cannot move to {target.value}"
        )
    logger.info(
        "settlement_transition",
        settlement_id=str(settlement.id),
        from_status=settlement.status.value,
        to_status=target.value,
    )
    return settlement.model_copy(update={"status": target, **changes})


def complete_settlement(settlement: Settlement, now: Optional[datetime] = None) -> Settlement:
    now = now or datetime.now(timezone.utc)
    return _transition(
        settlement, SettlementStatus.COMPLETED, settled_at=now, updated_at=now
    )


def cancel_settlement(settlement: Settlement, now: Optional[datetime] = None) -> Settlement:
    now = now or datetime.now(timezone.utc)
    return _transition(settlement, SettlementStatus.CANCELLED, updated_at=now)

"""
Split calculator - divides a total among participants.

Rules by method:
- equal:      total / n for everyone
- percentage: total * percentage / 100 (missing percentage counts as 0)
- shares:     total * k / sum(k) (missing or zero share count counts as 1)
- custom:     the caller's amount, unchanged (missing amount counts as 0)

The calculator is a pure projection. It does not check that percentages add up
to 100 or that custom amounts add up to the total, so it can be called on every
keystroke of a half-filled form; see fintrack.utils.split_validation for the
checks that run before anything is persisted.

All arithmetic is Decimal and nothing is rounded here. Rounding happens at
presentation time only.
"""

from decimal import Decimal
from typing import List, Optional, Sequence

from pydantic import BaseModel

from fintrack.core.exceptions import InvalidInputError, InvalidSplitError
from fintrack.models.shared_expense import SplitMethod

HUNDRED = Decimal("100")


class ShareInput(BaseModel):
    identity: str
    name: str = ""
    percentage: Optional[Decimal] = None
    shares: Optional[int] = None
    custom_amount: Optional[Decimal] = None


class ShareResult(BaseModel):
    identity: str
    name: str = ""
    amount_owed: Decimal
    percentage: Optional[Decimal] = None
    shares: Optional[int] = None


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 33.33 as 33.33 instead of its binary float expansion
    return Decimal(str(value))


def _check_inputs(total: Decimal, participants: Sequence[ShareInput]) -> None:
    if not total.is_finite() or total <= 0:
        raise InvalidInputError(f"Total amount must be positive, got {total}")

    for p in participants:
        if p.percentage is not None and p.percentage < 0:
            raise InvalidInputError(f"Negative percentage for {p.identity}: {p.percentage}")
        if p.shares is not None and p.shares < 0:
            raise InvalidInputError(f"Negative share count for {p.identity}: {p.shares}")
        if p.custom_amount is not None and p.custom_amount < 0:
            raise InvalidInputError(f"Negative amount for {p.identity}: {p.custom_amount}")


def compute_shares(
    total_amount,
    method: SplitMethod,
    participants: Sequence[ShareInput],
) -> List[ShareResult]:
    """
    Compute each participant's owed amount.

    :param total_amount: positive total, any number type
    :param method: split rule
    :param participants: people sharing the expense, with method-specific inputs
    :return: one ShareResult per participant, in input order
    :raises InvalidSplitError: equal or shares split with no participants
    :raises InvalidInputError: non-positive total or negative inputs
    """
    total = _to_decimal(total_amount)
    method = SplitMethod(method)
    _check_inputs(total, participants)

    if method == SplitMethod.EQUAL:
        if not participants:
            raise InvalidSplitError("Equal split needs at least one participant")
        each = total / len(participants)
        amounts = [each] * len(participants)

    elif method == SplitMethod.PERCENTAGE:
        amounts = [
            total * (p.percentage or Decimal("0")) / HUNDRED
            for p in participants
        ]

    elif method == SplitMethod.SHARES:
        if not participants:
            raise InvalidSplitError("Shares split needs at least one participant")
        counts = [p.shares or 1 for p in participants]
        total_shares = sum(counts)
        amounts = [total * count / total_shares for count in counts]

    else:
        amounts = [p.custom_amount or Decimal("0") for p in participants]

    return [
        ShareResult(
            identity=p.identity,
            name=p.name,
            amount_owed=amount,
            percentage=p.percentage,
            shares=p.shares,
        )
        for p, amount in zip(participants, amounts)
    ]

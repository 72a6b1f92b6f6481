"""Shared expense validation utilities."""
from decimal import Decimal
from typing import Sequence

from fintrack.core.exceptions import ImbalancedSplitError, InvalidInputError
from fintrack.models.shared_expense import SplitMethod
from fintrack.services.split_calculator import ShareInput

TOLERANCE = Decimal("0.01")


def validate_participants(participants: Sequence[ShareInput]) -> None:
    """
    Validate the participant list.

    Rules:
    - at least one participant
    - no identity listed twice
    """
    if not participants:
        raise InvalidInputError("A shared expense needs at least one participant")

    seen = set()
    for p in participants:
        key = p.identity.strip().lower()
        if key in seen:
            raise InvalidInputError(f"Participant '{p.identity}' is listed more than once")
        seen.add(key)


def validate_split(total_amount, method: SplitMethod, participants: Sequence[ShareInput]) -> None:
    """
    Validate split inputs before anything is persisted.

    Rules:
    - percentage: percentages sum to 100 (within 0.01)
    - custom: amounts sum to the total (within 0.01)
    - shares: every explicit share count is a positive integer
    """
    validate_participants(participants)
    total = Decimal(str(total_amount))

    if method == SplitMethod.PERCENTAGE:
        pct_sum = sum((p.percentage or Decimal("0") for p in participants), Decimal("0"))
        if abs(pct_sum - 100) > TOLERANCE:
            raise ImbalancedSplitError(f"Percentages must add up to 100, got {pct_sum}")

    elif method == SplitMethod.CUSTOM:
        custom_sum = sum((p.custom_amount or Decimal("0") for p in participants), Decimal("0"))
        if abs(custom_sum - total) > TOLERANCE:
            raise ImbalancedSplitError(
                f"Custom amounts ({custom_sum}) must add up to the total ({total})"
            )

    elif method == SplitMethod.SHARES:
        for p in participants:
            if p.shares is not None and p.shares <= 0:
                raise InvalidInputError(
                    f"Share count for '{p.identity}' must be positive, got {p.shares}"
                )

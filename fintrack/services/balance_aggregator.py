"""
Balance aggregator - net amounts between the current user and everyone else.

Sign convention, from the current user's side:
    positive -> the counterparty owes the current user
    negative -> the current user owes the counterparty

Only unsettled participant shares count. Each contributes what is still
outstanding on it (amount_owed - amount_paid):
- expenses the current user created: +outstanding for every other participant
- expenses someone else created where the current user is a participant:
  -outstanding against the creator
"""

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel

from fintrack.models.base import Amount
from fintrack.models.shared_expense import SharedExpense
from fintrack.models.user import CurrentUser

DEFAULT_EPSILON = Decimal("1e-6")


class Identity(BaseModel):
    email: str
    name: str = ""


class Balance(BaseModel):
    counterparty_email: str
    counterparty_name: str
    net_amount: Amount


IdentityLookup = Callable[[str], Optional[Identity]]


def _creator_identity(expense: SharedExpense, resolve: IdentityLookup) -> Identity:
    resolved = resolve(expense.created_by)
    if resolved is not None:
        return resolved
    # Unknown user: keep the contribution under whatever we have on the expense
    email = expense.creator_email or expense.created_by
    return Identity(email=email, name=expense.creator_name or email.split("@")[0])


def compute_balances(
    current_user: CurrentUser,
    expenses: Iterable[SharedExpense],
    resolve_identity: Optional[IdentityLookup] = None,
    epsilon: Decimal = DEFAULT_EPSILON,
) -> List[Balance]:
    """
    Fold unsettled shares into one net balance per counterparty.

    :param current_user: whose point of view the balances are from
    :param expenses: every shared expense the user created or takes part in
    :param resolve_identity: user id -> Identity, used for expense creators
    :param epsilon: nets with an absolute value below this are dropped
    :return: balances sorted by counterparty email
    """
    resolve = resolve_identity or (lambda _user_id: None)
    net: Dict[str, Decimal] = {}
    names: Dict[str, str] = {}

    def accrue(email: str, name: str, amount: Decimal) -> None:
        net[email] = net.get(email, Decimal("0")) + amount
        names.setdefault(email, name or email.split("@")[0])

    for expense in expenses:
        if expense.created_by == current_user.id:
            for participant in expense.participants:
                if participant.user_email == current_user.email or participant.is_settled:
                    continue
                accrue(participant.user_email, participant.user_name, participant.outstanding())
            continue

        own_shares = [
            p for p in expense.participants
            if p.user_email == current_user.email and not p.is_settled
        ]
        if not own_shares:
            continue

        creator = _creator_identity(expense, resolve)
        if creator.email == current_user.email:
            continue
        for participant in own_shares:
            accrue(creator.email, creator.name, -participant.outstanding())

    return [
        Balance(counterparty_email=email, counterparty_name=names[email], net_amount=amount)
        for email, amount in sorted(net.items())
        if abs(amount) >= epsilon
    ]

from decimal import Decimal
from typing import List

from fintrack.core.config import settings
from fintrack.models.user import CurrentUser
from fintrack.repositories.shared_expense_repo import SharedExpenseRepository
from fintrack.repositories.user_repo import UserRepository
from fintrack.services.balance_aggregator import Balance, Identity, compute_balances


class BalanceService:
    def __init__(self, expenses: SharedExpenseRepository, users: UserRepository):
        self.expenses = expenses
        self.users = users

    async def balances_for(self, user: CurrentUser) -> List[Balance]:
        """Load every relevant expense, resolve creators, fold into balances."""
        expenses = await self.expenses.list_for_user(user.id, user.email)

        creator_ids = {e.created_by for e in expenses if e.created_by != user.id}
        known = await self.users.get_users_by_ids(creator_ids)
        identities = {
            user_id: Identity(email=found.email, name=found.name)
            for user_id, found in known.items()
        }
        return compute_balances(
            user, expenses, identities.get, epsilon=Decimal(str(settings.BALANCE_EPSILON))
        )

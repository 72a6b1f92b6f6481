from datetime import datetime, timezone
from typing import List, Optional, Tuple

import structlog
from fastapi.concurrency import run_in_threadpool

from fintrack.core.exceptions import InvalidTransitionError, NotFoundError, UnauthorizedError
from fintrack.models.settlement import Settlement
from fintrack.models.user import CurrentUser
from fintrack.repositories.settlement_repo import SettlementRepository
from fintrack.repositories.shared_expense_repo import SharedExpenseRepository
from fintrack.schemas.settlement import SettlementCreate
from fintrack.services import settlement_ledger
from fintrack.services.notifications import (
    EmailNotifier,
    NotificationOutcome,
    SettlementNotification,
)

logger = structlog.get_logger(__name__)


class SettlementService:
    def __init__(
        self,
        settlements: SettlementRepository,
        expenses: SharedExpenseRepository,
        notifier: EmailNotifier,
    ):
        self.settlements = settlements
        self.expenses = expenses
        self.notifier = notifier

    async def create(self, payer: CurrentUser, settlement_in: SettlementCreate) -> Settlement:
        """Record a pending payment from the caller to someone else."""
        settlement = settlement_ledger.create_settlement(
            payer=payer.email,
            payee=settlement_in.to_user_email.lower(),
            amount=settlement_in.amount,
            shared_expense_id=settlement_in.shared_expense_id,
            description=settlement_in.description,
        )
        settlement = await self.settlements.insert(settlement)
        logger.info(
            "settlement_created",
            settlement_id=str(settlement.id),
            amount=float(settlement.amount),
        )
        return settlement

    async def list_for(self, user: CurrentUser) -> List[Settlement]:
        return await self.settlements.list_for(user.email)

    async def _get_for_party(self, user: CurrentUser, settlement_id: str) -> Settlement:
        settlement = await self.settlements.get(settlement_id)
        if settlement is None:
            raise NotFoundError("Settlement not found")
        if user.email not in (settlement.from_user_email, settlement.to_user_email):
            raise UnauthorizedError()
        return settlement

    async def _save(self, settlement: Settlement) -> Settlement:
        saved = await self.settlements.save_transition(settlement)
        if saved is None:
            # Someone else moved it out of pending first
            raise InvalidTransitionError(f"Settlement {settlement.id} is no longer pending")
        return saved

    async def _expense_title(self, settlement: Settlement) -> str:
        if settlement.shared_expense_id:
            expense = await self.expenses.get(settlement.shared_expense_id)
            if expense is not None:
                return expense.title
        return settlement.description or "Settlement"

    async def complete(
        self, user: CurrentUser, settlement_id: str, now: Optional[datetime] = None
    ) -> Tuple[Settlement, NotificationOutcome]:
        """Confirm a payment and email the other party."""
        settlement = await self._get_for_party(user, settlement_id)
        completed = settlement_ledger.complete_settlement(
            settlement, now or datetime.now(timezone.utc)
        )
        saved = await self._save(completed)

        other = (
            saved.to_user_email
            if user.email == saved.from_user_email
            else saved.from_user_email
        )
        outcome = await run_in_threadpool(
            self.notifier.send_settlement_confirmation,
            SettlementNotification(
                to_email=other,
                to_name=other.split("@")[0],
                from_name=user.display_name,
                amount=float(saved.amount),
                expense_title=await self._expense_title(saved),
                notes=saved.description,
            ),
        )
        return saved, outcome

    async def cancel(self, user: CurrentUser, settlement_id: str) -> Settlement:
        settlement = await self._get_for_party(user, settlement_id)
        return await self._save(settlement_ledger.cancel_settlement(settlement))

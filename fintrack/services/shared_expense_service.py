from typing import List, Tuple

import structlog
from fastapi.concurrency import run_in_threadpool

from fintrack.core.exceptions import InvalidTransitionError, NotFoundError, UnauthorizedError
from fintrack.models.shared_expense import Participant, SharedExpense
from fintrack.models.user import CurrentUser
from fintrack.repositories.group_repo import GroupRepository
from fintrack.repositories.shared_expense_repo import SharedExpenseRepository
from fintrack.schemas.shared_expense import SharedExpenseCreate, SplitRequest
from fintrack.services import access
from fintrack.services.notifications import (
    EmailNotifier,
    ExpenseNotification,
    NotificationOutcome,
    NotificationStatus,
    SettlementNotification,
)
from fintrack.services.settlement_ledger import mark_participant_settled
from fintrack.services.split_calculator import ShareResult, compute_shares
from fintrack.utils.split_validation import validate_split

logger = structlog.get_logger(__name__)


def preview_split(request: SplitRequest) -> List[ShareResult]:
    """Compute shares without validating sums or persisting anything."""
    return compute_shares(request.total_amount, request.split_method, request.share_inputs())


class SharedExpenseService:
    def __init__(
        self,
        expenses: SharedExpenseRepository,
        groups: GroupRepository,
        notifier: EmailNotifier,
    ):
        self.expenses = expenses
        self.groups = groups
        self.notifier = notifier

    @staticmethod
    def _build_participants(request: SharedExpenseCreate) -> List[Participant]:
        inputs = request.share_inputs()
        validate_split(request.total_amount, request.split_method, inputs)
        shares = compute_shares(request.total_amount, request.split_method, inputs)
        return [
            Participant(
                user_email=share.identity,
                user_name=share.name,
                amount_owed=share.amount_owed,
                percentage=float(share.percentage) if share.percentage is not None else None,
                shares=share.shares,
            )
            for share in shares
        ]

    async def create(
        self, owner: CurrentUser, request: SharedExpenseCreate
    ) -> Tuple[SharedExpense, List[NotificationOutcome]]:
        """Create an expense, split it and email every other participant."""
        participants = self._build_participants(request)
        expense = SharedExpense(
            created_by=owner.id,
            creator_email=owner.email,
            creator_name=owner.display_name,
            title=request.title,
            description=request.description,
            total_amount=request.total_amount,
            category=request.category,
            date=request.date,
            split_method=request.split_method,
            group_id=request.group_id,
            participants=participants,
        )
        expense = await self.expenses.insert(expense)
        logger.info(
            "shared_expense_created",
            expense_id=str(expense.id),
            split_method=expense.split_method.value,
            participants=len(participants),
        )

        outcomes = []
        for participant in expense.participants:
            if participant.user_email == owner.email:
                continue
            notification = ExpenseNotification(
                to_email=participant.user_email,
                to_name=participant.user_name,
                from_name=owner.display_name,
                expense_title=expense.title,
                expense_description=expense.description,
                total_amount=float(expense.total_amount),
                amount_owed=float(participant.amount_owed),
                expense_date=expense.date.isoformat(),
                split_method=expense.split_method.value,
            )
            outcomes.append(
                await run_in_threadpool(self.notifier.send_expense_assignment, notification)
            )
        return expense, outcomes

    async def _get_owned(self, owner: CurrentUser, expense_id: str) -> SharedExpense:
        expense = await self.expenses.get(expense_id)
        if expense is None:
            raise NotFoundError("Shared expense not found")
        access.require_creator(owner, expense)
        return expense

    async def update(self, owner: CurrentUser, expense_id: str, request: SharedExpenseCreate) -> SharedExpense:
        """Replace an expense's fields and its whole participant list."""
        existing = await self._get_owned(owner, expense_id)
        participants = self._build_participants(request)

        replacement = SharedExpense(
            id=existing.id,
            created_by=existing.created_by,
            creator_email=existing.creator_email,
            creator_name=existing.creator_name,
            created_at=existing.created_at,
            title=request.title,
            description=request.description,
            total_amount=request.total_amount,
            category=request.category,
            date=request.date,
            split_method=request.split_method,
            group_id=request.group_id,
            participants=participants,
        )

        updated = await self.expenses.replace(replacement)
        if updated is None:
            raise NotFoundError("Shared expense not found")
        logger.info("shared_expense_replaced", expense_id=expense_id, participants=len(participants))
        return updated

    async def delete(self, owner: CurrentUser, expense_id: str) -> None:
        await self._get_owned(owner, expense_id)
        if not await self.expenses.delete(expense_id, owner.id):
            raise NotFoundError("Shared expense not found")
        logger.info("shared_expense_deleted", expense_id=expense_id)

    async def list_for(self, user: CurrentUser) -> List[SharedExpense]:
        return await self.expenses.list_for_user(user.id, user.email)

    async def get(self, user: CurrentUser, expense_id: str) -> SharedExpense:
        expense = await self.expenses.get(expense_id)
        if expense is None:
            raise NotFoundError("Shared expense not found")
        if not await access.can_view_expense(user, expense, self.groups):
            raise UnauthorizedError()
        return expense

    async def settle_participant(
        self, owner: CurrentUser, expense_id: str, participant_id: str, amount_paid
    ) -> Tuple[SharedExpense, NotificationOutcome]:
        """
        Record that a participant paid their share.

        The confirmation email is best effort: its outcome is returned next to
        the updated expense and never undoes the settlement.
        """
        expense = await self._get_owned(owner, expense_id)
        participant = expense.find_participant(participant_id)
        if participant is None:
            raise NotFoundError("Participant not found")

        settled = mark_participant_settled(participant, amount_paid)
        if not await self.expenses.settle_participant(expense_id, settled):
            raise InvalidTransitionError(f"Share of {participant.user_email} is already settled")

        expense.participants = [
            settled if p.id == settled.id else p for p in expense.participants
        ]

        outcome = await run_in_threadpool(
            self.notifier.send_settlement_confirmation,
            SettlementNotification(
                to_email=settled.user_email,
                to_name=settled.user_name,
                from_name=owner.display_name,
                amount=float(settled.amount_paid),
                expense_title=expense.title,
            ),
        )
        if outcome.status == NotificationStatus.FAILED:
            logger.warning(
                "settlement_notification_failed",
                expense_id=expense_id,
                participant_id=participant_id,
                reason=outcome.reason,
            )
        return expense, outcome

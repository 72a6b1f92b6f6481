"""
Group collaboration.

Roles:
- admin: edit or delete the group, add and remove members, delete any entry
- member: read everything, log expenses and investments, delete own entries,
  leave the group

Non-members get NotFoundError for every group operation, so a group's
existence is not disclosed. A group always keeps at least one admin.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

import structlog

from fintrack.core.exceptions import (
    InvalidAmountError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from fintrack.models.group import (
    Group,
    GroupExpense,
    GroupInvestment,
    GroupMember,
    MemberRole,
)
from fintrack.models.user import CurrentUser
from fintrack.repositories.group_repo import GroupRepository
from fintrack.schemas.group import (
    GroupCreate,
    GroupExpenseCreate,
    GroupInvestmentCreate,
    GroupResponse,
    GroupStats,
    GroupUpdate,
    MemberAdd,
)

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def group_stats(
    expenses: Sequence[GroupExpense],
    investments: Sequence[GroupInvestment],
    member_count: int,
    today: date,
) -> GroupStats:
    """Totals over a group's books. Monthly spend covers today's calendar month."""
    monthly = [e for e in expenses if (e.date.year, e.date.month) == (today.year, today.month)]
    return GroupStats(
        total_expenses=sum((e.amount for e in expenses), ZERO),
        monthly_expenses=sum((e.amount for e in monthly), ZERO),
        expense_count=len(expenses),
        total_invested=sum((i.quantity * i.purchase_price for i in investments), ZERO),
        portfolio_value=sum((i.value for i in investments), ZERO),
        investment_count=len(investments),
        member_count=member_count,
    )


def _response(group: Group, role: Optional[MemberRole], member_count: int) -> GroupResponse:
    return GroupResponse.model_validate(group).model_copy(
        update={"member_role": role, "member_count": member_count}
    )


class GroupService:
    def __init__(self, groups: GroupRepository):
        self.groups = groups

    async def _membership(self, user: CurrentUser, group_id: str) -> tuple[Group, GroupMember]:
        group = await self.groups.get(group_id)
        member = await self.groups.get_member(group_id, user.email) if group else None
        if group is None or member is None:
            raise NotFoundError("Group not found")
        return group, member

    async def _admin(self, user: CurrentUser, group_id: str) -> Group:
        group, member = await self._membership(user, group_id)
        if not member.is_admin:
            raise UnauthorizedError("Admin permissions required")
        return group

    async def create_group(self, user: CurrentUser, data: GroupCreate) -> GroupResponse:
        """Create a group with its creator as the first admin."""
        group = await self.groups.create(Group(
            name=data.name,
            description=data.description,
            created_by=user.id,
            group_type=data.group_type,
            currency=data.currency.upper(),
        ))
        await self.groups.add_member(GroupMember(
            group_id=str(group.id),
            user_email=user.email.lower(),
            user_name=user.name or user.email.split("@")[0],
            role=MemberRole.ADMIN,
            invited_by=user.id,
        ))
        logger.info("group_created", group_id=str(group.id), user_id=user.id)
        return _response(group, MemberRole.ADMIN, 1)

    async def list_groups(self, user: CurrentUser) -> List[GroupResponse]:
        """Groups the user is an active member of, with their role and head count."""
        memberships = await self.groups.memberships_for(user.email)
        if not memberships:
            return []
        roles = {m.group_id: m.role for m in memberships}
        group_ids = list(roles)
        groups = await self.groups.list_by_ids(group_ids)
        counts = await self.groups.member_counts(group_ids)
        return [_response(g, roles.get(str(g.id)), counts.get(str(g.id), 0)) for g in groups]

    async def get_group(self, user: CurrentUser, group_id: str) -> GroupResponse:
        group, member = await self._membership(user, group_id)
        counts = await self.groups.member_counts([group_id])
        return _response(group, member.role, counts.get(group_id, 0))

    async def update_group(self, user: CurrentUser, group_id: str, data: GroupUpdate) -> GroupResponse:
        await self._admin(user, group_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if "group_type" in updates:
            updates["group_type"] = updates["group_type"].value
        if "currency" in updates:
            updates["currency"] = updates["currency"].upper()

        group = await self.groups.update(group_id, updates)
        if group is None:
            raise NotFoundError("Group not found")
        return await self.get_group(user, group_id)

    async def delete_group(self, user: CurrentUser, group_id: str) -> None:
        await self._admin(user, group_id)
        if not await self.groups.delete(group_id):
            raise NotFoundError("Group not found")
        logger.info("group_deleted", group_id=group_id, user_id=user.id)

    async def list_members(self, user: CurrentUser, group_id: str) -> List[GroupMember]:
        await self._membership(user, group_id)
        return await self.groups.list_members(group_id)

    async def add_member(self, user: CurrentUser, group_id: str, data: MemberAdd) -> GroupMember:
        await self._admin(user, group_id)
        email = str(data.email).lower()
        if await self.groups.get_member(group_id, email) is not None:
            raise InvalidInputError(f"{email} is already a member of this group")

        member = await self.groups.add_member(GroupMember(
            group_id=group_id,
            user_email=email,
            user_name=data.name,
            role=data.role,
            invited_by=user.id,
        ))
        logger.info("group_member_added", group_id=group_id, member=email, role=data.role.value)
        return member

    async def remove_member(self, user: CurrentUser, group_id: str, email: str) -> None:
        """Admins remove anyone; members may only remove themselves."""
        _, caller = await self._membership(user, group_id)
        email = email.lower()
        if email != caller.user_email and not caller.is_admin:
            raise UnauthorizedError("Admin permissions required")

        members = await self.groups.list_members(group_id)
        target = next((m for m in members if m.user_email == email), None)
        if target is None:
            raise NotFoundError("Member not found")
        if target.is_admin and sum(1 for m in members if m.is_admin) <= 1:
            raise InvalidInputError("Assign another admin before removing the last one")

        await self.groups.remove_member(group_id, email)
        logger.info("group_member_removed", group_id=group_id, member=email, by=user.email)

    async def add_expense(self, user: CurrentUser, group_id: str, data: GroupExpenseCreate) -> GroupExpense:
        await self._membership(user, group_id)
        amount = Decimal(str(data.amount))
        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError(f"Expense amount must be positive, got {data.amount}")
        return await self.groups.add_expense(GroupExpense(
            group_id=group_id,
            created_by=user.id,
            creator_email=user.email,
            title=data.title,
            amount=amount,
            category=data.category,
            description=data.description,
            date=data.date,
        ))

    async def list_expenses(self, user: CurrentUser, group_id: str) -> List[GroupExpense]:
        await self._membership(user, group_id)
        return await self.groups.list_expenses(group_id)

    async def delete_expense(self, user: CurrentUser, group_id: str, expense_id: str) -> None:
        _, member = await self._membership(user, group_id)
        expense = await self.groups.get_expense(group_id, expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        if expense.created_by != user.id and not member.is_admin:
            raise UnauthorizedError()
        await self.groups.delete_expense(group_id, expense_id)

    async def add_investment(
        self, user: CurrentUser, group_id: str, data: GroupInvestmentCreate
    ) -> GroupInvestment:
        await self._membership(user, group_id)
        if data.quantity < 0 or data.purchase_price < 0:
            raise InvalidInputError("Quantity and purchase price cannot be negative")
        return await self.groups.add_investment(GroupInvestment(
            group_id=group_id,
            created_by=user.id,
            symbol=data.symbol.strip().upper(),
            name=data.name,
            quantity=data.quantity,
            purchase_price=data.purchase_price,
            current_price=data.purchase_price,
            purchase_date=data.purchase_date,
            investment_type=data.investment_type,
            notes=data.notes,
        ))

    async def list_investments(self, user: CurrentUser, group_id: str) -> List[GroupInvestment]:
        await self._membership(user, group_id)
        return await self.groups.list_investments(group_id)

    async def delete_investment(self, user: CurrentUser, group_id: str, investment_id: str) -> None:
        _, member = await self._membership(user, group_id)
        investments = await self.groups.list_investments(group_id)
        investment = next((i for i in investments if str(i.id) == investment_id), None)
        if investment is None:
            raise NotFoundError("Investment not found")
        if investment.created_by != user.id and not member.is_admin:
            raise UnauthorizedError()
        await self.groups.delete_investment(group_id, investment_id)

    async def stats(self, user: CurrentUser, group_id: str, today: Optional[date] = None) -> GroupStats:
        await self._membership(user, group_id)
        expenses = await self.groups.list_expenses(group_id)
        investments = await self.groups.list_investments(group_id)
        members = await self.groups.list_members(group_id)
        return group_stats(expenses, investments, len(members), today or date.today())

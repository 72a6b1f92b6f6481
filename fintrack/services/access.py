"""
Capability checks for shared expenses.

Each check is a direct lookup that never calls another check, so they can be
combined freely with ``or`` at the call site.
"""

from fintrack.core.exceptions import UnauthorizedError
from fintrack.models.shared_expense import SharedExpense
from fintrack.models.user import CurrentUser
from fintrack.repositories.group_repo import GroupRepository


def is_creator(user: CurrentUser, expense: SharedExpense) -> bool:
    return expense.created_by == user.id


def is_participant(user: CurrentUser, expense: SharedExpense) -> bool:
    return expense.participant_for(user.email) is not None


async def is_group_member(user: CurrentUser, group_id: str | None, groups: GroupRepository) -> bool:
    if not group_id:
        return False
    return await groups.is_active_member(group_id, user.email)


async def can_view_expense(user: CurrentUser, expense: SharedExpense, groups: GroupRepository) -> bool:
    return (
        is_creator(user, expense)
        or is_participant(user, expense)
        or await is_group_member(user, expense.group_id, groups)
    )


def require_creator(user: CurrentUser, expense: SharedExpense) -> None:
    """Creator-only mutations: edit, delete, settle a participant."""
    if not is_creator(user, expense):
        raise UnauthorizedError()

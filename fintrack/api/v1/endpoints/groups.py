from typing import List
from fastapi import APIRouter, Depends, status
from fintrack.schemas.group import (
    GroupCreate,
    GroupExpenseCreate,
    GroupExpenseResponse,
    GroupInvestmentCreate,
    GroupInvestmentResponse,
    GroupResponse,
    GroupStats,
    GroupUpdate,
    MemberAdd,
    MemberResponse,
)
from fintrack.models.user import CurrentUser
from fintrack.services.group_service import GroupService
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_group_service

router = APIRouter()


@router.get("/", response_model=List[GroupResponse])
async def list_groups(
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Groups the current user belongs to"""
    return await service.list_groups(current_user)


@router.post("/", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_in: GroupCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    return await service.create_group(current_user, group_in)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    return await service.get_group(current_user, group_id)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_in: GroupUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Rename or retype a group (admins only)"""
    return await service.update_group(current_user, group_id, group_in)


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Delete a group and everything logged in it (admins only)"""
    await service.delete_group(current_user, group_id)
    return {"message": "Group deleted successfully"}


@router.get("/{group_id}/members", response_model=List[MemberResponse])
async def list_members(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    return [MemberResponse.model_validate(m) for m in await service.list_members(current_user, group_id)]


@router.post("/{group_id}/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: str,
    member_in: MemberAdd,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    return MemberResponse.model_validate(await service.add_member(current_user, group_id, member_in))


@router.delete("/{group_id}/members/{member_email}")
async def remove_member(
    group_id: str,
    member_email: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Remove a member, or leave the group when removing yourself"""
    await service.remove_member(current_user, group_id, member_email)
    return {"message": "Member removed"}


@router.get("/{group_id}/expenses", response_model=List[GroupExpenseResponse])
async def list_group_expenses(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    expenses = await service.list_expenses(current_user, group_id)
    return [GroupExpenseResponse.model_validate(e) for e in expenses]


@router.post("/{group_id}/expenses", response_model=GroupExpenseResponse, status_code=status.HTTP_201_CREATED)
async def add_group_expense(
    group_id: str,
    expense_in: GroupExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    return GroupExpenseResponse.model_validate(await service.add_expense(current_user, group_id, expense_in))


@router.delete("/{group_id}/expenses/{expense_id}")
async def delete_group_expense(
    group_id: str,
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    await service.delete_expense(current_user, group_id, expense_id)
    return {"message": "Expense deleted successfully"}


@router.get("/{group_id}/investments", response_model=List[GroupInvestmentResponse])
async def list_group_investments(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    investments = await service.list_investments(current_user, group_id)
    return [GroupInvestmentResponse.model_validate(i) for i in investments]


@router.post(
    "/{group_id}/investments",
    response_model=GroupInvestmentResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_group_investment(
    group_id: str,
    investment_in: GroupInvestmentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    investment = await service.add_investment(current_user, group_id, investment_in)
    return GroupInvestmentResponse.model_validate(investment)


@router.delete("/{group_id}/investments/{investment_id}")
async def delete_group_investment(
    group_id: str,
    investment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    await service.delete_investment(current_user, group_id, investment_id)
    return {"message": "Investment deleted successfully"}


@router.get("/{group_id}/stats", response_model=GroupStats)
async def get_group_stats(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Expense and portfolio totals plus head count"""
    return await service.stats(current_user, group_id)

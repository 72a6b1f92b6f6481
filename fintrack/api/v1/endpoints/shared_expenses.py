from typing import List
from fastapi import APIRouter, Depends, status
from fintrack.schemas.shared_expense import (
    SettleParticipantRequest,
    SharedExpenseCreate,
    SharedExpenseResponse,
    SharedExpenseResult,
    SharePreview,
    SplitRequest,
)
from fintrack.models.user import CurrentUser
from fintrack.services.shared_expense_service import SharedExpenseService, preview_split
from fintrack.services.notifications import NotificationOutcome
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_shared_expense_service
from pydantic import BaseModel

router = APIRouter()


class SettleParticipantResult(BaseModel):
    expense: SharedExpenseResponse
    notification: NotificationOutcome


@router.post("/preview", response_model=List[SharePreview])
async def preview_shares(
    request: SplitRequest,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Compute each participant's share without saving anything"""
    return [
        SharePreview(
            user_email=share.identity,
            user_name=share.name,
            amount_owed=share.amount_owed,
            percentage=share.percentage,
            shares=share.shares,
        )
        for share in preview_split(request)
    ]


@router.get("/", response_model=List[SharedExpenseResponse])
async def list_shared_expenses(
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    """Expenses the current user created or takes part in"""
    return [SharedExpenseResponse.model_validate(e) for e in await service.list_for(current_user)]


@router.post("/", response_model=SharedExpenseResult, status_code=status.HTTP_201_CREATED)
async def create_shared_expense(
    expense_in: SharedExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    """Create a shared expense and notify participants"""
    expense, outcomes = await service.create(current_user, expense_in)
    return SharedExpenseResult(
        expense=SharedExpenseResponse.model_validate(expense),
        notifications=outcomes
    )


@router.get("/{expense_id}", response_model=SharedExpenseResponse)
async def get_shared_expense(
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    return SharedExpenseResponse.model_validate(await service.get(current_user, expense_id))


@router.put("/{expense_id}", response_model=SharedExpenseResponse)
async def update_shared_expense(
    expense_id: str,
    expense_in: SharedExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    """Replace an expense and its participants (creator only)"""
    updated = await service.update(current_user, expense_id, expense_in)
    return SharedExpenseResponse.model_validate(updated)


@router.delete("/{expense_id}")
async def delete_shared_expense(
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    await service.delete(current_user, expense_id)
    return {"message": "Shared expense deleted successfully"}


@router.post("/{expense_id}/participants/{participant_id}/settle", response_model=SettleParticipantResult)
async def settle_participant(
    expense_id: str,
    participant_id: str,
    request: SettleParticipantRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: SharedExpenseService = Depends(get_shared_expense_service)
):
    """Mark one participant's share as paid (creator only)"""
    expense, outcome = await service.settle_participant(
        current_user, expense_id, participant_id, request.amount_paid
    )
    return SettleParticipantResult(
        expense=SharedExpenseResponse.model_validate(expense),
        notification=outcome
    )

from typing import List
from fastapi import APIRouter, Depends, status
from fintrack.schemas.settlement import SettlementCreate, SettlementResponse, SettlementResult
from fintrack.models.user import CurrentUser
from fintrack.services.settlement_service import SettlementService
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_settlement_service

router = APIRouter()


@router.get("/", response_model=List[SettlementResponse])
async def list_settlements(
    current_user: CurrentUser = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service)
):
    """Settlements the current user pays or receives"""
    return [SettlementResponse.model_validate(s) for s in await service.list_for(current_user)]


@router.post("/", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(
    settlement_in: SettlementCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service)
):
    """Record a pending payment from the current user"""
    return SettlementResponse.model_validate(await service.create(current_user, settlement_in))


@router.post("/{settlement_id}/complete", response_model=SettlementResult)
async def complete_settlement(
    settlement_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service)
):
    settlement, outcome = await service.complete(current_user, settlement_id)
    return SettlementResult(
        settlement=SettlementResponse.model_validate(settlement),
        notification=outcome
    )


@router.post("/{settlement_id}/cancel", response_model=SettlementResponse)
async def cancel_settlement(
    settlement_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service)
):
    return SettlementResponse.model_validate(await service.cancel(current_user, settlement_id))

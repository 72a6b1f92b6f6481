from decimal import Decimal
from fastapi import APIRouter, Depends
from fintrack.schemas.balance import BalancesResponse
from fintrack.models.user import CurrentUser
from fintrack.services.balance_service import BalanceService
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_balance_service

router = APIRouter()


@router.get("/", response_model=BalancesResponse)
async def get_balances(
    current_user: CurrentUser = Depends(get_current_user),
    service: BalanceService = Depends(get_balance_service)
):
    """Net balance with every counterparty"""
    balances = await service.balances_for(current_user)
    return BalancesResponse(
        balances=balances,
        total_owed_to_you=sum((b.net_amount for b in balances if b.net_amount > 0), Decimal("0")),
        total_you_owe=sum((-b.net_amount for b in balances if b.net_amount < 0), Decimal("0")),
    )

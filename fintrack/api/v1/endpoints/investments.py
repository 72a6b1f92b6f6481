from typing import Dict, List
from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from fintrack.schemas.investment import (
    InvestmentCreate,
    InvestmentResponse,
    InvestmentSummary,
    InvestmentUpdate,
    PriceRefreshResponse,
    SymbolValidation,
    TransactionCreate,
    TransactionResponse,
)
from fintrack.models.user import CurrentUser
from fintrack.services.investment_service import InvestmentService
from fintrack.services.quotes import QuoteClient
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_investment_service, get_quote_client

router = APIRouter()


@router.get("/", response_model=List[InvestmentResponse])
async def list_investments(
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    return [InvestmentResponse.model_validate(i) for i in await service.list_for(current_user)]


@router.post("/", response_model=InvestmentResponse, status_code=status.HTTP_201_CREATED)
async def create_investment(
    investment_in: InvestmentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    return InvestmentResponse.model_validate(await service.create(current_user, investment_in))


@router.get("/summary", response_model=InvestmentSummary)
async def get_summary(
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    """Portfolio value, gain/loss and best/worst performers"""
    return await service.summary(current_user)


@router.post("/refresh-prices", response_model=PriceRefreshResponse)
async def refresh_prices(
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    """Fetch fresh quotes for every held symbol, one at a time"""
    return await service.refresh_prices(current_user)


@router.get("/search", response_model=List[Dict[str, str]])
async def search_symbols(
    keywords: str = Query(..., min_length=1),
    current_user: CurrentUser = Depends(get_current_user),
    quotes: QuoteClient = Depends(get_quote_client)
):
    return await run_in_threadpool(quotes.search_symbols, keywords)


@router.get("/validate/{symbol}", response_model=SymbolValidation)
async def validate_symbol(
    symbol: str,
    current_user: CurrentUser = Depends(get_current_user),
    quotes: QuoteClient = Depends(get_quote_client)
):
    symbol = symbol.strip().upper()
    return SymbolValidation(symbol=symbol, valid=await run_in_threadpool(quotes.validate_symbol, symbol))


@router.patch("/{investment_id}", response_model=InvestmentResponse)
async def update_investment(
    investment_id: str,
    investment_in: InvestmentUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    updated = await service.update(current_user, investment_id, investment_in)
    return InvestmentResponse.model_validate(updated)


@router.delete("/{investment_id}")
async def delete_investment(
    investment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    """Delete an investment and its transactions"""
    await service.delete(current_user, investment_id)
    return {"message": "Investment deleted successfully"}


@router.get("/{investment_id}/transactions", response_model=List[TransactionResponse])
async def list_transactions(
    investment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    transactions = await service.list_transactions(current_user, investment_id)
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.post(
    "/{investment_id}/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_transaction(
    investment_id: str,
    transaction_in: TransactionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: InvestmentService = Depends(get_investment_service)
):
    """Record a buy or sell"""
    transaction = await service.add_transaction(current_user, investment_id, transaction_in)
    return TransactionResponse.model_validate(transaction)

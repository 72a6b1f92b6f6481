from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fintrack.models.base import Amount, PyObjectId
from fintrack.models.investment import InvestmentType, PriceUpdateResult, TransactionType


class InvestmentCreate(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: float
    purchase_price: float
    purchase_date: date_type
    investment_type: InvestmentType = InvestmentType.STOCK
    notes: Optional[str] = None


class InvestmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    quantity: Optional[float] = None
    purchase_price: Optional[float] = None
    current_price: Optional[float] = None
    investment_type: Optional[InvestmentType] = None
    notes: Optional[str] = None


class InvestmentResponse(BaseModel):
    id: PyObjectId
    symbol: str
    name: str
    quantity: Amount
    purchase_price: Amount
    current_price: Amount
    purchase_date: date_type
    investment_type: InvestmentType
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionCreate(BaseModel):
    transaction_type: TransactionType
    quantity: float
    price_per_share: float
    transaction_date: date_type
    fees: float = 0
    notes: Optional[str] = None


class TransactionResponse(BaseModel):
    id: PyObjectId
    investment_id: str
    transaction_type: TransactionType
    quantity: Amount
    price_per_share: Amount
    total_amount: Amount
    transaction_date: date_type
    fees: Amount
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InvestmentSummary(BaseModel):
    total_value: Amount
    total_invested: Amount
    total_gain_loss: Amount
    total_gain_loss_percent: Amount
    top_performer: Optional[InvestmentResponse] = None
    worst_performer: Optional[InvestmentResponse] = None


class PriceRefreshResponse(BaseModel):
    results: List[PriceUpdateResult]
    updated: int
    rate_limited: bool = False


class SymbolValidation(BaseModel):
    symbol: str
    valid: bool

"""
Investment models.

Quantity is derived: once transactions exist it always equals
max(0, bought - sold).
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from fintrack.models.base import Amount, IsoDate, MongoModel


class InvestmentType(str, Enum):
    STOCK = "stock"
    BOND = "bond"
    CRYPTO = "crypto"
    ETF = "etf"
    MUTUAL_FUND = "mutual_fund"
    OTHER = "other"


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"


class Investment(MongoModel):
    user_id: str
    symbol: str
    name: str
    quantity: Amount
    purchase_price: Amount
    current_price: Amount
    purchase_date: IsoDate
    investment_type: InvestmentType = InvestmentType.STOCK
    notes: Optional[str] = None


class InvestmentTransaction(MongoModel):
    investment_id: str
    transaction_type: TransactionType
    quantity: Amount
    price_per_share: Amount
    total_amount: Amount
    transaction_date: IsoDate
    fees: Amount = Decimal("0")
    notes: Optional[str] = None


class Quote(BaseModel):
    symbol: str
    price: float
    change: float
    change_percent: float
    last_trading_day: Optional[str] = None


class PriceUpdateResult(BaseModel):
    symbol: str
    old_price: float
    new_price: float
    change: float
    change_percent: float
    success: bool
    error: Optional[str] = None

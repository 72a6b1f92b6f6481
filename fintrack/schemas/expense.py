from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fintrack.models.base import Amount, PyObjectId


class ExpenseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    amount: float
    category: str = "other"
    description: Optional[str] = None
    date: date_type


class ExpenseResponse(BaseModel):
    id: PyObjectId
    title: str
    amount: Amount
    category: str
    description: Optional[str] = None
    date: date_type
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TrendAnalysis(BaseModel):
    trend: str  # increasing | decreasing | stable
    change_percent: float
    average_daily: float
    average_weekly: float
    average_monthly: float


class ExpensePrediction(BaseModel):
    date: date_type
    predicted_amount: float
    category: Optional[str] = None
    confidence: float
    type: str  # monthly | category


class PredictionsResponse(BaseModel):
    monthly: ExpensePrediction
    categories: List[ExpensePrediction]
    trends: TrendAnalysis

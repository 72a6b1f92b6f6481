from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from fintrack.models.base import Amount, PyObjectId
from fintrack.models.shared_expense import SplitMethod
from fintrack.services.notifications import NotificationOutcome
from fintrack.services.split_calculator import ShareInput


class ParticipantIn(BaseModel):
    user_email: EmailStr
    user_name: str = Field(..., min_length=1, max_length=100)
    percentage: Optional[float] = None
    shares: Optional[int] = None
    amount_owed: Optional[float] = None  # custom splits only

    def to_share_input(self) -> ShareInput:
        return ShareInput(
            identity=self.user_email.lower(),
            name=self.user_name,
            percentage=self.percentage,
            shares=self.shares,
            custom_amount=self.amount_owed,
        )


class SplitRequest(BaseModel):
    total_amount: float
    split_method: SplitMethod
    participants: List[ParticipantIn]

    def share_inputs(self) -> List[ShareInput]:
        return [p.to_share_input() for p in self.participants]


class SharedExpenseCreate(SplitRequest):
    """Create or fully replace a shared expense."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = "other"
    date: date_type
    group_id: Optional[str] = None


class SettleParticipantRequest(BaseModel):
    amount_paid: float


class SharePreview(BaseModel):
    user_email: str
    user_name: str
    amount_owed: Amount
    percentage: Optional[Amount] = None
    shares: Optional[int] = None


class ParticipantResponse(BaseModel):
    id: PyObjectId
    user_email: str
    user_name: str
    amount_owed: Amount
    amount_paid: Amount
    percentage: Optional[float] = None
    shares: Optional[int] = None
    is_settled: bool

    model_config = ConfigDict(from_attributes=True)


class SharedExpenseResponse(BaseModel):
    id: PyObjectId
    created_by: str
    creator_email: str
    title: str
    description: Optional[str] = None
    total_amount: Amount
    category: str
    date: date_type
    split_method: SplitMethod
    currency: str
    group_id: Optional[str] = None
    is_settled: bool
    participants: List[ParticipantResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SharedExpenseResult(BaseModel):
    """An expense plus what happened to the emails sent about it."""
    expense: SharedExpenseResponse
    notifications: List[NotificationOutcome] = []

from pydantic import BaseModel, ConfigDict, EmailStr
from datetime import datetime
from typing import Optional

from fintrack.models.base import Amount, PyObjectId
from fintrack.models.settlement import SettlementStatus
from fintrack.services.notifications import NotificationOutcome

class SettlementCreate(BaseModel):
    to_user_email: EmailStr
    amount: float
    shared_expense_id: Optional[str] = None
    description: Optional[str] = None

class SettlementResponse(BaseModel):
    id: PyObjectId
    from_user_email: str
    to_user_email: str
    amount: Amount
    shared_expense_id: Optional[str] = None
    description: Optional[str] = None
    status: SettlementStatus
    settled_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class SettlementResult(BaseModel):
    settlement: SettlementResponse
    notification: Optional[NotificationOutcome] = None

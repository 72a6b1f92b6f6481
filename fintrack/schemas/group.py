from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from fintrack.models.base import Amount, PyObjectId
from fintrack.models.group import GroupType, MemberRole, MemberStatus
from fintrack.models.investment import InvestmentType


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    group_type: GroupType = GroupType.OTHER
    currency: str = Field("USD", min_length=3, max_length=3)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    group_type: Optional[GroupType] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class GroupResponse(BaseModel):
    id: PyObjectId
    name: str
    description: Optional[str] = None
    created_by: str
    group_type: GroupType
    currency: str
    created_at: datetime
    updated_at: datetime
    member_role: Optional[MemberRole] = None
    member_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class MemberAdd(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    role: MemberRole = MemberRole.MEMBER


class MemberResponse(BaseModel):
    id: PyObjectId
    group_id: str
    user_email: str
    user_name: str
    role: MemberRole
    status: MemberStatus
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupExpenseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    amount: float
    category: str = "other"
    description: Optional[str] = None
    date: date_type


class GroupExpenseResponse(BaseModel):
    id: PyObjectId
    group_id: str
    created_by: str
    creator_email: str
    title: str
    amount: Amount
    category: str
    description: Optional[str] = None
    date: date_type
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupInvestmentCreate(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: float
    purchase_price: float
    purchase_date: date_type
    investment_type: InvestmentType = InvestmentType.STOCK
    notes: Optional[str] = None


class GroupInvestmentResponse(BaseModel):
    id: PyObjectId
    group_id: str
    created_by: str
    symbol: str
    name: str
    quantity: Amount
    purchase_price: Amount
    current_price: Amount
    purchase_date: date_type
    investment_type: InvestmentType
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupStats(BaseModel):
    total_expenses: Amount
    monthly_expenses: Amount
    expense_count: int
    total_invested: Amount
    portfolio_value: Amount
    investment_count: int
    member_count: int

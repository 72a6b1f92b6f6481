"""
Groups and their shared books.

A group owns its own expense log and investment portfolio. Members are keyed
by email so people can be added before they sign up.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from fintrack.models.base import Amount, IsoDate, MongoModel, _utcnow
from fintrack.models.investment import InvestmentType


class GroupType(str, Enum):
    FAMILY = "family"
    FRIENDS = "friends"
    ROOMMATES = "roommates"
    TEAM = "team"
    OTHER = "other"


class MemberRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Group(MongoModel):
    name: str
    description: Optional[str] = None
    created_by: str
    group_type: GroupType = GroupType.OTHER
    currency: str = "USD"


class GroupMember(MongoModel):
    group_id: str
    user_email: str
    user_name: str
    role: MemberRole = MemberRole.MEMBER
    status: MemberStatus = MemberStatus.ACTIVE
    invited_by: Optional[str] = None
    joined_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN


class GroupExpense(MongoModel):
    group_id: str
    created_by: str
    creator_email: str
    title: str
    amount: Amount
    category: str = "other"
    description: Optional[str] = None
    date: IsoDate


class GroupInvestment(MongoModel):
    group_id: str
    created_by: str
    symbol: str
    name: str
    quantity: Amount
    purchase_price: Amount
    current_price: Amount
    purchase_date: IsoDate
    investment_type: InvestmentType = InvestmentType.STOCK
    notes: Optional[str] = None

    @property
    def value(self) -> Decimal:
        return self.quantity * self.current_price

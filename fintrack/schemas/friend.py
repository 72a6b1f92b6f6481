from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime

from fintrack.models.base import PyObjectId


class FriendCreate(BaseModel):
    friend_email: EmailStr
    friend_name: str = Field(..., min_length=1, max_length=100)


class FriendResponse(BaseModel):
    id: PyObjectId
    friend_email: str
    friend_name: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

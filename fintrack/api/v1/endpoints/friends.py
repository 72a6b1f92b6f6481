from typing import List
from fastapi import APIRouter, Depends, status
from fintrack.schemas.friend import FriendCreate, FriendResponse
from fintrack.models.user import CurrentUser
from fintrack.repositories.friend_repo import FriendRepository
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_friend_repo

router = APIRouter()


@router.get("/", response_model=List[FriendResponse])
async def list_friends(
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendRepository = Depends(get_friend_repo)
):
    """List accepted friends"""
    return [FriendResponse.model_validate(f) for f in await friends.list_friends(current_user.id)]


@router.post("/", response_model=FriendResponse, status_code=status.HTTP_201_CREATED)
async def add_friend(
    friend_in: FriendCreate,
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendRepository = Depends(get_friend_repo)
):
    """Add a friend by email"""
    friend = await friends.add_friend(current_user.id, friend_in.friend_email, friend_in.friend_name)
    return FriendResponse.model_validate(friend)

from fastapi import APIRouter, Depends, HTTPException, status
from fintrack.schemas.auth import UserSignup, UserLogin, TokenResponse
from fintrack.models.user import CurrentUser, UserCreate, UserResponse
from fintrack.repositories.user_repo import UserRepository
from fintrack.core.auth import create_access_token, get_current_user
from fintrack.core.security import verify_password
from fintrack.api.deps import get_user_repo

router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserSignup, users: UserRepository = Depends(get_user_repo)):
    """Register a new user"""
    if await users.get_user_by_email(user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = await users.create_user(UserCreate(**user_data.model_dump()))
    user_id = str(user._id)
    return TokenResponse(
        access_token=create_access_token(user_id, user.email),
        user=UserResponse(id=user_id, name=user.name, email=user.email, created_at=user.created_at)
    )


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin, users: UserRepository = Depends(get_user_repo)):
    """Login with email and password"""
    user = await users.get_user_by_email(credentials.email)
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    user_id = str(user._id)
    return TokenResponse(
        access_token=create_access_token(user_id, user.email),
        user=UserResponse(id=user_id, name=user.name, email=user.email, created_at=user.created_at)
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser = Depends(get_current_user)):
    """Get current user information"""
    return UserResponse(id=current_user.id, name=current_user.display_name, email=current_user.email)

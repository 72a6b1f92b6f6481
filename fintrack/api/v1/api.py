from fastapi import APIRouter
from fintrack.api.v1.endpoints import (
    auth,
    balances,
    expenses,
    friends,
    groups,
    investments,
    settlements,
    shared_expenses,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(friends.router, prefix="/friends", tags=["friends"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(shared_expenses.router, prefix="/shared-expenses", tags=["shared expenses"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(investments.router, prefix="/investments", tags=["investments"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from fintrack.schemas.expense import ExpenseCreate, ExpenseResponse, PredictionsResponse
from fintrack.models.user import CurrentUser
from fintrack.services.prediction_service import PredictionService
from fintrack.core.auth import get_current_user
from fintrack.api.deps import get_prediction_service

router = APIRouter()


@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(
    current_user: CurrentUser = Depends(get_current_user),
    service: PredictionService = Depends(get_prediction_service)
):
    return [ExpenseResponse.model_validate(e) for e in await service.list_expenses(current_user)]


@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def log_expense(
    expense_in: ExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: PredictionService = Depends(get_prediction_service)
):
    return ExpenseResponse.model_validate(await service.log_expense(current_user, expense_in))


@router.get("/predictions", response_model=PredictionsResponse)
async def get_predictions(
    current_user: CurrentUser = Depends(get_current_user),
    service: PredictionService = Depends(get_prediction_service)
):
    """Spending trend plus monthly and per-category forecasts"""
    return await service.predictions(current_user)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PredictionService = Depends(get_prediction_service)
):
    if not await service.delete_expense(current_user, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return {"message": "Expense deleted successfully"}

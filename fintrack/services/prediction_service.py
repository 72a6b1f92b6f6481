"""
Expense forecasting.

A naive linear model over the user's own expense log:
- trend: last 30 days against the 30 before, +/-5% counts as a change
- monthly: spend so far this month plus the daily average projected over the
  remaining days, nudged by half the trend
- categories: mean expense per category (last 60 days) times four
"""

import calendar
import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

import structlog

from fintrack.core.exceptions import InvalidInputError
from fintrack.models.expense import Expense
from fintrack.models.user import CurrentUser
from fintrack.repositories.expense_repo import ExpenseRepository
from fintrack.schemas.expense import (
    ExpenseCreate,
    ExpensePrediction,
    PredictionsResponse,
    TrendAnalysis,
)

logger = structlog.get_logger(__name__)

MIN_EXPENSES_FOR_TREND = 7
MIN_EXPENSES_PER_CATEGORY = 3
TREND_THRESHOLD_PERCENT = 5.0


def _total(expenses: Sequence[Expense]) -> float:
    return sum(float(e.amount) for e in expenses)


def analyze_trends(expenses: Sequence[Expense], today: date) -> TrendAnalysis:
    window = [e for e in expenses if e.date >= today - timedelta(days=90)]
    if len(window) < MIN_EXPENSES_FOR_TREND:
        return TrendAnalysis(
            trend="stable",
            change_percent=0.0,
            average_daily=0.0,
            average_weekly=0.0,
            average_monthly=0.0,
        )

    recent_start = today - timedelta(days=30)
    previous_start = today - timedelta(days=60)
    recent_avg = _total([e for e in window if e.date >= recent_start]) / 30
    previous_avg = _total([e for e in window if previous_start <= e.date < recent_start]) / 30

    change_percent = (recent_avg - previous_avg) / previous_avg * 100 if previous_avg > 0 else 0.0
    trend = "stable"
    if abs(change_percent) > TREND_THRESHOLD_PERCENT:
        trend = "increasing" if change_percent > 0 else "decreasing"

    first_day = min(e.date for e in window)
    daily = _total(window) / max((today - first_day).days, 1)
    return TrendAnalysis(
        trend=trend,
        change_percent=change_percent,
        average_daily=daily,
        average_weekly=daily * 7,
        average_monthly=daily * 30,
    )


def predict_monthly(expenses: Sequence[Expense], today: date, trends: TrendAnalysis) -> ExpensePrediction:
    month_start = today.replace(day=1)
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    month_end = today.replace(day=days_in_month)
    days_passed = (today - month_start).days + 1

    spent = _total([e for e in expenses if month_start <= e.date <= today])
    daily_average = spent / days_passed
    remaining_days = days_in_month - days_passed

    multiplier = 1.0
    if trends.trend == "increasing":
        multiplier = 1 + abs(trends.change_percent) / 100 * 0.5
    elif trends.trend == "decreasing":
        multiplier = 1 - abs(trends.change_percent) / 100 * 0.5

    confidence = 0.7
    if days_passed >= 7:
        confidence += 0.1
    if days_passed >= 15:
        confidence += 0.1
    if abs(trends.change_percent) < 10:
        confidence += 0.1

    return ExpensePrediction(
        date=month_end,
        predicted_amount=spent + daily_average * remaining_days * multiplier,
        confidence=min(confidence, 0.95),
        type="monthly",
    )


def predict_categories(expenses: Sequence[Expense], today: date) -> List[ExpensePrediction]:
    since = today - timedelta(days=60)
    by_category: Dict[str, List[float]] = defaultdict(list)
    for e in expenses:
        if e.date >= since:
            by_category[e.category].append(float(e.amount))

    predictions = []
    for category, amounts in by_category.items():
        if len(amounts) < MIN_EXPENSES_PER_CATEGORY:
            continue
        average = sum(amounts) / len(amounts)
        variance = sum((a - average) ** 2 for a in amounts) / len(amounts)
        confidence = max(0.3, 1 - math.sqrt(variance) / average) if average > 0 else 0.3
        predictions.append(ExpensePrediction(
            date=today + timedelta(days=30),
            predicted_amount=average * 4,
            category=category,
            confidence=min(confidence, 0.9),
            type="category",
        ))

    return sorted(predictions, key=lambda p: p.predicted_amount, reverse=True)


class PredictionService:
    def __init__(self, expenses: ExpenseRepository):
        self.expenses = expenses

    async def log_expense(self, user: CurrentUser, data: ExpenseCreate) -> Expense:
        if data.amount <= 0:
            raise InvalidInputError(f"Expense amount must be positive, got {data.amount}")
        return await self.expenses.create(Expense(
            user_id=user.id,
            title=data.title,
            amount=data.amount,
            category=data.category,
            description=data.description,
            date=data.date,
        ))

    async def list_expenses(self, user: CurrentUser) -> List[Expense]:
        return await self.expenses.list_for_user(user.id)

    async def delete_expense(self, user: CurrentUser, expense_id: str) -> bool:
        return await self.expenses.delete(expense_id, user.id)

    async def predictions(self, user: CurrentUser, today: Optional[date] = None) -> PredictionsResponse:
        """Run every forecast and store the results."""
        today = today or date.today()
        history = await self.expenses.list_for_user(user.id, since=today - timedelta(days=90))

        trends = analyze_trends(history, today)
        monthly = predict_monthly(history, today, trends)
        categories = predict_categories(history, today)

        await self.expenses.save_predictions(user.id, [monthly, *categories])
        logger.info("predictions_generated", user_id=user.id, categories=len(categories))
        return PredictionsResponse(monthly=monthly, categories=categories, trends=trends)

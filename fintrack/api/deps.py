"""Service factories wired through FastAPI's dependency injection."""

from fastapi import Depends

from fintrack.db.mongo import get_db
from fintrack.repositories.expense_repo import ExpenseRepository
from fintrack.repositories.friend_repo import FriendRepository
from fintrack.repositories.group_repo import GroupRepository
from fintrack.repositories.investment_repo import InvestmentRepository
from fintrack.repositories.settlement_repo import SettlementRepository
from fintrack.repositories.shared_expense_repo import SharedExpenseRepository
from fintrack.repositories.user_repo import UserRepository
from fintrack.services.balance_service import BalanceService
from fintrack.services.group_service import GroupService
from fintrack.services.investment_service import InvestmentService
from fintrack.services.notifications import EmailNotifier
from fintrack.services.prediction_service import PredictionService
from fintrack.services.quotes import QuoteClient
from fintrack.services.settlement_service import SettlementService
from fintrack.services.shared_expense_service import SharedExpenseService


def get_notifier() -> EmailNotifier:
    return EmailNotifier()


def get_quote_client() -> QuoteClient:
    return QuoteClient()


def get_user_repo(db=Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_friend_repo(db=Depends(get_db)) -> FriendRepository:
    return FriendRepository(db)


def get_shared_expense_service(
    db=Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
) -> SharedExpenseService:
    return SharedExpenseService(SharedExpenseRepository(db), GroupRepository(db), notifier)


def get_settlement_service(
    db=Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
) -> SettlementService:
    return SettlementService(SettlementRepository(db), SharedExpenseRepository(db), notifier)


def get_balance_service(db=Depends(get_db)) -> BalanceService:
    return BalanceService(SharedExpenseRepository(db), UserRepository(db))


def get_group_service(db=Depends(get_db)) -> GroupService:
    return GroupService(GroupRepository(db))


def get_investment_service(
    db=Depends(get_db),
    quotes: QuoteClient = Depends(get_quote_client),
) -> InvestmentService:
    return InvestmentService(InvestmentRepository(db), quotes)


def get_prediction_service(db=Depends(get_db)) -> PredictionService:
    return PredictionService(ExpenseRepository(db))

import asyncio
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional

import structlog
from fastapi.concurrency import run_in_threadpool

from fintrack.core.config import settings
from fintrack.core.exceptions import (
    ExternalServiceError,
    InvalidInputError,
    NotFoundError,
    RateLimitError,
)
from fintrack.models.investment import (
    Investment,
    InvestmentTransaction,
    PriceUpdateResult,
    TransactionType,
)
from fintrack.models.user import CurrentUser
from fintrack.repositories.investment_repo import InvestmentRepository
from fintrack.schemas.investment import (
    InvestmentCreate,
    InvestmentResponse,
    InvestmentSummary,
    InvestmentUpdate,
    PriceRefreshResponse,
    TransactionCreate,
)
from fintrack.services.quotes import QuoteClient

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def _non_negative(field: str, value) -> None:
    if value is not None and value < 0:
        raise InvalidInputError(f"{field} cannot be negative: {value}")


def summarize(investments: List[Investment]) -> InvestmentSummary:
    """Portfolio totals plus best and worst performer by gain percent."""
    total_value = ZERO
    total_invested = ZERO
    top = worst = None
    best_pct = worst_pct = None

    for investment in investments:
        current_value = investment.quantity * investment.current_price
        invested = investment.quantity * investment.purchase_price
        gain_pct = (current_value - invested) / invested * 100 if invested > 0 else ZERO

        total_value += current_value
        total_invested += invested

        if best_pct is None or gain_pct > best_pct:
            best_pct, top = gain_pct, investment
        if worst_pct is None or gain_pct < worst_pct:
            worst_pct, worst = gain_pct, investment

    gain_loss = total_value - total_invested
    return InvestmentSummary(
        total_value=total_value,
        total_invested=total_invested,
        total_gain_loss=gain_loss,
        total_gain_loss_percent=gain_loss / total_invested * 100 if total_invested > 0 else ZERO,
        top_performer=InvestmentResponse.model_validate(top) if top else None,
        worst_performer=InvestmentResponse.model_validate(worst) if worst else None,
    )


class InvestmentService:
    def __init__(
        self,
        investments: InvestmentRepository,
        quotes: QuoteClient,
        request_delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.investments = investments
        self.quotes = quotes
        self.request_delay = (
            settings.QUOTE_REQUEST_DELAY_SECONDS if request_delay is None else request_delay
        )
        self.sleep = sleep

    async def create(self, user: CurrentUser, data: InvestmentCreate) -> Investment:
        _non_negative("Quantity", data.quantity)
        _non_negative("Purchase price", data.purchase_price)
        investment = Investment(
            user_id=user.id,
            symbol=data.symbol.strip().upper(),
            name=data.name,
            quantity=data.quantity,
            purchase_price=data.purchase_price,
            current_price=data.purchase_price,
            purchase_date=data.purchase_date,
            investment_type=data.investment_type,
            notes=data.notes,
        )
        return await self.investments.create(investment)

    async def list_for(self, user: CurrentUser) -> List[Investment]:
        return await self.investments.list_for_user(user.id)

    async def _get(self, user: CurrentUser, investment_id: str) -> Investment:
        investment = await self.investments.get(investment_id, user.id)
        if investment is None:
            raise NotFoundError("Investment not found")
        return investment

    async def update(self, user: CurrentUser, investment_id: str, data: InvestmentUpdate) -> Investment:
        updates = data.model_dump(exclude_unset=True)
        for field in ("quantity", "purchase_price", "current_price"):
            _non_negative(field.replace("_", " ").capitalize(), updates.get(field))
        if "investment_type" in updates and updates["investment_type"] is not None:
            updates["investment_type"] = updates["investment_type"].value

        updated = await self.investments.update(investment_id, user.id, updates)
        if updated is None:
            raise NotFoundError("Investment not found")
        return updated

    async def delete(self, user: CurrentUser, investment_id: str) -> None:
        if not await self.investments.delete(investment_id, user.id):
            raise NotFoundError("Investment not found")

    async def list_transactions(self, user: CurrentUser, investment_id: str) -> List[InvestmentTransaction]:
        await self._get(user, investment_id)
        return await self.investments.list_transactions(investment_id)

    async def add_transaction(
        self, user: CurrentUser, investment_id: str, data: TransactionCreate
    ) -> InvestmentTransaction:
        """Record a buy or sell, then recompute the holding's quantity."""
        await self._get(user, investment_id)
        _non_negative("Fees", data.fees)
        if data.quantity <= 0:
            raise InvalidInputError(f"Quantity must be positive, got {data.quantity}")
        _non_negative("Price", data.price_per_share)

        quantity = Decimal(str(data.quantity))
        price = Decimal(str(data.price_per_share))
        transaction = await self.investments.add_transaction(InvestmentTransaction(
            investment_id=investment_id,
            transaction_type=data.transaction_type,
            quantity=quantity,
            price_per_share=price,
            total_amount=quantity * price,
            transaction_date=data.transaction_date,
            fees=data.fees,
            notes=data.notes,
        ))

        history = await self.investments.list_transactions(investment_id)
        held = sum(
            (t.quantity if t.transaction_type == TransactionType.BUY else -t.quantity for t in history),
            ZERO,
        )
        await self.investments.update(investment_id, user.id, {"quantity": float(max(ZERO, held))})
        return transaction

    async def summary(self, user: CurrentUser) -> InvestmentSummary:
        return summarize(await self.investments.list_for_user(user.id))

    async def refresh_prices(self, user: CurrentUser) -> PriceRefreshResponse:
        """
        Fetch a fresh quote for every distinct symbol the user holds.

        Lookups run one at a time with a fixed pause between them. A symbol
        that fails keeps its old price and the batch carries on.
        """
        investments = await self.investments.list_for_user(user.id)
        symbols = list(dict.fromkeys(inv.symbol for inv in investments))
        results: List[PriceUpdateResult] = []
        rate_limited = False

        for index, symbol in enumerate(symbols):
            holdings = [inv for inv in investments if inv.symbol == symbol]
            try:
                quote = await run_in_threadpool(self.quotes.get_quote, symbol)
            except (ExternalServiceError, NotFoundError) as e:
                rate_limited = rate_limited or isinstance(e, RateLimitError)
                logger.warning("quote_refresh_failed", symbol=symbol, error=str(e))
                results.extend(self._failed(inv, str(e)) for inv in holdings)
            else:
                for inv in holdings:
                    results.append(await self._apply_quote(inv, quote.price))

            if index < len(symbols) - 1:
                await self.sleep(self.request_delay)

        updated = sum(1 for r in results if r.success)
        logger.info("prices_refreshed", symbols=len(symbols), updated=updated)
        return PriceRefreshResponse(results=results, updated=updated, rate_limited=rate_limited)

    @staticmethod
    def _failed(investment: Investment, error: str) -> PriceUpdateResult:
        old = float(investment.current_price)
        return PriceUpdateResult(
            symbol=investment.symbol,
            old_price=old,
            new_price=old,
            change=0.0,
            change_percent=0.0,
            success=False,
            error=error,
        )

    async def _apply_quote(self, investment: Investment, price: float) -> PriceUpdateResult:
        if not await self.investments.set_current_price(investment.id, price):
            return self._failed(investment, "Database update failed")

        old = float(investment.current_price)
        change = price - old
        return PriceUpdateResult(
            symbol=investment.symbol,
            old_price=old,
            new_price=price,
            change=change,
            change_percent=(change / old * 100) if old > 0 else 0.0,
            success=True,
        )

"""
Alpha Vantage quote lookups.

The free tier allows 5 requests per minute. This client makes exactly one
HTTP request per call; pacing a batch of lookups is the caller's job (see
InvestmentService.refresh_prices).

Error mapping:
- "Error Message" in the payload       -> NotFoundError
- "Note" / "Information" in the payload -> RateLimitError
- transport failure or HTTP error        -> ExternalServiceError
- unparseable numeric field             -> ExternalServiceError
"""

import math
from typing import Dict, List, Optional

import requests
import structlog

from fintrack.core.config import settings
from fintrack.core.exceptions import ExternalServiceError, NotFoundError, RateLimitError
from fintrack.models.investment import Quote

logger = structlog.get_logger(__name__)

MAX_SEARCH_RESULTS = 10


def _parse_float(raw: Optional[str]) -> float:
    if raw is None or raw == "":
        return 0.0
    value = float(str(raw).replace("%", "").strip())
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {raw!r}")
    return value


class QuoteClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.ALPHA_VANTAGE_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.ALPHA_VANTAGE_URL
        self.timeout = timeout or settings.QUOTE_TIMEOUT_SECONDS

    def _query(self, params: Dict[str, str]) -> Dict:
        if not self.api_key:
            raise ExternalServiceError("Quote service is not configured")

        try:
            response = requests.get(
                self.base_url,
                params={**params, "apikey": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ExternalServiceError(f"Alpha Vantage request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Alpha Vantage returned invalid JSON") from e

        if "Error Message" in data:
            raise NotFoundError(f"Alpha Vantage: {data['Error Message']}")
        if "Note" in data or "Information" in data:
            raise RateLimitError("Alpha Vantage API rate limit exceeded. Please try again later.")
        return data

    def get_quote(self, symbol: str) -> Quote:
        """Fetch the latest price for a ticker."""
        symbol = symbol.strip().upper()
        data = self._query({"function": "GLOBAL_QUOTE", "symbol": symbol})

        quote = data.get("Global Quote") or {}
        if not quote.get("01. symbol") or not quote.get("05. price"):
            raise NotFoundError(f"No price data available for symbol: {symbol}")

        try:
            return Quote(
                symbol=quote["01. symbol"],
                price=_parse_float(quote["05. price"]),
                change=_parse_float(quote.get("09. change")),
                change_percent=_parse_float(quote.get("10. change percent")),
                last_trading_day=quote.get("07. latest trading day"),
            )
        except ValueError as e:
            raise ExternalServiceError(f"Malformed quote data for {symbol}: {e}") from e

    def search_symbols(self, keywords: str) -> List[Dict[str, str]]:
        """
        Search tickers by keyword.

        Never raises: any failure degrades to an empty result list.
        """
        keywords = keywords.strip()
        if not keywords:
            return []
        try:
            data = self._query({"function": "SYMBOL_SEARCH", "keywords": keywords})
        except (ExternalServiceError, NotFoundError) as e:
            logger.warning("symbol_search_failed", keywords=keywords, error=str(e))
            return []

        results = []
        for match in data.get("bestMatches", [])[:MAX_SEARCH_RESULTS]:
            results.append({
                "symbol": match.get("1. symbol", ""),
                "name": match.get("2. name", ""),
                "type": match.get("3. type", ""),
                "region": match.get("4. region", ""),
                "currency": match.get("8. currency", ""),
            })
        return results

    def validate_symbol(self, symbol: str) -> bool:
        """
        Check that a ticker exists.

        Fails open: if the service cannot answer, the symbol is treated as valid.
        """
        try:
            self.get_quote(symbol)
        except NotFoundError:
            return False
        except ExternalServiceError as e:
            logger.warning("symbol_validation_unavailable", symbol=symbol, error=str(e))
            return True
        return True

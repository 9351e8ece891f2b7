"""Berachain price provider for current and historical token prices.

Prices come from the Berachain GraphQL API, keyed by token address.
Public methods never raise on API failure: a token without a usable
price gets 0 and a token without history gets an empty series.
"""

import logging
import time
from typing import Any

import httpx

from ...core.config import DEFAULT_BERACHAIN_API_URL
from ...core.exceptions import DataSourceError, RateLimitError
from ...core.models import PricePoint, TokenInfo
from ...core.types import DataSource
from ..base import CachedProvider

logger = logging.getLogger(__name__)

CHAIN = "BERACHAIN"

CURRENT_PRICES_QUERY = """
query GetTokenCurrentPrices($chains: [GqlChain!]) {
  tokenGetCurrentPrices(chains: $chains) {
    address
    price
    updatedAt
  }
}
"""

HISTORICAL_PRICES_QUERY = """
query GetHistoricalPrices($addresses: [String!]!, $chain: GqlChain!, $range: GqlTokenChartDataRange!) {
  tokenGetHistoricalPrices(addresses: $addresses, chain: $chain, range: $range) {
    address
    prices {
      price
      timestamp
      updatedAt
    }
  }
}
"""


def _to_float(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if price > 0 else 0.0


class BerachainPriceProvider(CachedProvider):
    """Fetches token prices from the Berachain API."""

    SOURCE = DataSource.BERACHAIN_API

    def __init__(
        self,
        api_url: str = DEFAULT_BERACHAIN_API_URL,
        timeout: float = 30.0,
        cache_ttl_seconds: int | None = 30,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Berachain price provider.

        Args:
            api_url: GraphQL endpoint
            timeout: Request timeout in seconds
            cache_ttl_seconds: Cache TTL for price responses
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(cache_ttl_seconds=cache_ttl_seconds)
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    def is_available(self) -> bool:
        """Check if the Berachain API answers a trivial query."""
        try:
            self._make_request("query Ping { __typename }")
            return True
        except DataSourceError:
            return False

    def _request_failed(
        self,
        endpoint: str,
        start_time: float,
        message: str,
        status_code: int | None = None,
    ) -> DataSourceError:
        """Audit a failed call and build the error to raise."""
        self._record_audit(
            action="fetch",
            endpoint=endpoint,
            success=False,
            error_message=message,
            duration_ms=self._elapsed_ms(start_time),
        )
        return DataSourceError(
            source=self.SOURCE.value,
            message=message,
            endpoint=endpoint,
            status_code=status_code,
        )

    def _make_request(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Post a GraphQL query and return its ``data`` object."""
        start_time = time.time()
        endpoint = query.split("(")[0].split("{")[0].strip()

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.api_url,
                    json={"query": query, "variables": variables or {}},
                    headers={"content-type": "application/json", "accept": "*/*"},
                )

            duration_ms = self._elapsed_ms(start_time)

            if response.status_code == 429:
                self._record_audit(
                    action="fetch",
                    endpoint=endpoint,
                    success=False,
                    error_message="Rate limit exceeded",
                    duration_ms=duration_ms,
                )
                raise RateLimitError(
                    source=self.SOURCE.value,
                    retry_after_seconds=60,
                    endpoint=endpoint,
                )

            response.raise_for_status()
            payload = response.json()

        except httpx.HTTPStatusError as e:
            raise self._request_failed(
                endpoint,
                start_time,
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise self._request_failed(endpoint, start_time, str(e))
        except ValueError as e:
            raise self._request_failed(endpoint, start_time, f"Invalid JSON response: {e}")

        if not isinstance(payload, dict):
            raise self._request_failed(endpoint, start_time, "Unexpected response shape")

        if payload.get("errors"):
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in payload["errors"]
            )
            self._record_audit(
                action="fetch",
                endpoint=endpoint,
                success=False,
                error_message=messages,
                duration_ms=duration_ms,
            )
            raise DataSourceError(self.SOURCE.value, f"GraphQL errors: {messages}", endpoint)

        self._record_audit(
            action="fetch",
            endpoint=endpoint,
            success=True,
            duration_ms=duration_ms,
        )
        return payload.get("data") or {}

    def get_current_prices(self, tokens: list[TokenInfo]) -> dict[str, float]:
        """
        Get the latest USD price of each token.

        Args:
            tokens: Tokens to price

        Returns:
            Price per token key; 0 for tokens the API did not price or
            when the API is unavailable
        """
        prices = {token.key: 0.0 for token in tokens}

        cached = self._get_from_cache("current")
        if cached is None:
            try:
                data = self._make_request(CURRENT_PRICES_QUERY, {"chains": [CHAIN]})
            except DataSourceError as e:
                logger.warning(f"Current prices unavailable: {e}")
                return prices

            cached = {}
            for item in data.get("tokenGetCurrentPrices") or []:
                if isinstance(item, dict) and item.get("address"):
                    cached[str(item["address"]).lower()] = _to_float(item.get("price"))
            self._set_cache("current", cached)

        for token in tokens:
            price = cached.get(token.address.lower(), 0.0)
            if price == 0.0:
                logger.debug(f"No current price for {token.symbol}")
            prices[token.key] = price

        return prices

    def get_price(self, token: TokenInfo) -> float:
        """Latest USD price of a single token (0 when unavailable)."""
        return self.get_current_prices([token])[token.key]

    def get_historical_prices(
        self,
        tokens: list[TokenInfo],
        chart_range: str = "THIRTY_DAY",
    ) -> dict[str, list[PricePoint]]:
        """
        Get historical prices for each token.

        The API returns timestamps as strings of epoch seconds and does not
        guarantee ordering; points are returned in source order. Points
        with an unparseable timestamp or price are skipped.

        Args:
            tokens: Tokens to fetch
            chart_range: API range enum (e.g. "SEVEN_DAY", "THIRTY_DAY")

        Returns:
            Points per token key; empty lists when unavailable
        """
        history: dict[str, list[PricePoint]] = {token.key: [] for token in tokens}
        if not tokens:
            return history

        cache_key = f"history:{chart_range}:" + ",".join(sorted(t.key for t in tokens))
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        try:
            data = self._make_request(
                HISTORICAL_PRICES_QUERY,
                {
                    "addresses": [t.address.lower() for t in tokens],
                    "chain": CHAIN,
                    "range": chart_range,
                },
            )
        except DataSourceError as e:
            logger.warning(f"Historical prices unavailable: {e}")
            return history

        by_address = {t.address.lower(): t for t in tokens}

        for entry in data.get("tokenGetHistoricalPrices") or []:
            if not isinstance(entry, dict):
                continue
            token = by_address.get(str(entry.get("address", "")).lower())
            if token is None:
                continue

            points = []
            for raw in entry.get("prices") or []:
                try:
                    points.append(
                        PricePoint(
                            timestamp=int(raw["timestamp"]),
                            price=float(raw["price"]),
                            updated_at=raw.get("updatedAt"),
                        )
                    )
                except (KeyError, TypeError, ValueError):
                    logger.debug(f"Skipping malformed price point for {token.symbol}: {raw}")
            history[token.key] = points

        self._set_cache(cache_key, history)
        return history

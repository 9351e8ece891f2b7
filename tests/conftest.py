"""Pytest configuration and fixtures for allocation tracker tests."""

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from rfa_tracker.core.config import AppConfig
from rfa_tracker.core.models import PricePoint, Project, TokenInfo

# Fixed reference time for window calculations (2025-01-31 00:00:00 UTC)
NOW = 1738281600
DAY = 86400

BERA_ADDRESS = "0x0000000000000000000000000000000000000000"
IBGT_ADDRESS = "0xac03CABA51e17c86c921E1f6CBFBdC91F8BB2E6b"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_csv(fixtures_dir: Path) -> Path:
    """Five-row allocation CSV with a tie and one unknown amount."""
    return fixtures_dir / "rfa_allocations.csv"


@pytest.fixture
def projects() -> list[Project]:
    """Mixed known/unknown projects in source order."""
    return [
        Project(project_name="@alpha", bera_amount=100_000),
        Project(project_name="@Bravo", bera_amount=50_000),
        Project(project_name="@charlie", bera_amount=50_000),
        Project(project_name="@delta", bera_amount=0),
        Project(project_name="@echo", bera_amount=25_000),
    ]


@pytest.fixture
def bera_token() -> TokenInfo:
    return TokenInfo(key="bera", address=BERA_ADDRESS, name="BERA", symbol="BERA")


@pytest.fixture
def ibgt_token() -> TokenInfo:
    return TokenInfo(key="ibgt", address=IBGT_ADDRESS, name="iBGT", symbol="iBGT")


@pytest.fixture
def history() -> dict[str, list[PricePoint]]:
    """BERA and iBGT history, out of order, with one stale point and one gap."""
    return {
        "bera": [
            PricePoint(timestamp=NOW - 1 * DAY, price=5.0),
            PricePoint(timestamp=NOW - 3 * DAY, price=4.0),
            PricePoint(timestamp=NOW - 10 * DAY, price=2.0),
        ],
        "ibgt": [
            PricePoint(timestamp=NOW - 3 * DAY, price=5.0),
            PricePoint(timestamp=NOW - 1 * DAY, price=6.0),
            PricePoint(timestamp=NOW - 2 * DAY, price=5.5),
        ],
    }


@pytest.fixture
def test_config(sample_csv: Path) -> AppConfig:
    """Config pointing at the fixture CSV and a fake API host."""
    return AppConfig(
        csv_path=sample_csv,
        berachain_api_url="https://api.test/",
        avatar_base_url="https://avatar.test/twitter",
        refresh_seconds=60,
        request_timeout=5.0,
    )


def _graphql_handler(
    current: list[dict[str, Any]] | None = None,
    historical: list[dict[str, Any]] | None = None,
    calls: list[dict[str, Any]] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a MockTransport handler answering the two price queries."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if calls is not None:
            calls.append(body)
        if "tokenGetHistoricalPrices" in body["query"]:
            return httpx.Response(200, json={"data": {"tokenGetHistoricalPrices": historical or []}})
        return httpx.Response(200, json={"data": {"tokenGetCurrentPrices": current or []}})

    return handler


@pytest.fixture
def price_payload() -> dict[str, list[dict[str, Any]]]:
    """API-shaped responses for BERA at $5 and iBGT at $6."""
    return {
        "current": [
            {"address": BERA_ADDRESS, "price": 5.0, "updatedAt": NOW},
            {"address": IBGT_ADDRESS.lower(), "price": 6.0, "updatedAt": NOW},
        ],
        "historical": [
            {
                "address": BERA_ADDRESS,
                "prices": [
                    {"price": 5.0, "timestamp": str(NOW - DAY), "updatedAt": NOW},
                    {"price": 4.0, "timestamp": str(NOW - 2 * DAY), "updatedAt": NOW},
                ],
            },
            {
                "address": IBGT_ADDRESS.lower(),
                "prices": [
                    {"price": 6.0, "timestamp": str(NOW - DAY), "updatedAt": NOW},
                    {"price": 5.0, "timestamp": str(NOW - 2 * DAY), "updatedAt": NOW},
                ],
            },
        ],
    }


@pytest.fixture
def graphql_handler() -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    """Factory for MockTransport handlers answering the price queries."""
    return _graphql_handler


@pytest.fixture
def now() -> int:
    return NOW

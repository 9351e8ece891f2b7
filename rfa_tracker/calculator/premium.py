"""Premium calculator for BGT wrappers priced against BERA.

Formulas:
- premium % = (price - baseline) / baseline × 100
- BERA-denominated value = price / baseline price at the same timestamp

A missing or zero baseline never produces inf/NaN; the result is 0.
Historical series are re-sorted by timestamp and cut to a trailing
window of 7 or 30 days before being joined on a common timestamp axis.
"""

import logging
import math
import time

from ..core.models import ChartRow, PricePoint, TokenInfo, WrapperInfo
from ..core.types import Denomination, Percentage, TimeRange

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
BASELINE_DISPLAY_NAME = "BGT (1:1 BERA)"


def premium_percent(price: float, baseline: float) -> Percentage:
    """
    Calculate the premium of a price over a baseline.

    Formula: premium = (price - baseline) / baseline × 100

    Args:
        price: Candidate price
        baseline: Baseline price (BERA)

    Returns:
        Premium in percent, or 0 when the baseline is unavailable
    """
    if not math.isfinite(baseline) or baseline <= 0 or not math.isfinite(price):
        logger.debug(f"Premium undefined for price={price} baseline={baseline}, using 0")
        return 0.0
    return (price - baseline) / baseline * 100


def ratio_to_baseline(price: float, baseline: float) -> float:
    """Price expressed in baseline units, 0 when the baseline is unavailable."""
    if not math.isfinite(baseline) or baseline <= 0 or not math.isfinite(price):
        return 0.0
    return price / baseline


def window_cutoff(time_range: TimeRange, now: float | None = None) -> int:
    """Earliest timestamp (seconds) included in a trailing window."""
    now = time.time() if now is None else now
    return int(now - time_range.days * SECONDS_PER_DAY)


def filter_series(
    points: list[PricePoint],
    time_range: TimeRange = TimeRange.SEVEN_DAYS,
    now: float | None = None,
) -> list[PricePoint]:
    """
    Sort a series by timestamp and keep the trailing window.

    Args:
        points: Price points in any order
        time_range: 7 or 30 day window
        now: Reference time in epoch seconds (defaults to the current time)

    Returns:
        Points with timestamp >= now - days × 86400, oldest first
    """
    cutoff = window_cutoff(time_range, now)
    ordered = sorted(points, key=lambda p: p.timestamp)
    return [p for p in ordered if p.timestamp >= cutoff]


def _index_by_timestamp(points: list[PricePoint]) -> dict[int, float]:
    # Later duplicates of a timestamp overwrite earlier ones
    return {p.timestamp: p.price for p in points}


def build_chart_rows(
    series: dict[str, list[PricePoint]],
    time_range: TimeRange = TimeRange.SEVEN_DAYS,
    now: float | None = None,
    denomination: Denomination = Denomination.USD,
    baseline_key: str = "bera",
) -> list[ChartRow]:
    """
    Join several price series on a common timestamp axis.

    Every row carries a value for every series key; a series without a
    point at that timestamp contributes 0 so lines stay aligned.

    Args:
        series: Points per token key
        time_range: Trailing window to keep
        now: Reference time in epoch seconds
        denomination: USD prices, or prices divided by the baseline price
            at the same timestamp
        baseline_key: Key of the baseline series for BERA denomination

    Returns:
        Chart rows, oldest first
    """
    cutoff = window_cutoff(time_range, now)
    indexed = {key: _index_by_timestamp(points) for key, points in series.items()}

    timestamps = sorted(
        {ts for prices in indexed.values() for ts in prices if ts >= cutoff}
    )
    baseline = indexed.get(baseline_key, {})

    rows = []
    for ts in timestamps:
        values: dict[str, float] = {}
        for key, prices in indexed.items():
            price = prices.get(ts, 0.0)
            if denomination is Denomination.BERA:
                price = ratio_to_baseline(price, baseline.get(ts, 0.0))
            values[key] = price
        rows.append(ChartRow(timestamp=ts, values=values))

    return rows


def build_premium_rows(
    series: dict[str, list[PricePoint]],
    baseline_key: str = "bera",
    time_range: TimeRange = TimeRange.SEVEN_DAYS,
    now: float | None = None,
) -> list[ChartRow]:
    """
    Premium of each non-baseline series over the baseline, per timestamp.

    Missing prices or a missing baseline at a timestamp give 0.
    """
    price_rows = build_chart_rows(series, time_range=time_range, now=now)

    rows = []
    for row in price_rows:
        baseline = row.values.get(baseline_key, 0.0)
        values = {
            key: premium_percent(price, baseline) if price > 0 else 0.0
            for key, price in row.values.items()
            if key != baseline_key
        }
        rows.append(ChartRow(timestamp=row.timestamp, values=values))
    return rows


def build_wrappers(
    baseline: TokenInfo,
    wrappers: list[TokenInfo],
    current_prices: dict[str, float],
    history: dict[str, list[PricePoint]] | None = None,
) -> list[WrapperInfo]:
    """
    Build the per-token price/premium cards.

    Args:
        baseline: Baseline token (BERA); its card is shown as BGT at 1:1
        wrappers: Wrapper tokens to compare
        current_prices: Latest price per token key (missing = 0)
        history: Historical points per token key

    Returns:
        Baseline card first, then one card per wrapper
    """
    history = history or {}
    baseline_price = current_prices.get(baseline.key, 0.0)

    cards = [
        WrapperInfo(
            key=baseline.key,
            name=BASELINE_DISPLAY_NAME,
            symbol=baseline.symbol,
            address="-",
            latest_price=baseline_price,
            premium_percent=0.0,
            series=history.get(baseline.key, []),
            website_url=baseline.website_url,
        )
    ]

    for token in wrappers:
        price = current_prices.get(token.key, 0.0)
        cards.append(
            WrapperInfo(
                key=token.key,
                name=token.name,
                symbol=token.symbol,
                address=token.address,
                latest_price=price,
                premium_percent=premium_percent(price, baseline_price) if price > 0 else 0.0,
                series=history.get(token.key, []),
                website_url=token.website_url,
            )
        )

    return cards

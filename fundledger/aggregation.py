"""Aggregation helpers for reporting.

Pure folds over already-listed entities, plus the fund, portfolio and
dashboard summaries built on top of them. Every sum and average is done
in Decimal so totals over many rows do not drift.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fundledger.data_normalization import RATE_SCALE, to_decimal
from fundledger.database import Database
from fundledger.models.fund import Fund
from fundledger.models.investor import Investor
from fundledger.models.portfolio import Portfolio

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def sum_decimal(values: Iterable[Any]) -> Decimal:
    """Sum numbers exactly. An empty iterable sums to Decimal("0")."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total


def average_decimal(values: Iterable[Any], scale: int) -> Decimal:
    """Mean of values rounded to scale digits; zero for no values."""
    items = [to_decimal(value) for value in values]
    if not items:
        return ZERO
    quantum = Decimal(1).scaleb(-scale)
    return (sum(items, ZERO) / len(items)).quantize(quantum, rounding=ROUND_HALF_UP)


def total_assets_under_management(funds: Iterable[Fund]) -> Decimal:
    """Sum of total_assets across funds."""
    return sum_decimal(fund.total_assets for fund in funds)


def total_invested_capital(investors: Iterable[Investor]) -> Decimal:
    """Sum of total_invested across investors."""
    return sum_decimal(investor.total_invested for investor in investors)


def total_portfolio_value(portfolios: Iterable[Portfolio]) -> Decimal:
    """Sum of total_value across portfolios."""
    return sum_decimal(portfolio.total_value for portfolio in portfolios)


def _first_max(items: list, key) -> Any:
    """Item with the highest key; the earliest one wins ties."""
    best = None
    for item in items:
        if best is None or key(item) > key(best):
            best = item
    return best


def fund_summary(database: Database) -> dict[str, Any]:
    """Summarize all funds.

    The top performing fund is the one whose portfolios have the highest
    average performance; funds without portfolios are not ranked.

    Returns:
        {
            "total_funds": int,
            "total_assets_under_management": Decimal,
            "average_nav": Decimal,
            "top_performing_fund": str | None,
        }
    """
    funds = Fund.all(database)
    portfolios = Portfolio.all(database)

    performance_by_fund: dict[int, list[Decimal]] = {}
    for portfolio in portfolios:
        performance_by_fund.setdefault(portfolio.fund_id, []).append(
            portfolio.performance
        )

    ranked = [fund for fund in funds if fund.id in performance_by_fund]
    top = _first_max(
        ranked,
        key=lambda fund: average_decimal(performance_by_fund[fund.id], RATE_SCALE),
    )

    summary = {
        "total_funds": len(funds),
        "total_assets_under_management": total_assets_under_management(funds),
        "average_nav": average_decimal((fund.nav for fund in funds), RATE_SCALE),
        "top_performing_fund": top.name if top else None,
    }
    logger.debug(f"Fund summary: {summary}")
    return summary


def portfolio_summary(database: Database) -> dict[str, Any]:
    """Summarize all portfolios.

    Returns:
        {
            "total_portfolios": int,
            "total_portfolio_value": Decimal,
            "average_performance": Decimal,
            "best_performing_portfolio": str | None,
        }
    """
    portfolios = Portfolio.all(database)
    best = _first_max(portfolios, key=lambda portfolio: portfolio.performance)

    summary = {
        "total_portfolios": len(portfolios),
        "total_portfolio_value": total_portfolio_value(portfolios),
        "average_performance": average_decimal(
            (portfolio.performance for portfolio in portfolios), RATE_SCALE
        ),
        "best_performing_portfolio": best.name if best else None,
    }
    logger.debug(f"Portfolio summary: {summary}")
    return summary


def dashboard_summary(database: Database) -> dict[str, Any]:
    """Fund and portfolio summaries plus total invested capital."""
    return {
        "fund_summary": fund_summary(database),
        "portfolio_summary": portfolio_summary(database),
        "total_invested_capital": total_invested_capital(Investor.all(database)),
    }

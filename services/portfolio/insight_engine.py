# services/portfolio/insight_engine.py
from __future__ import annotations

from math import fsum
from typing import Iterable, List, Optional

from schemas.analytics import (
    CryptoExposureInsight,
    DiversificationInsight,
    ExitAlertInsight,
    Insight,
    SectorConcentrationInsight,
)
from schemas.holding import Category, Holding
from services.portfolio.allocation import category_percentages
from services.portfolio.valuation import holding_loss, is_loss_making
from utils.common_helpers import fmt_pct

MIN_DIVERSIFIED_HOLDINGS = 5
CRYPTO_CRITICAL_PCT = 30.0
CRYPTO_WARNING_PCT = 15.0
STOCK_CONCENTRATION_PCT = 60.0


def _diversification(holding_count: int) -> DiversificationInsight:
    if holding_count < MIN_DIVERSIFIED_HOLDINGS:
        severity = "warning"
        message = (
            "Consider adding more assets for better diversification. "
            "Aim for at least 5-10 different holdings."
        )
    else:
        severity = "success"
        message = "Good diversification with multiple asset types. Continue monitoring allocation balance."
    return DiversificationInsight(
        id="diversification",
        severity=severity,
        title="Portfolio Diversification",
        message=message,
        holding_count=holding_count,
    )


def _crypto_exposure(crypto_pct: float) -> CryptoExposureInsight:
    if crypto_pct > CRYPTO_CRITICAL_PCT:
        severity = "critical"
        message = (
            f"High crypto exposure at {fmt_pct(crypto_pct)}%. "
            "Consider reducing to below 20% for better risk management."
        )
    elif crypto_pct > CRYPTO_WARNING_PCT:
        severity = "warning"
        message = f"Moderate crypto exposure at {fmt_pct(crypto_pct)}%. Monitor volatility closely."
    elif crypto_pct > 0:
        severity = "info"
        message = f"Crypto exposure at {fmt_pct(crypto_pct)}% is within recommended limits."
    else:
        severity = "info"
        message = "No cryptocurrency exposure. Consider small allocation for growth potential."
    return CryptoExposureInsight(
        id="crypto-exposure",
        severity=severity,
        title="Cryptocurrency Exposure",
        message=message,
        crypto_percent=crypto_pct,
    )


def _sector_concentration(stock_pct: float) -> SectorConcentrationInsight:
    if stock_pct > STOCK_CONCENTRATION_PCT:
        severity = "warning"
        message = (
            f"Stock concentration is high at {fmt_pct(stock_pct)}%. "
            "Consider diversifying into mutual funds or gold."
        )
    else:
        severity = "success"
        message = "Stock allocation appears balanced. Maintain diversification across sectors."
    return SectorConcentrationInsight(
        id="sector-concentration",
        severity=severity,
        title="Sector Concentration",
        message=message,
        stock_percent=stock_pct,
    )


def _exit_alert(items: List[Holding]) -> Optional[ExitAlertInsight]:
    losers = [h for h in items if is_loss_making(h)]
    if not losers:
        return None

    total_loss = fsum(holding_loss(h) for h in losers)
    # sorted() is stable with reverse=True: equal losses keep input order
    top = sorted(losers, key=holding_loss, reverse=True)[0]
    top_loss = holding_loss(top)
    contribution = top_loss / total_loss * 100.0 if total_loss > 0 else 0.0

    return ExitAlertInsight(
        id="exit-alert",
        severity="critical",
        title="Exit Alert",
        message=(
            f'"{top.name}" contributes {fmt_pct(contribution)}% of your total loss. '
            "Consider reviewing this position."
        ),
        holding_id=top.id,
        holding_name=top.name,
        loss_amount=top_loss,
        contribution_percent=contribution,
    )


def evaluate_insights(holdings: Iterable[Holding]) -> List[Insight]:
    """Diversification, crypto exposure and sector concentration, plus an exit alert when anything is at a loss."""
    items = list(holdings)
    weights = category_percentages(items)

    insights: List[Insight] = [
        _diversification(len({h.id for h in items})),
        _crypto_exposure(weights[Category.CRYPTO]),
        _sector_concentration(weights[Category.STOCK]),
    ]

    exit_alert = _exit_alert(items)
    if exit_alert is not None:
        insights.append(exit_alert)
    return insights

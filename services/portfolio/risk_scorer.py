# services/portfolio/risk_scorer.py
"""
Rule-based portfolio risk score (0..100).

    crypto exposure      >30% -> 40, >15% -> 20, else 10
    stock concentration  >60% -> 30, >40% -> 15, else 5
    loss-making holdings 10 each, capped at 30

Level: >=70 High, >=40 Medium, else Low.

The dashboard headline indicator (`dashboard_risk_indicator`) is a separate,
crypto-only view with thresholds 30/15 and must not be merged with the level
above.
"""
from __future__ import annotations

from math import fsum
from typing import Iterable

from schemas.analytics import DashboardRisk, RiskAssessment, RiskComponents, RiskFactors, RiskLevel
from schemas.holding import Category, Holding
from services.portfolio.allocation import category_percentages
from services.portfolio.valuation import holding_loss, is_loss_making

CRYPTO_HIGH_PCT = 30.0
CRYPTO_MODERATE_PCT = 15.0
STOCK_HIGH_PCT = 60.0
STOCK_MODERATE_PCT = 40.0

LOSS_POINTS_EACH = 10
LOSS_POINTS_CAP = 30
SCORE_CAP = 100

HIGH_SCORE = 70
MEDIUM_SCORE = 40


def _crypto_points(crypto_pct: float) -> int:
    if crypto_pct > CRYPTO_HIGH_PCT:
        return 40
    if crypto_pct > CRYPTO_MODERATE_PCT:
        return 20
    return 10


def _stock_points(stock_pct: float) -> int:
    if stock_pct > STOCK_HIGH_PCT:
        return 30
    if stock_pct > STOCK_MODERATE_PCT:
        return 15
    return 5


def _loss_points(loss_count: int) -> int:
    return min(loss_count * LOSS_POINTS_EACH, LOSS_POINTS_CAP)


def level_for(score: int) -> RiskLevel:
    if score >= HIGH_SCORE:
        return "High"
    if score >= MEDIUM_SCORE:
        return "Medium"
    return "Low"


def score_from_factors(crypto_pct: float, stock_pct: float, loss_count: int) -> RiskAssessment:
    components = RiskComponents(
        crypto_points=_crypto_points(crypto_pct),
        stock_points=_stock_points(stock_pct),
        loss_points=_loss_points(loss_count),
    )
    total = components.crypto_points + components.stock_points + components.loss_points
    total = max(0, min(SCORE_CAP, total))
    return RiskAssessment(score=total, level=level_for(total), components=components)


def score(holdings: Iterable[Holding]) -> RiskAssessment:
    items = list(holdings)
    weights = category_percentages(items)
    loss_count = sum(1 for h in items if is_loss_making(h))
    return score_from_factors(weights[Category.CRYPTO], weights[Category.STOCK], loss_count)


def dashboard_risk_indicator(holdings: Iterable[Holding]) -> DashboardRisk:
    crypto_pct = category_percentages(holdings)[Category.CRYPTO]
    if crypto_pct > CRYPTO_HIGH_PCT:
        level: RiskLevel = "High"
    elif crypto_pct > CRYPTO_MODERATE_PCT:
        level = "Medium"
    else:
        level = "Low"
    return DashboardRisk(level=level, crypto_percent=crypto_pct)


def risk_factors(holdings: Iterable[Holding]) -> RiskFactors:
    items = list(holdings)
    weights = category_percentages(items)
    crypto_pct = weights[Category.CRYPTO]
    stock_pct = weights[Category.STOCK]

    if crypto_pct > CRYPTO_HIGH_PCT:
        crypto_note = "High risk - Consider reducing"
    elif crypto_pct > CRYPTO_MODERATE_PCT:
        crypto_note = "Moderate exposure"
    else:
        crypto_note = "Within safe limits"

    losers = [h for h in items if is_loss_making(h)]
    return RiskFactors(
        crypto_percent=crypto_pct,
        crypto_note=crypto_note,
        stock_percent=stock_pct,
        stock_note="High concentration" if stock_pct > STOCK_HIGH_PCT else "Well diversified",
        loss_count=len(losers),
        total_loss=fsum(holding_loss(h) for h in losers),
    )

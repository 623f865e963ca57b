# services/portfolio/overview.py
from __future__ import annotations

from datetime import datetime, timezone
from math import fsum
from typing import Iterable, Optional

from schemas.analytics import LossExposure, LossPosition, PortfolioOverview
from schemas.holding import Holding
from services.portfolio.alert_engine import evaluate_alerts
from services.portfolio.allocation import allocate, profit_loss_by_category, sorted_for_display
from services.portfolio.insight_engine import evaluate_insights
from services.portfolio.risk_scorer import dashboard_risk_indicator, risk_factors, score
from services.portfolio.valuation import holding_loss, is_loss_making, per_holdings, summarize
from utils.common_helpers import pct


def loss_exposure(holdings: Iterable[Holding]) -> LossExposure:
    items = list(holdings)
    positions = [
        LossPosition(
            holding_id=h.id,
            name=h.name,
            category=h.category,
            loss=holding_loss(h),
            loss_percent=(h.current_price - h.buy_price) / h.buy_price * 100.0,
        )
        for h in items
        if is_loss_making(h)
    ]
    total_loss = fsum(p.loss for p in positions)
    invested_total = summarize(items).invested_total
    return LossExposure(
        loss_making=positions,
        count=len(positions),
        total_loss=total_loss,
        loss_contribution_percent=pct(total_loss, invested_total),
    )


def build_overview(holdings: Iterable[Holding], now: Optional[datetime] = None) -> PortfolioOverview:
    items = tuple(holdings)
    now = now or datetime.now(timezone.utc)
    valuation = summarize(items)

    return PortfolioOverview(
        valuation=valuation,
        holdings=per_holdings(items),
        allocation=sorted_for_display(allocate(items, valuation.current_total)),
        profit_loss_by_category=profit_loss_by_category(items),
        dashboard_risk=dashboard_risk_indicator(items),
        risk=score(items),
        risk_factors=risk_factors(items),
        loss_exposure=loss_exposure(items),
        alerts=evaluate_alerts(items, now=now),
        insights=evaluate_insights(items),
    )

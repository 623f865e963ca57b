# services/portfolio/analytics_service.py
"""
Query surface of the portfolio analytics.

Every function takes a snapshot of holdings (any iterable; it is copied into a
tuple first) and returns freshly built records. Nothing here writes.

    from services.portfolio.analytics_service import alerts, risk_assessment

    snapshot = list_holdings(repo, owner_id)
    risk_assessment(snapshot).score
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from schemas.analytics import Alert, AllocationEntry, Insight, PortfolioOverview, RiskAssessment, ValuationSummary
from schemas.holding import Holding
from services.holding_repository import HoldingRepository
from services.holding_service import list_holdings
from services.portfolio import alert_engine, allocation as allocation_analyzer, insight_engine, risk_scorer, valuation
from services.portfolio.overview import build_overview

logger = logging.getLogger(__name__)


def _snapshot(holdings: Iterable[Holding]) -> Tuple[Holding, ...]:
    return tuple(holdings)


def valuation_summary(holdings: Iterable[Holding]) -> ValuationSummary:
    return valuation.summarize(_snapshot(holdings))


def allocation(holdings: Iterable[Holding]) -> List[AllocationEntry]:
    items = _snapshot(holdings)
    return allocation_analyzer.allocate(items, valuation.summarize(items).current_total)


def risk_assessment(holdings: Iterable[Holding]) -> RiskAssessment:
    return risk_scorer.score(_snapshot(holdings))


def alerts(holdings: Iterable[Holding], now: Optional[datetime] = None) -> List[Alert]:
    items = _snapshot(holdings)
    out = alert_engine.evaluate_alerts(items, now=now)
    logger.debug("alerts evaluated", extra={"holdings": len(items), "alerts": len(out)})
    return out


def insights(holdings: Iterable[Holding]) -> List[Insight]:
    items = _snapshot(holdings)
    out = insight_engine.evaluate_insights(items)
    logger.debug("insights evaluated", extra={"holdings": len(items), "insights": len(out)})
    return out


def overview(holdings: Iterable[Holding], now: Optional[datetime] = None) -> PortfolioOverview:
    return build_overview(_snapshot(holdings), now=now)


def analyze_owner(repo: HoldingRepository, owner_id: str, now: Optional[datetime] = None) -> PortfolioOverview:
    snapshot = list_holdings(repo, owner_id)
    result = build_overview(snapshot, now=now)
    logger.info(
        "portfolio overview built",
        extra={"holdings": len(snapshot), "alerts": len(result.alerts), "risk_score": result.risk.score},
    )
    return result

# services/portfolio/valuation.py
from __future__ import annotations

from math import fsum
from typing import Iterable, List

from schemas.analytics import HoldingValuation, ValuationSummary
from schemas.holding import Holding
from utils.common_helpers import pct


def holding_value(h: Holding) -> float:
    return h.quantity * h.current_price


def holding_invested(h: Holding) -> float:
    return h.quantity * h.buy_price


def is_loss_making(h: Holding) -> bool:
    return h.current_price < h.buy_price


def holding_loss(h: Holding) -> float:
    """Absolute monetary loss; 0 for holdings at or above buy price."""
    return h.quantity * (h.buy_price - h.current_price) if is_loss_making(h) else 0.0


def per_holding(h: Holding) -> HoldingValuation:
    value = holding_value(h)
    invested = holding_invested(h)
    pl = value - invested
    return HoldingValuation(
        holding_id=h.id,
        value=value,
        invested=invested,
        pl=pl,
        pl_percent=pct(pl, invested),
    )


def per_holdings(holdings: Iterable[Holding]) -> List[HoldingValuation]:
    return [per_holding(h) for h in holdings]


def summarize(holdings: Iterable[Holding]) -> ValuationSummary:
    """Invested vs. current totals; an empty portfolio yields all zeros."""
    items = list(holdings)
    invested_total = fsum(holding_invested(h) for h in items)
    current_total = fsum(holding_value(h) for h in items)
    profit_loss = current_total - invested_total
    return ValuationSummary(
        invested_total=invested_total,
        current_total=current_total,
        profit_loss=profit_loss,
        profit_loss_percent=pct(profit_loss, invested_total),
    )

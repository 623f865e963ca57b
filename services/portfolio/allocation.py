# services/portfolio/allocation.py
from __future__ import annotations

from collections import defaultdict
from math import fsum
from typing import Dict, Iterable, List, Mapping, Optional

from schemas.analytics import AllocationEntry, CategoryProfitLoss
from schemas.holding import Category, Holding
from services.portfolio.valuation import holding_invested, holding_value
from utils.common_helpers import pct


def value_by_category(holdings: Iterable[Holding]) -> Dict[Category, float]:
    """Current value of every category, zero for absent ones, in enumeration order."""
    buckets: Dict[Category, List[float]] = defaultdict(list)
    for h in holdings:
        buckets[h.category].append(holding_value(h))
    return {c: fsum(buckets.get(c, ())) for c in Category}


def category_percentages(holdings: Iterable[Holding]) -> Dict[Category, float]:
    items = list(holdings)
    values = value_by_category(items)
    total = fsum(holding_value(h) for h in items)
    return {c: pct(v, total) for c, v in values.items()}


def allocate(holdings: Iterable[Holding], total_value: Optional[float] = None) -> List[AllocationEntry]:
    """One entry per category holding value > 0, in enumeration order."""
    items = list(holdings)
    if total_value is None:
        total_value = fsum(holding_value(h) for h in items)

    return [
        AllocationEntry(category=c, value=v, percent_of_total=pct(v, total_value))
        for c, v in value_by_category(items).items()
        if v > 0
    ]


def dominant_category(weights: Mapping[Category, float]) -> Optional[Category]:
    """Category with the largest weight; ties go to the earlier enumeration member."""
    best: Optional[Category] = None
    for c in Category:
        w = weights.get(c)
        if w is None:
            continue
        if best is None or w > weights[best]:
            best = c
    return best


def dominant_entry(entries: Iterable[AllocationEntry]) -> Optional[AllocationEntry]:
    by_category = {e.category: e for e in entries}
    top = dominant_category({c: e.value for c, e in by_category.items()})
    return by_category.get(top) if top is not None else None


def sorted_for_display(entries: Iterable[AllocationEntry]) -> List[AllocationEntry]:
    return sorted(entries, key=lambda e: e.value, reverse=True)


def profit_loss_by_category(holdings: Iterable[Holding]) -> List[CategoryProfitLoss]:
    """P/L per category in enumeration order, skipping categories that break even."""
    items = list(holdings)
    out: List[CategoryProfitLoss] = []
    for c in Category:
        members = [h for h in items if h.category is c]
        invested = fsum(holding_invested(h) for h in members)
        current = fsum(holding_value(h) for h in members)
        pl = current - invested
        if abs(pl) > 0:
            out.append(CategoryProfitLoss(category=c, invested=invested, current=current, pl=pl))
    return out

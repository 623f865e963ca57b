# services/portfolio/alert_engine.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from schemas.analytics import Alert, ImbalanceAlert, LossAlert, RiskAlert
from schemas.holding import Category, Holding
from services.portfolio.allocation import category_percentages, dominant_category
from services.portfolio.valuation import holding_loss, is_loss_making
from utils.common_helpers import fmt_pct, format_currency

CRYPTO_ALERT_PCT = 30.0
CRYPTO_RECOMMENDED_LIMIT_PCT = 20
STOCK_ALERT_PCT = 70.0
LOSS_ALERT_PCT = 10.0
LOSS_HIGH_PCT = 20.0
IMBALANCE_PCT = 60.0


def _loss_alert(h: Holding, now: datetime) -> Optional[LossAlert]:
    loss_pct = (h.current_price - h.buy_price) / h.buy_price * 100.0
    drop = abs(loss_pct)
    if drop <= LOSS_ALERT_PCT:
        return None

    loss = holding_loss(h)
    return LossAlert(
        id=f"loss-{h.id}",
        severity="high" if drop > LOSS_HIGH_PCT else "medium",
        title=f"{h.name} Down {fmt_pct(drop)}%",
        message=(
            f"{h.name} has declined {fmt_pct(drop)}% from your buy price. "
            f"Current loss: {format_currency(loss)}"
        ),
        timestamp=now,
        holding_id=h.id,
        holding_name=h.name,
        loss_percent=loss_pct,
        loss_amount=loss,
    )


def evaluate_alerts(holdings: Iterable[Holding], now: Optional[datetime] = None) -> List[Alert]:
    """
    Threshold alerts in fixed emission order:
    crypto risk, stock concentration, per-holding losses (input order), imbalance.
    Ids depend only on the rule and its subject; `now` stamps every alert of the call.
    """
    items = list(holdings)
    now = now or datetime.now(timezone.utc)
    weights = category_percentages(items)
    crypto_pct = weights[Category.CRYPTO]
    stock_pct = weights[Category.STOCK]

    alerts: List[Alert] = []

    if crypto_pct > CRYPTO_ALERT_PCT:
        alerts.append(
            RiskAlert(
                id="crypto-risk",
                severity="high",
                title="High Cryptocurrency Risk",
                message=(
                    f"Your crypto exposure is {fmt_pct(crypto_pct)}%, significantly above the recommended "
                    f"{CRYPTO_RECOMMENDED_LIMIT_PCT}% limit. This increases portfolio volatility."
                ),
                timestamp=now,
                category=Category.CRYPTO,
                percent=crypto_pct,
            )
        )

    if stock_pct > STOCK_ALERT_PCT:
        alerts.append(
            RiskAlert(
                id="stock-concentration",
                severity="medium",
                title="High Stock Concentration",
                message=(
                    f"{fmt_pct(stock_pct)}% of your portfolio is in stocks. "
                    "Consider diversifying to reduce market risk."
                ),
                timestamp=now,
                category=Category.STOCK,
                percent=stock_pct,
            )
        )

    seen: set[str] = set()
    for h in items:
        if not is_loss_making(h) or h.id in seen:
            continue
        seen.add(h.id)
        alert = _loss_alert(h, now)
        if alert is not None:
            alerts.append(alert)

    dominant = dominant_category(weights)
    max_pct = weights[dominant] if dominant is not None else 0.0
    if dominant is not None and max_pct > IMBALANCE_PCT:
        alerts.append(
            ImbalanceAlert(
                id="imbalance",
                severity="medium",
                title="Portfolio Imbalance Detected",
                message=(
                    f"{dominant.value} represents {fmt_pct(max_pct)}% of your portfolio. "
                    "A more balanced allocation is recommended."
                ),
                timestamp=now,
                category=dominant,
                percent=max_pct,
            )
        )

    return alerts

# schemas/analytics.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from schemas.holding import Category


class _Derived(BaseModel):
    model_config = ConfigDict(frozen=True)


# -----------------------
# Valuation / allocation
# -----------------------

class HoldingValuation(_Derived):
    holding_id: str
    value: float
    invested: float
    pl: float
    pl_percent: float


class ValuationSummary(_Derived):
    invested_total: float = 0.0
    current_total: float = 0.0
    profit_loss: float = 0.0
    profit_loss_percent: float = 0.0


class AllocationEntry(_Derived):
    category: Category
    value: float = Field(..., gt=0)
    percent_of_total: float = Field(..., ge=0)


class CategoryProfitLoss(_Derived):
    category: Category
    invested: float
    current: float
    pl: float


# -----------------------
# Risk
# -----------------------

RiskLevel = Literal["Low", "Medium", "High"]


class RiskComponents(_Derived):
    crypto_points: int = Field(..., ge=0, le=40)
    stock_points: int = Field(..., ge=0, le=30)
    loss_points: int = Field(..., ge=0, le=30)


class RiskAssessment(_Derived):
    score: int = Field(..., ge=0, le=100)
    level: RiskLevel
    components: RiskComponents


class DashboardRisk(_Derived):
    """Crypto-only headline indicator; independent of RiskAssessment.level."""

    level: RiskLevel
    crypto_percent: float


class RiskFactors(_Derived):
    crypto_percent: float
    crypto_note: str
    stock_percent: float
    stock_note: str
    loss_count: int
    total_loss: float


class LossPosition(_Derived):
    holding_id: str
    name: str
    category: Category
    loss: float
    loss_percent: float  # negative: change from buy price


class LossExposure(_Derived):
    loss_making: List[LossPosition] = Field(default_factory=list)
    count: int = 0
    total_loss: float = 0.0
    loss_contribution_percent: float = 0.0


# -----------------------
# Alerts
# -----------------------

AlertSeverity = Literal["medium", "high"]


class _AlertBase(_Derived):
    id: str
    severity: AlertSeverity
    title: str
    message: str
    timestamp: datetime


class RiskAlert(_AlertBase):
    kind: Literal["RiskAlert"] = "RiskAlert"
    category: Category
    percent: float


class LossAlert(_AlertBase):
    kind: Literal["LossAlert"] = "LossAlert"
    holding_id: str
    holding_name: str
    loss_percent: float
    loss_amount: float


class ImbalanceAlert(_AlertBase):
    kind: Literal["ImbalanceAlert"] = "ImbalanceAlert"
    category: Category
    percent: float


Alert = Annotated[Union[RiskAlert, LossAlert, ImbalanceAlert], Field(discriminator="kind")]


# -----------------------
# Insights
# -----------------------

InsightSeverity = Literal["info", "success", "warning", "critical"]


class _InsightBase(_Derived):
    id: str
    severity: InsightSeverity
    title: str
    message: str


class DiversificationInsight(_InsightBase):
    kind: Literal["Diversification"] = "Diversification"
    holding_count: int


class CryptoExposureInsight(_InsightBase):
    kind: Literal["CryptoExposure"] = "CryptoExposure"
    crypto_percent: float


class SectorConcentrationInsight(_InsightBase):
    kind: Literal["SectorConcentration"] = "SectorConcentration"
    stock_percent: float


class ExitAlertInsight(_InsightBase):
    kind: Literal["ExitAlert"] = "ExitAlert"
    holding_id: str
    holding_name: str
    loss_amount: float
    contribution_percent: float


Insight = Annotated[
    Union[DiversificationInsight, CryptoExposureInsight, SectorConcentrationInsight, ExitAlertInsight],
    Field(discriminator="kind"),
]


class PortfolioOverview(_Derived):
    """Every derived record of one holdings snapshot."""

    valuation: ValuationSummary
    holdings: List[HoldingValuation] = Field(default_factory=list)
    allocation: List[AllocationEntry] = Field(default_factory=list)
    profit_loss_by_category: List[CategoryProfitLoss] = Field(default_factory=list)
    dashboard_risk: DashboardRisk
    risk: RiskAssessment
    risk_factors: RiskFactors
    loss_exposure: LossExposure
    alerts: List[Alert] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)

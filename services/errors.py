# services/errors.py
from __future__ import annotations

from pydantic import ValidationError


class PortfolioError(Exception):
    """Base class for portfolio errors."""


class InvalidHoldingError(PortfolioError, ValueError):
    """A holding payload violates the holding invariants; nothing was stored."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidHoldingError":
        fields: list[str] = []
        parts: list[str] = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ())) or "holding"
            fields.append(loc)
            parts.append(f"{loc}: {err.get('msg')}")
        return cls("Invalid holding: " + "; ".join(parts), fields)


class HoldingNotFoundError(PortfolioError, LookupError):
    def __init__(self, holding_id: str):
        super().__init__(f"Holding not found: {holding_id}")
        self.holding_id = holding_id

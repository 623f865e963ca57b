# schemas/holding.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Closed set of holding categories; member order is the tie-break order."""

    STOCK = "Stock"
    MUTUAL_FUND = "Mutual Fund"
    CRYPTO = "Crypto"
    GOLD = "Gold"

    @classmethod
    def parse(cls, raw: Any) -> "Category":
        if isinstance(raw, cls):
            return raw
        key = "".join(ch for ch in str(raw or "") if ch.isalnum()).lower()
        for member in cls:
            if key in (member.name.replace("_", "").lower(), member.value.replace(" ", "").lower()):
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"unknown category {raw!r} (expected one of: {allowed})")


_wire_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("name must not be empty")
    return v


class HoldingCreate(BaseModel):
    """Payload for a new holding; the id is assigned by the holding service."""

    model_config = _wire_config

    name: str = Field(max_length=255)
    category: Category
    quantity: float = Field(gt=0, allow_inf_nan=False)
    buy_price: float = Field(gt=0, allow_inf_nan=False)
    current_price: float = Field(ge=0, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _default_current_price(cls, data: Any) -> Any:
        if isinstance(data, dict):
            current = data.get("current_price", data.get("currentPrice"))
            if current is None:
                data = {k: v for k, v in data.items() if k not in ("current_price", "currentPrice")}
                data["current_price"] = data.get("buy_price", data.get("buyPrice"))
        return data

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, v: Any) -> Category:
        return Category.parse(v)


class Holding(HoldingCreate):
    """One owned position. Immutable snapshot handed to the analytics."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, max_length=64)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HoldingUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values. The id is immutable."""

    model_config = _wire_config

    name: Optional[str] = Field(default=None, max_length=255)
    category: Optional[Category] = None
    quantity: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    buy_price: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    current_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, v: Any) -> Optional[Category]:
        return None if v is None else Category.parse(v)

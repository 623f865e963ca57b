# services/holding_service.py
from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Mapping, Tuple, Union

from pydantic import ValidationError

from schemas.holding import Holding, HoldingCreate, HoldingUpdate
from services.errors import HoldingNotFoundError, InvalidHoldingError
from services.holding_repository import HoldingRepository

logger = logging.getLogger(__name__)

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

CreatePayload = Union[HoldingCreate, Mapping[str, Any]]
UpdatePayload = Union[HoldingUpdate, Mapping[str, Any]]


def new_holding_id() -> str:
    """`<epoch ms>-<9 base36 chars>`, e.g. `1760870400000-k3j9x0a1b`."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{int(time.time() * 1000)}-{suffix}"


def _validate(model, data: Any):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidHoldingError.from_validation_error(exc) from exc


def create_holding(repo: HoldingRepository, owner_id: str, payload: CreatePayload) -> Holding:
    data = _validate(HoldingCreate, payload)
    holding = _validate(
        Holding,
        {**data.model_dump(), "id": new_holding_id(), "created_at": datetime.now(timezone.utc)},
    )
    stored = repo.put(owner_id, holding)
    logger.info(
        "holding created: id=%s", stored.id,
        extra={"holding_id": stored.id, "category": stored.category.value},
    )
    return stored


def get_holding(repo: HoldingRepository, owner_id: str, holding_id: str) -> Holding:
    holding = repo.get(owner_id, holding_id)
    if holding is None:
        raise HoldingNotFoundError(holding_id)
    return holding


def update_holding(
    repo: HoldingRepository,
    owner_id: str,
    holding_id: str,
    changes: UpdatePayload,
) -> Holding:
    existing = get_holding(repo, owner_id, holding_id)
    patch = _validate(HoldingUpdate, changes).model_dump(exclude_unset=True)

    merged = {
        **existing.model_dump(),
        **patch,
        "id": existing.id,
        "updated_at": datetime.now(timezone.utc),
    }
    updated = _validate(Holding, merged)
    stored = repo.put(owner_id, updated)
    logger.info(
        "holding updated: id=%s", stored.id,
        extra={"holding_id": stored.id, "fields": sorted(patch)},
    )
    return stored


def delete_holding(repo: HoldingRepository, owner_id: str, holding_id: str) -> None:
    if not repo.delete(owner_id, holding_id):
        raise HoldingNotFoundError(holding_id)
    logger.info("holding deleted: id=%s", holding_id, extra={"holding_id": holding_id})


def list_holdings(repo: HoldingRepository, owner_id: str) -> Tuple[Holding, ...]:
    """Immutable snapshot for the analytics."""
    return tuple(repo.list(owner_id))

# rewardjar/services/reward_service.py
"""
Rewards - Business Logic Service

Rewards point at a jar through `token_type`. The reference is checked when a
reward is created and when an update changes it; after that the jar may be
deleted and the reward keeps the dangling id.

Redeeming a reward is not a server operation: callers check `is_active` and
the jar balance, then spend `token_cost` from the jar (see rewardjar.client).
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rewardjar.crud import record as record_crud
from rewardjar.models.record import RecordKind
from rewardjar.schemas.records import Reward, filter_records, parse_as
from rewardjar.schemas.reward import RewardCreate, RewardUpdate
from rewardjar.services.exceptions import (
    InvalidReferenceError,
    NotFoundError,
    StoreFailureError,
)
from rewardjar.services.token_service import get_token_or_none

logger = logging.getLogger(__name__)


def _ensure_token_exists(db: Session, token_type: str) -> None:
    if get_token_or_none(db, token_type) is None:
        raise InvalidReferenceError(token_type)


def get_reward(db: Session, reward_id: str) -> Reward:
    reward = parse_as(record_crud.get_by_id(db, reward_id), Reward)
    if reward is None:
        raise NotFoundError("Reward", reward_id)
    return reward


def list_rewards(db: Session) -> List[Reward]:
    try:
        rows = record_crud.query_by_kind(db, RecordKind.REWARD.value)
    except SQLAlchemyError as e:
        logger.exception("Listing rewards failed")
        raise StoreFailureError("Failed to get rewards") from e
    return filter_records(rows, Reward)


def create_reward(db: Session, data: RewardCreate) -> Reward:
    """
    Create an active reward.

    Args:
        db: Database session
        data: Validated reward fields

    Returns:
        The new Reward

    Raises:
        InvalidReferenceError: If `token_type` is not an existing jar
        StoreFailureError: If the insert fails
    """
    _ensure_token_exists(db, data.token_type)

    try:
        row = record_crud.put(
            db,
            RecordKind.REWARD.value,
            {
                "name": data.name,
                "description": data.description,
                "token_cost": data.token_cost,
                "token_type": data.token_type,
                "is_active": True,
            },
        )
        reward = parse_as(row, Reward)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Creating reward %r failed", data.name)
        raise StoreFailureError("Failed to create reward") from e

    logger.info("Created reward %s (%s, %d tokens)", reward.id, reward.name, reward.token_cost)
    return reward


def update_reward(db: Session, reward_id: str, data: RewardUpdate) -> Reward:
    """
    Apply a partial edit.

    The jar reference is only looked up again when the update changes it.

    Raises:
        NotFoundError: If the reward does not exist
        InvalidReferenceError: If a changed `token_type` is not an existing jar
    """
    current = get_reward(db, reward_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_type = changes.get("token_type")
    if new_type is not None and new_type != current.token_type:
        _ensure_token_exists(db, new_type)

    try:
        reward = parse_as(record_crud.update(db, reward_id, changes), Reward)
        if reward is not None:
            db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Updating reward %s failed", reward_id)
        raise StoreFailureError("Failed to update reward") from e

    if reward is None:
        db.rollback()
        raise NotFoundError("Reward", reward_id)
    return reward


def delete_reward(db: Session, reward_id: str) -> None:
    get_reward(db, reward_id)
    try:
        record_crud.delete(db, reward_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Deleting reward %s failed", reward_id)
        raise StoreFailureError("Failed to delete reward") from e


def toggle_reward_active(db: Session, reward_id: str) -> Reward:
    """Flip `is_active`; every other field is kept and `updated_at` refreshed."""
    current = get_reward(db, reward_id)

    try:
        reward = parse_as(
            record_crud.update(db, reward_id, {"is_active": not current.is_active}),
            Reward,
        )
        if reward is not None:
            db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Toggling reward %s failed", reward_id)
        raise StoreFailureError("Failed to toggle reward status") from e

    if reward is None:
        db.rollback()
        raise NotFoundError("Reward", reward_id)

    logger.info("Reward %s is now %s", reward_id, "active" if reward.is_active else "inactive")
    return reward

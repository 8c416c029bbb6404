# rewardjar/services/token_service.py
"""
Token Jars - Business Logic Service

Creating, editing and deleting jars, and moving tokens in and out of them.

Earn/spend is a read-check-write against one record. The write is a
compare-and-swap on the row version, so two concurrent spends cannot both
pass the balance check against the same count; the loser re-reads and
re-checks. The log entry is written after the balance commit and is not
rolled back with it: if the log write fails the jar keeps its new count and
the caller gets a StoreFailureError.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rewardjar.config import settings
from rewardjar.crud import record as record_crud
from rewardjar.models.record import RecordKind, TransactionKind
from rewardjar.schemas.records import Token, filter_records, parse_as
from rewardjar.schemas.token import TokenCreate, TokenUpdate
from rewardjar.services import rules, transaction_service
from rewardjar.services.exceptions import (
    ConflictError,
    NotFoundError,
    StoreFailureError,
)

logger = logging.getLogger(__name__)


# =====================================
# LOOKUPS
# =====================================

def get_token_or_none(db: Session, token_id: str) -> Optional[Token]:
    """Resolve a weak reference to a jar; None if it is gone or not a token."""
    return parse_as(record_crud.get_by_id(db, token_id), Token)


def get_token(db: Session, token_id: str) -> Token:
    token = get_token_or_none(db, token_id)
    if token is None:
        raise NotFoundError("Token", token_id)
    return token


def list_tokens(db: Session) -> List[Token]:
    try:
        rows = record_crud.query_by_kind(db, RecordKind.TOKEN.value)
    except SQLAlchemyError as e:
        logger.exception("Listing tokens failed")
        raise StoreFailureError("Failed to get tokens") from e
    return filter_records(rows, Token)


# =====================================
# JAR MANAGEMENT
# =====================================

def create_token(db: Session, data: TokenCreate) -> Token:
    """
    Create an empty jar.

    Args:
        db: Database session
        data: Validated name, color and icon

    Returns:
        The new Token with count 0

    Raises:
        StoreFailureError: If the insert fails
    """
    try:
        row = record_crud.put(
            db,
            RecordKind.TOKEN.value,
            {"name": data.name, "count": 0, "color": data.color, "icon": data.icon},
        )
        token = parse_as(row, Token)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Creating token %r failed", data.name)
        raise StoreFailureError("Failed to create token") from e

    logger.info("Created token %s (%s)", token.id, token.name)
    return token


def update_token(db: Session, token_id: str, data: TokenUpdate) -> Token:
    """
    Change a jar's name, color or icon. The count is never touched here.

    Raises:
        NotFoundError: If the jar does not exist
        StoreFailureError: If the write fails
    """
    get_token(db, token_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    try:
        token = parse_as(record_crud.update(db, token_id, changes), Token)
        if token is not None:
            db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Updating token %s failed", token_id)
        raise StoreFailureError("Failed to update token") from e

    if token is None:
        # deleted or rewritten as another kind since the lookup
        db.rollback()
        raise NotFoundError("Token", token_id)
    return token


def delete_token(db: Session, token_id: str) -> None:
    """
    Delete a jar. Rewards pointing at it are left alone and its log entries
    stay in the transaction list.
    """
    get_token(db, token_id)
    try:
        record_crud.delete(db, token_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Deleting token %s failed", token_id)
        raise StoreFailureError("Failed to delete token") from e
    logger.info("Deleted token %s", token_id)


# =====================================
# EARN / SPEND
# =====================================

def earn_tokens(
    db: Session,
    token_id: str,
    amount: int,
    description: Optional[str] = None
) -> Token:
    """
    Add tokens to a jar and log an `earn` entry.

    Args:
        db: Database session
        token_id: Jar ID
        amount: Tokens to add (>= 1)
        description: Log text, defaults to "Tokens added"

    Returns:
        The updated Token
    """
    return move_tokens(db, token_id, TransactionKind.EARN, amount, description)


def spend_tokens(
    db: Session,
    token_id: str,
    amount: int,
    description: Optional[str] = None
) -> Token:
    """
    Remove tokens from a jar and log a `spend` entry.

    Raises:
        InsufficientBalanceError: If the jar holds fewer than `amount` tokens;
            nothing is written in that case
    """
    return move_tokens(db, token_id, TransactionKind.SPEND, amount, description)


def move_tokens(
    db: Session,
    token_id: str,
    kind: TransactionKind,
    amount: int,
    description: Optional[str] = None
) -> Token:
    """
    Shared earn/spend sequence: read, check, conditional write, then log.

    Raises:
        ValidationError: Amount below one or description too long
        NotFoundError: If the jar does not exist
        InsufficientBalanceError: Spend larger than the current count
        ConflictError: The conditional write lost every attempt
        StoreFailureError: A database write failed
    """
    rules.ensure_valid_movement(amount, description)

    max_attempts = max(1, settings.TOKEN_UPDATE_MAX_RETRIES)
    verb = "earn" if kind == TransactionKind.EARN else "spend"

    for attempt in range(1, max_attempts + 1):
        row = record_crud.get_by_id(db, token_id)
        token = parse_as(row, Token)
        if token is None:
            raise NotFoundError("Token", token_id)

        if kind == TransactionKind.SPEND:
            rules.ensure_sufficient_balance(token, amount)

        moved, _ = rules.apply_token_delta(token, rules.signed_delta(kind, amount))

        try:
            stored = record_crud.update(
                db, token_id, {"count": moved.count}, expected_version=row.version
            )
            if stored is not None:
                updated = parse_as(stored, Token)
                db.commit()
                break
            db.rollback()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to %s %d tokens on %s", verb, amount, token_id)
            raise StoreFailureError(f"Failed to {verb} tokens") from e

        logger.warning(
            "Token %s changed while trying to %s (attempt %d/%d)",
            token_id, verb, attempt, max_attempts,
        )
    else:
        raise ConflictError(
            "Token was modified concurrently, please retry",
            {"token_id": token_id, "attempts": max_attempts},
        )

    try:
        transaction_service.append_transaction(
            db, token=token, kind=kind, amount=amount, description=description
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(
            "Token %s count is now %d but the %s log entry for %d tokens was not written",
            token_id, updated.count, verb, amount,
        )
        raise StoreFailureError(f"Failed to {verb} tokens") from e

    logger.info("Token %s: %s %d -> count %d", token_id, verb, amount, updated.count)
    return updated

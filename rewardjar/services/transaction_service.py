# rewardjar/services/transaction_service.py
"""
Transaction Log - Business Logic Service

Append-only log of earn/spend events. Entries are written once, right after
the jar they describe has been updated, and never changed afterwards.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rewardjar.crud import record as record_crud
from rewardjar.models.record import RecordKind, TransactionKind
from rewardjar.schemas.records import Token, Transaction, filter_records, parse_as
from rewardjar.services import rules
from rewardjar.services.exceptions import NotFoundError, StoreFailureError

logger = logging.getLogger(__name__)


def append_transaction(
    db: Session,
    *,
    token: Token,
    kind: TransactionKind,
    amount: int,
    description: Optional[str] = None,
) -> Transaction:
    """
    Write and commit one log entry for `token`.

    `token` is the jar as it was read before the mutation, so `token_name`
    records the name at event time.
    """
    row = record_crud.put(
        db,
        RecordKind.TRANSACTION.value,
        {
            "transaction_kind": kind.value,
            "token_id": token.id,
            "token_name": token.name,
            "amount": amount,
            "description": rules.describe(kind, description),
            "timestamp": record_crud.utcnow().isoformat(),
        },
    )
    transaction = parse_as(row, Transaction)
    db.commit()
    return transaction


def list_transactions(db: Session, limit: int = 50, offset: int = 0) -> List[Transaction]:
    try:
        rows = record_crud.query_by_kind_newest_first(
            db, RecordKind.TRANSACTION.value, limit=limit, offset=offset
        )
    except SQLAlchemyError as e:
        logger.exception("Listing transactions failed")
        raise StoreFailureError("Failed to get transactions") from e
    return filter_records(rows, Transaction)


def list_token_transactions(
    db: Session,
    token_id: str,
    limit: int = 50,
    offset: int = 0,
) -> List[Transaction]:
    """
    Log entries for one jar, newest first.

    Raises:
        NotFoundError: If the jar does not exist (any more)
    """
    try:
        if parse_as(record_crud.get_by_id(db, token_id), Token) is None:
            raise NotFoundError("Token", token_id)
        rows = record_crud.query_by_token_id(db, token_id, limit=limit, offset=offset)
    except SQLAlchemyError as e:
        logger.exception("Listing transactions for token %s failed", token_id)
        raise StoreFailureError("Failed to get transactions") from e
    return filter_records(rows, Transaction)

# rewardjar/crud/record.py
"""
Record Store - CRUD Operations

Kind-agnostic access to the single `records` table. Tokens, rewards and
transactions all go through these functions; callers own commit/rollback.
"""

from sqlalchemy.orm import Session
from sqlalchemy import update as sql_update
from typing import Optional, List, Dict, Any
from datetime import datetime, UTC
import uuid

from rewardjar import models

# Keys owned by the store; a merge-patch never rewrites them.
PROTECTED_KEYS = frozenset({"id", "kind", "version", "created_at", "updated_at"})


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_record_id(kind: str) -> str:
    return f"{kind}_{uuid.uuid4().hex}"


# =====================================
# WRITE OPERATIONS
# =====================================

def put(
    db: Session,
    kind: str,
    attributes: Dict[str, Any],
    record_id: Optional[str] = None
) -> models.Record:
    """
    Insert a record, or overwrite the one stored under `record_id`.

    Args:
        db: Database session
        kind: Record kind (token, reward, transaction)
        attributes: Kind-specific fields
        record_id: Explicit id; generated from the kind when omitted

    Returns:
        The stored Record row
    """
    now = utcnow()
    attributes = {k: v for k, v in attributes.items() if k not in PROTECTED_KEYS}
    record_id = record_id or new_record_id(kind)

    record = db.get(models.Record, record_id)
    if record is None:
        record = models.Record(id=record_id, kind=kind, version=1, created_at=now)
        db.add(record)
    else:
        record.kind = kind
        record.version = (record.version or 0) + 1

    record.attributes = attributes
    record.token_id = attributes.get("token_id")
    record.updated_at = now
    db.flush()
    return record


def update(
    db: Session,
    record_id: str,
    changes: Dict[str, Any],
    expected_version: Optional[int] = None
) -> Optional[models.Record]:
    """
    Merge `changes` into a record's attributes.

    The update timestamp is always refreshed and the version bumped. When
    `expected_version` is given the write only applies if the stored version
    still matches (compare-and-swap).

    Args:
        db: Database session
        record_id: Record ID
        changes: Partial attributes; id/kind and bookkeeping keys are ignored
        expected_version: Version the caller read, or None for an unconditional write

    Returns:
        Updated Record, or None if the record is missing or the version moved
    """
    current = get_by_id(db, record_id)
    if current is None:
        return None

    merged = dict(current.attributes or {})
    merged.update({k: v for k, v in changes.items() if k not in PROTECTED_KEYS})

    table = models.Record.__table__
    stmt = sql_update(table).where(table.c.id == record_id)
    if expected_version is not None:
        stmt = stmt.where(table.c.version == expected_version)

    result = db.execute(
        stmt.values(
            attributes=merged,
            token_id=merged.get("token_id"),
            version=table.c.version + 1,
            updated_at=utcnow(),
        )
    )
    if result.rowcount == 0:
        return None

    return db.get(models.Record, record_id, populate_existing=True)


def delete(db: Session, record_id: str) -> bool:
    """
    Remove a record.

    Args:
        db: Database session
        record_id: Record ID

    Returns:
        True if a row was deleted
    """
    record = get_by_id(db, record_id)
    if record is None:
        return False
    db.delete(record)
    db.flush()
    return True


# =====================================
# READ OPERATIONS
# =====================================

def get_by_id(db: Session, record_id: str) -> Optional[models.Record]:
    """
    Retrieve a record of any kind by its id.

    Args:
        db: Database session
        record_id: Record ID

    Returns:
        Record object or None if not found
    """
    return db.query(models.Record).filter(
        models.Record.id == record_id
    ).populate_existing().first()


def query_by_kind(db: Session, kind: str) -> List[models.Record]:
    """
    Retrieve every record of one kind, oldest first.

    Args:
        db: Database session
        kind: Record kind

    Returns:
        List of Record objects
    """
    return db.query(models.Record).filter(
        models.Record.kind == kind
    ).order_by(
        models.Record.created_at.asc(), models.Record.id.asc()
    ).all()


def query_by_token_id(
    db: Session,
    token_id: str,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[models.Record]:
    """
    Retrieve records indexed under a token id (its transactions), newest first.

    Args:
        db: Database session
        token_id: Token ID
        limit: Maximum number of records to return
        offset: Number of records to skip

    Returns:
        List of Record objects
    """
    query = db.query(models.Record).filter(
        models.Record.token_id == token_id
    ).order_by(
        models.Record.created_at.desc(), models.Record.id.desc()
    )
    if limit is not None:
        query = query.limit(limit)
    return query.offset(offset).all()


def query_by_kind_newest_first(
    db: Session,
    kind: str,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[models.Record]:
    """Page through one kind newest first (used for the transaction log)."""
    query = db.query(models.Record).filter(
        models.Record.kind == kind
    ).order_by(
        models.Record.created_at.desc(), models.Record.id.desc()
    )
    if limit is not None:
        query = query.limit(limit)
    return query.offset(offset).all()

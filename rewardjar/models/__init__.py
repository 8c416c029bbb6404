# rewardjar/models/__init__.py
from .record import Record, RecordKind, TransactionKind

__all__ = ["Record", "RecordKind", "TransactionKind"]

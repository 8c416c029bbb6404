# rewardjar/models/record.py
from datetime import UTC
from sqlalchemy import Column, Integer, String, JSON, DateTime
from sqlalchemy.types import TypeDecorator
from rewardjar.database import Base
import enum

class RecordKind(str, enum.Enum):
    TOKEN = "token"
    REWARD = "reward"
    TRANSACTION = "transaction"

class TransactionKind(str, enum.Enum):
    EARN = "earn"
    SPEND = "spend"

class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always hands back UTC-aware datetimes.

    SQLite drops the offset on the way in, so naive values read back are
    taken to be UTC. Aware values are normalised to UTC before they are stored.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

class Record(Base):
    """
    One row per token, reward or transaction.

    The table is kind-agnostic: everything except the key, the kind tag and
    the bookkeeping columns lives in `attributes`. `kind` and `token_id` are
    the two secondary indexes; `version` backs conditional updates.
    """
    __tablename__ = "records"

    id = Column(String(64), primary_key=True)
    kind = Column(String(20), nullable=False, index=True)
    token_id = Column(String(64), nullable=True, index=True)
    attributes = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(UTCDateTime(), nullable=False)
    updated_at = Column(UTCDateTime(), nullable=False)

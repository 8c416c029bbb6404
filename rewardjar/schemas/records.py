# rewardjar/schemas/records.py
"""
Domain records stored in the single `records` table.

`Token`, `Reward` and `Transaction` form one tagged union over `kind`.
`parse_record` turns a stored row into the matching model and returns None
for rows that do not validate, so readers skip malformed data instead of
failing a whole listing.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from rewardjar.models.record import Record, TransactionKind
from rewardjar.schemas.common import CamelModel


class Token(CamelModel):
    """A named jar of tokens."""
    id: str
    kind: Literal["token"] = "token"
    name: str
    count: int = Field(..., ge=0, description="Current balance, never negative")
    color: str
    icon: str
    created_at: datetime
    updated_at: datetime


class Reward(CamelModel):
    """A redeemable item priced in tokens from one jar."""
    id: str
    kind: Literal["reward"] = "reward"
    name: str
    description: str = ""
    token_cost: int = Field(..., ge=1)
    token_type: str = Field(..., description="Id of the jar the cost is paid from")
    is_active: bool
    created_at: datetime
    updated_at: datetime


class Transaction(CamelModel):
    """Immutable log entry of one earn or spend."""
    id: str
    kind: Literal["transaction"] = "transaction"
    transaction_kind: TransactionKind
    token_id: str
    token_name: str
    amount: int = Field(..., ge=1)
    description: str
    timestamp: datetime


AnyRecord = Annotated[Union[Token, Reward, Transaction], Field(discriminator="kind")]

_record_adapter = TypeAdapter(AnyRecord)


def record_payload(row: Record) -> Dict[str, Any]:
    payload = dict(row.attributes or {})
    payload.update(
        id=row.id,
        kind=row.kind,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
    return payload


def parse_record(row: Optional[Record]) -> Optional[Union[Token, Reward, Transaction]]:
    if row is None:
        return None
    try:
        return _record_adapter.validate_python(record_payload(row))
    except ValidationError:
        return None


def parse_as(row: Optional[Record], model: type) -> Optional[Any]:
    """Parse `row` and keep it only if it is a valid `model`."""
    record = parse_record(row)
    return record if isinstance(record, model) else None


def filter_records(rows: Iterable[Record], model: type) -> List[Any]:
    parsed = (parse_record(row) for row in rows)
    return [record for record in parsed if isinstance(record, model)]

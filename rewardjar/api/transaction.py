# rewardjar/api/transaction.py
"""
Transaction Log API Router

Endpoints:
- GET /api/transactions - Full log, newest first
- GET /api/transactions/token/{token_id} - Log for one jar
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from rewardjar.database import get_db
from rewardjar.schemas.common import ApiResponse, ok
from rewardjar.schemas.records import Transaction
from rewardjar.services import transaction_service

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=ApiResponse[List[Transaction]], response_model_exclude_none=True)
def get_all_transactions(
    limit: int = Query(50, ge=1, le=100, description="Number of transactions to return"),
    offset: int = Query(0, ge=0, description="Number of transactions to skip"),
    db: Session = Depends(get_db)
):
    return ok(transaction_service.list_transactions(db, limit, offset))


@router.get(
    "/token/{token_id}",
    response_model=ApiResponse[List[Transaction]],
    response_model_exclude_none=True,
)
def get_transactions_by_token(
    token_id: str,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """404 when the jar does not exist."""
    return ok(transaction_service.list_token_transactions(db, token_id, limit, offset))

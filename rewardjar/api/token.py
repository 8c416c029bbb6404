# rewardjar/api/token.py
"""
Token Jar API Router

Endpoints:
- GET /api/tokens - List jars
- POST /api/tokens - Create a jar
- PUT /api/tokens/{token_id} - Edit name/color/icon
- DELETE /api/tokens/{token_id} - Delete a jar
- POST /api/tokens/{token_id}/earn - Add tokens (also served at /add)
- POST /api/tokens/{token_id}/spend - Spend tokens
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from rewardjar.database import get_db
from rewardjar.schemas.common import ApiResponse, ok
from rewardjar.schemas.records import Token
from rewardjar.schemas.token import TokenAmountRequest, TokenCreate, TokenUpdate
from rewardjar.services import token_service

router = APIRouter(prefix="/api/tokens", tags=["tokens"])


# ======================
# LIST / CREATE
# ======================
@router.get("", response_model=ApiResponse[List[Token]], response_model_exclude_none=True)
def get_all_tokens(db: Session = Depends(get_db)):
    return ok(token_service.list_tokens(db))


@router.post(
    "",
    response_model=ApiResponse[Token],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_token(payload: TokenCreate, db: Session = Depends(get_db)):
    """Create a jar with count 0."""
    token = token_service.create_token(db, payload)
    return ok(token, "Token created successfully")


# ======================
# EDIT / DELETE
# ======================
@router.put("/{token_id}", response_model=ApiResponse[Token], response_model_exclude_none=True)
def update_token(token_id: str, payload: TokenUpdate, db: Session = Depends(get_db)):
    """
    Edit a jar's display fields.

    Only name, color and icon are accepted; sending `count` is a 400.
    """
    token = token_service.update_token(db, token_id, payload)
    return ok(token, "Token updated successfully")


@router.delete("/{token_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_token(token_id: str, db: Session = Depends(get_db)):
    token_service.delete_token(db, token_id)
    return ok(message="Token deleted successfully")


# ======================
# EARN / SPEND
# ======================
@router.post("/{token_id}/earn", response_model=ApiResponse[Token], response_model_exclude_none=True)
@router.post("/{token_id}/add", response_model=ApiResponse[Token], response_model_exclude_none=True)
def earn_tokens(token_id: str, payload: TokenAmountRequest, db: Session = Depends(get_db)):
    """Add tokens to a jar and log an earn transaction."""
    token = token_service.earn_tokens(db, token_id, payload.amount, payload.description)
    return ok(token, f"Earned {payload.amount} tokens")


@router.post("/{token_id}/spend", response_model=ApiResponse[Token], response_model_exclude_none=True)
def spend_tokens(token_id: str, payload: TokenAmountRequest, db: Session = Depends(get_db)):
    """
    Spend tokens from a jar and log a spend transaction.

    Returns 400 "Insufficient tokens" without changing anything when the jar
    holds fewer tokens than requested.
    """
    token = token_service.spend_tokens(db, token_id, payload.amount, payload.description)
    return ok(token, f"Spent {payload.amount} tokens")

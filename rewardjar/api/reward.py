# rewardjar/api/reward.py
"""
Reward API Router

Endpoints:
- GET /api/rewards - List rewards
- POST /api/rewards - Create a reward
- PUT /api/rewards/{reward_id} - Edit a reward
- DELETE /api/rewards/{reward_id} - Delete a reward
- PATCH /api/rewards/{reward_id}/toggle - Activate/deactivate
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from rewardjar.database import get_db
from rewardjar.schemas.common import ApiResponse, ok
from rewardjar.schemas.records import Reward
from rewardjar.schemas.reward import RewardCreate, RewardUpdate
from rewardjar.services import reward_service

router = APIRouter(prefix="/api/rewards", tags=["rewards"])


@router.get("", response_model=ApiResponse[List[Reward]], response_model_exclude_none=True)
def get_all_rewards(db: Session = Depends(get_db)):
    return ok(reward_service.list_rewards(db))


@router.post(
    "",
    response_model=ApiResponse[Reward],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_reward(payload: RewardCreate, db: Session = Depends(get_db)):
    """Create an active reward; `tokenType` must name an existing jar."""
    reward = reward_service.create_reward(db, payload)
    return ok(reward, "Reward created successfully")


@router.put("/{reward_id}", response_model=ApiResponse[Reward], response_model_exclude_none=True)
def update_reward(reward_id: str, payload: RewardUpdate, db: Session = Depends(get_db)):
    reward = reward_service.update_reward(db, reward_id, payload)
    return ok(reward, "Reward updated successfully")


@router.delete("/{reward_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_reward(reward_id: str, db: Session = Depends(get_db)):
    reward_service.delete_reward(db, reward_id)
    return ok(message="Reward deleted successfully")


@router.patch("/{reward_id}/toggle", response_model=ApiResponse[Reward], response_model_exclude_none=True)
def toggle_reward_active(reward_id: str, db: Session = Depends(get_db)):
    reward = reward_service.toggle_reward_active(db, reward_id)
    state = "activated" if reward.is_active else "deactivated"
    return ok(reward, f"Reward {state} successfully")

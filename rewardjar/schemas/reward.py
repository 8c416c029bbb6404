# rewardjar/schemas/reward.py
"""
Reward Pydantic Schemas
Request models with validation
"""

from pydantic import ConfigDict, Field
from typing import Optional

from rewardjar.schemas.common import CamelModel


class RewardCreate(CamelModel):
    """Schema for creating a reward"""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    token_cost: int = Field(..., ge=1, description="Tokens needed to redeem")
    token_type: str = Field(..., min_length=1, description="Id of the jar to pay from")

    model_config = ConfigDict(str_strip_whitespace=True)


class RewardUpdate(CamelModel):
    """Schema for updating a reward; only the fields sent are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    token_cost: Optional[int] = Field(None, ge=1)
    token_type: Optional[str] = Field(None, min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

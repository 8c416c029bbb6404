# rewardjar/schemas/token.py
"""
Token Jar Pydantic Schemas
Request models for creating, editing and moving tokens
"""

from pydantic import ConfigDict, Field
from typing import Optional

from rewardjar.schemas.common import CamelModel


# ======================
# JAR SCHEMAS
# ======================
class TokenCreate(CamelModel):
    """Create a jar; count always starts at 0"""
    name: str = Field(..., min_length=1, max_length=100, description="Jar name")
    color: str = Field(..., min_length=1, max_length=7, description="Hex color, e.g. #3B82F6")
    icon: str = Field(..., min_length=1, max_length=50, description="Emoji or icon name")

    model_config = ConfigDict(str_strip_whitespace=True)


class TokenUpdate(CamelModel):
    """Edit display fields only; the count moves through earn/spend"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=7)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


# ======================
# EARN / SPEND SCHEMA
# ======================
class TokenAmountRequest(CamelModel):
    """Body of an earn or spend call"""
    amount: int = Field(..., ge=1, description="Number of tokens to add or remove")
    description: Optional[str] = Field(None, max_length=500, description="Why the tokens moved")

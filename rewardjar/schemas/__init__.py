# rewardjar/schemas/__init__.py

# Envelope
from .common import ApiResponse, CamelModel

# Stored records
from .records import Token, Reward, Transaction, parse_record

# Request bodies
from .token import TokenCreate, TokenUpdate, TokenAmountRequest
from .reward import RewardCreate, RewardUpdate

__all__ = [
    "ApiResponse",
    "CamelModel",
    "Token",
    "Reward",
    "Transaction",
    "parse_record",
    "TokenCreate",
    "TokenUpdate",
    "TokenAmountRequest",
    "RewardCreate",
    "RewardUpdate",
]

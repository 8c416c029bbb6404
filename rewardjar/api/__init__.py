# rewardjar/api/__init__.py
# This file makes the api directory a Python package.

from . import reward
from . import token
from . import transaction

__all__ = [
    "reward",
    "token",
    "transaction",
]

# rewardjar/services/rules.py
"""
Token economy rules.

Pure functions: no database access, no logging. The services call these
between reading and writing records.
"""

from typing import Optional, Tuple

from rewardjar.models.record import TransactionKind
from rewardjar.schemas.records import Reward, Token
from rewardjar.services.exceptions import InsufficientBalanceError, ValidationError


DEFAULT_DESCRIPTIONS = {
    TransactionKind.EARN: "Tokens added",
    TransactionKind.SPEND: "Tokens spent",
}
MAX_DESCRIPTION_LENGTH = 500


def apply_token_delta(token: Token, amount: int) -> Tuple[Token, int]:
    """
    Move a jar's count by `amount`, flooring the result at zero.

    Returns the updated token and the amount actually applied, which differs
    from `amount` only when the floor engaged.
    """
    new_count = max(0, token.count + amount)
    return token.model_copy(update={"count": new_count}), new_count - token.count


def signed_delta(kind: TransactionKind, amount: int) -> int:
    return amount if kind == TransactionKind.EARN else -amount


def ensure_valid_movement(amount: int, description: Optional[str] = None) -> None:
    """
    Reject an earn/spend request the HTTP layer would also refuse.

    The services are callable without going through request validation, so
    the amount and description bounds are checked again here.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
        raise ValidationError("Amount must be a positive integer", {"amount": amount})
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
            {"length": len(description)},
        )


def ensure_sufficient_balance(token: Token, amount: int) -> None:
    if token.count < amount:
        raise InsufficientBalanceError(token.id, required=amount, available=token.count)


def describe(kind: TransactionKind, description: Optional[str] = None) -> str:
    return description or DEFAULT_DESCRIPTIONS[kind]


def can_afford(token: Token, reward: Reward) -> bool:
    return token.count >= reward.token_cost


def can_redeem(reward: Reward, token: Token) -> bool:
    """A reward is redeemable when it is active and its jar covers the cost."""
    return reward.is_active and reward.token_type == token.id and can_afford(token, reward)


def redemption_description(reward: Reward) -> str:
    return f"Redeemed: {reward.name}"

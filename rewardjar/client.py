# rewardjar/client.py
"""
HTTP client for the Reward Jar API.

Mirrors what the jar UI does: every endpoint as a method, plus reward
redemption, which has no endpoint of its own. Redeeming checks the reward is
active and the jar can cover it, then spends `tokenCost` from the jar.

Methods return plain dicts in the API's camelCase shape and raise
`RewardJarAPIError` for any `success: false` envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from rewardjar.schemas.records import Reward, Token
from rewardjar.services import rules

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT_SECS = 10.0
# Largest `limit` the transaction endpoints accept.
MAX_PAGE_SIZE = 100


@dataclass(eq=False)
class RewardJarAPIError(Exception):
    status_code: int
    error: str

    def __str__(self) -> str:
        return f"Reward Jar API error (status {self.status_code}): {self.error}"


class RedemptionError(Exception):
    """A reward cannot be redeemed right now (inactive, unaffordable or orphaned)."""


class RewardJarClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECS,
    ):
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "RewardJarClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        resp = self._http.request(method, path, json=json, params=params)
        try:
            body = resp.json()
        except ValueError:
            raise RewardJarAPIError(resp.status_code, resp.text or "Invalid response body")

        if resp.is_error or not body.get("success", False):
            raise RewardJarAPIError(resp.status_code, body.get("error") or "Request failed")
        return body

    def _data(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return self._request(method, path, json, params).get("data")

    # ----- tokens -----
    def list_tokens(self) -> List[Dict[str, Any]]:
        return self._data("GET", "/api/tokens")

    def create_token(self, name: str, color: str, icon: str) -> Dict[str, Any]:
        return self._data("POST", "/api/tokens", {"name": name, "color": color, "icon": icon})

    def update_token(self, token_id: str, **fields: str) -> Dict[str, Any]:
        return self._data("PUT", f"/api/tokens/{token_id}", fields)

    def delete_token(self, token_id: str) -> None:
        self._request("DELETE", f"/api/tokens/{token_id}")

    def earn(self, token_id: str, amount: int, description: Optional[str] = None) -> Dict[str, Any]:
        return self._data("POST", f"/api/tokens/{token_id}/earn", _amount_body(amount, description))

    def spend(self, token_id: str, amount: int, description: Optional[str] = None) -> Dict[str, Any]:
        return self._data("POST", f"/api/tokens/{token_id}/spend", _amount_body(amount, description))

    # ----- rewards -----
    def list_rewards(self) -> List[Dict[str, Any]]:
        return self._data("GET", "/api/rewards")

    def create_reward(
        self,
        name: str,
        token_cost: int,
        token_type: str,
        description: str = "",
    ) -> Dict[str, Any]:
        return self._data(
            "POST",
            "/api/rewards",
            {
                "name": name,
                "description": description,
                "tokenCost": token_cost,
                "tokenType": token_type,
            },
        )

    def update_reward(self, reward_id: str, **fields: Any) -> Dict[str, Any]:
        return self._data("PUT", f"/api/rewards/{reward_id}", fields)

    def delete_reward(self, reward_id: str) -> None:
        self._request("DELETE", f"/api/rewards/{reward_id}")

    def toggle_reward(self, reward_id: str) -> Dict[str, Any]:
        return self._data("PATCH", f"/api/rewards/{reward_id}/toggle")

    # ----- transactions -----
    def list_transactions(self, limit: Optional[int] = None, offset: int = 0) -> List[Dict[str, Any]]:
        """
        Transactions newest first.

        With `limit` this is a single page. Without it every entry from
        `offset` onwards is fetched, one server page at a time.
        """
        return self._paged("/api/transactions", limit, offset)

    def list_token_transactions(
        self,
        token_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        return self._paged(f"/api/transactions/token/{token_id}", limit, offset)

    def _paged(self, path: str, limit: Optional[int], offset: int) -> List[Dict[str, Any]]:
        if limit is not None:
            return self._data("GET", path, params={"limit": limit, "offset": offset})

        entries: List[Dict[str, Any]] = []
        while True:
            page = self._data("GET", path, params={"limit": MAX_PAGE_SIZE, "offset": offset})
            entries.extend(page)
            if len(page) < MAX_PAGE_SIZE:
                return entries
            offset += len(page)

    # ----- redemption -----
    def redeem_reward(self, reward_id: str) -> Dict[str, Any]:
        """
        Redeem a reward by spending its cost from its jar.

        Returns the updated jar. Raises RedemptionError before any write if
        the reward is inactive, its jar is gone, or the jar is short.
        """
        raw_reward = next((r for r in self.list_rewards() if r["id"] == reward_id), None)
        if raw_reward is None:
            raise RedemptionError("Reward not found")
        reward = Reward.model_validate(raw_reward)
        if not reward.is_active:
            raise RedemptionError(f"Reward {reward.name!r} is not active")

        raw_token = next((t for t in self.list_tokens() if t["id"] == reward.token_type), None)
        if raw_token is None:
            raise RedemptionError(f"Token jar for {reward.name!r} no longer exists")
        token = Token.model_validate(raw_token)
        if not rules.can_redeem(reward, token):
            raise RedemptionError("Not enough tokens to redeem this reward!")

        return self.spend(token.id, reward.token_cost, rules.redemption_description(reward))


def _amount_body(amount: int, description: Optional[str]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"amount": amount}
    if description is not None:
        body["description"] = description
    return body

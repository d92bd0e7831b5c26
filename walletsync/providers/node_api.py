"""Async client for the full node's wallet and staking REST endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..core.recovery.errors import NO_CONNECTIVITY_STATUS, ErrorEntry, NodeApiFailure
from .base import NodeApiProvider

logger = logging.getLogger(__name__)


BALANCE_PATH = "/api/wallet/balance"
HISTORY_PATH = "/api/wallet/history"
STAKING_INFO_PATH = "/api/staking/getstakinginfo"
START_STAKING_PATH = "/api/staking/startstaking"
STOP_STAKING_PATH = "/api/staking/stopstaking"
STAKING_HISTORY_PATH = "/api/staking/history"


def _parse_error_entries(response: httpx.Response) -> Optional[List[ErrorEntry]]:
    """Extract the node's `errors` list, or None when the body has none."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if not isinstance(errors, list):
        return None
    return [ErrorEntry.from_payload(e) for e in errors if isinstance(e, dict)]


class NodeApiClient(NodeApiProvider):
    """Thin wrapper around the node's /api/wallet and /api/staking endpoints."""

    name = "fullnode"

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.node_api_url).rstrip("/")
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
        except httpx.RequestError as exc:
            logger.debug("Node request %s %s did not complete: %s", method, path, exc)
            raise NodeApiFailure(
                NO_CONNECTIVITY_STATUS,
                message=f"Could not reach node at {self.base_url}: {exc}",
            ) from exc

        if not (200 <= response.status_code < 400):
            raise NodeApiFailure(
                response.status_code,
                _parse_error_entries(response),
                message=f"{method} {path} returned {response.status_code}",
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def get_balance(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        resp = await self._request(
            "GET",
            BALANCE_PATH,
            params={"WalletName": wallet_name, "AccountName": account_name},
        )
        return self._json(resp)

    async def get_history(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        resp = await self._request(
            "GET",
            HISTORY_PATH,
            params={"WalletName": wallet_name, "AccountName": account_name},
        )
        return self._json(resp)

    async def get_staking_info(self) -> Dict[str, Any]:
        resp = await self._request("GET", STAKING_INFO_PATH)
        return self._json(resp)

    async def start_staking(self, name: str, password: str) -> None:
        await self._request("POST", START_STAKING_PATH, json={"name": name, "password": password})

    async def stop_staking(self) -> None:
        # The endpoint binds a bare boolean body
        await self._request("POST", STOP_STAKING_PATH, json=True)

    async def get_staking_history(self, wallet_name: str) -> List[Dict[str, Any]]:
        resp = await self._request("GET", STAKING_HISTORY_PATH, params={"walletName": wallet_name})
        return self._json(resp) or []

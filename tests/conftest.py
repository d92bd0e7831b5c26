"""
Shared fixtures for the wallet sync tests.

FakeNodeProvider stands in for the node API: each method either returns a
default payload, the next queued response, raises a queued NodeApiFailure,
or waits on a Gate until the test releases it.
"""

import asyncio
import copy
from collections import defaultdict, deque
from typing import Any, Dict, List, Optional, Tuple

import pytest

from walletsync.core.recovery import ErrorEntry, NodeApiFailure
from walletsync.core.sync import WalletSyncSession
from walletsync.providers.base import NodeApiProvider


WALLET_NAME = "demo-wallet"

BALANCE_PAYLOAD: Dict[str, Any] = {
    "balances": [
        {
            "accountName": "account 0",
            "accountHdPath": "m/44'/105'/0'",
            "coinType": 105,
            "amountConfirmed": 150000000,
            "amountUnconfirmed": 2500000,
        }
    ]
}

HISTORY_PAYLOAD: Dict[str, Any] = {
    "history": [
        {
            "accountName": "account 0",
            "transactionsHistory": [
                {
                    "type": "send",
                    "id": "a1",
                    "amount": 100000000,
                    "fee": 10000,
                    "confirmedInBlock": 1200,
                    "timestamp": "1530000000",
                },
                {
                    "type": "received",
                    "id": "b2",
                    "amount": 250000000,
                    "confirmedInBlock": 1190,
                    "timestamp": "1529990000",
                },
                {
                    "type": "staked",
                    "id": "c3",
                    "amount": 2000000,
                    "fee": None,
                    "confirmedInBlock": None,
                    "timestamp": "1530001000",
                },
            ],
        }
    ]
}

STAKING_PAYLOAD: Dict[str, Any] = {
    "enabled": True,
    "staking": True,
    "errors": None,
    "currentBlockSize": 151,
    "weight": 152500000,
    "netStakeWeight": 4200000000000,
    "expectedTime": 90061,
}


class Gate:
    """A response that only arrives once the test releases it."""

    def __init__(self, result: Any = None, *, ignore_cancel: bool = False):
        self.result = result
        self.ignore_cancel = ignore_cancel
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def wait(self) -> Any:
        try:
            await self._released.wait()
        except asyncio.CancelledError:
            # Models a request that keeps running after the caller gave up on it
            if not self.ignore_cancel:
                raise
            await self._released.wait()
        return self.result


class FakeNodeProvider(NodeApiProvider):
    name = "fake"

    def __init__(self) -> None:
        self.defaults: Dict[str, Any] = {
            "get_balance": BALANCE_PAYLOAD,
            "get_history": HISTORY_PAYLOAD,
            "get_staking_info": STAKING_PAYLOAD,
            "start_staking": None,
            "stop_staking": None,
            "get_staking_history": [],
        }
        self.queued: Dict[str, deque] = defaultdict(deque)
        self.calls: Dict[str, List[Tuple[Any, ...]]] = defaultdict(list)

    def queue(self, method: str, *responses: Any) -> None:
        self.queued[method].extend(responses)

    def call_count(self, method: str) -> int:
        return len(self.calls[method])

    async def _respond(self, method: str, *args: Any) -> Any:
        self.calls[method].append(args)
        if self.queued[method]:
            item = self.queued[method].popleft()
        else:
            item = copy.deepcopy(self.defaults[method])

        # Let the other in-flight requests start before this one resolves
        await asyncio.sleep(0)

        if isinstance(item, Gate):
            item = await item.wait()
        if isinstance(item, BaseException):
            raise item
        return item

    async def get_balance(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        return await self._respond("get_balance", wallet_name, account_name)

    async def get_history(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        return await self._respond("get_history", wallet_name, account_name)

    async def get_staking_info(self) -> Dict[str, Any]:
        return await self._respond("get_staking_info")

    async def start_staking(self, name: str, password: str) -> None:
        await self._respond("start_staking", name, password)

    async def stop_staking(self) -> None:
        await self._respond("stop_staking")

    async def get_staking_history(self, wallet_name: str) -> List[Dict[str, Any]]:
        return await self._respond("get_staking_history", wallet_name)


def failure(status_code: int, message: Optional[str] = None, description: Optional[str] = None, *, entries: bool = True) -> NodeApiFailure:
    """Build a NodeApiFailure the way the transport would."""
    if not entries:
        return NodeApiFailure(status_code, [])
    return NodeApiFailure(status_code, [ErrorEntry(message=message, description=description, status=status_code)])


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def provider() -> FakeNodeProvider:
    return FakeNodeProvider()


@pytest.fixture
def notifications() -> List[Tuple[Optional[str], Optional[str]]]:
    return []


@pytest.fixture
def notifier(notifications):
    def _notify(title: Optional[str], message: Optional[str]) -> None:
        notifications.append((title, message))

    return _notify


@pytest.fixture
def session(provider, notifier) -> WalletSyncSession:
    return WalletSyncSession(provider, WALLET_NAME, notifier=notifier)


@pytest.fixture
def make_gate():
    return Gate


@pytest.fixture
def make_failure():
    return failure


@pytest.fixture
def payloads() -> Dict[str, Dict[str, Any]]:
    return {
        "balance": copy.deepcopy(BALANCE_PAYLOAD),
        "history": copy.deepcopy(HISTORY_PAYLOAD),
        "staking": copy.deepcopy(STAKING_PAYLOAD),
    }

"""
Wallet Sync Session

Owns the entity state, poll handles and staking controller of one wallet.
Nothing here is shared between sessions. Closing a session cancels every
outstanding poll before the state is released.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ...config import settings
from ...providers.base import NodeApiProvider
from ...types.node import RawStakingHistoryItem, parse_payload
from ..recovery import DirectiveAction, MalformedResponseError, NodeApiFailure, classify_staking_failure
from .history import normalize_staking_history
from .models import Notifier, StakingHistoryItem, WalletIdentity, WalletState
from .polling import PollHandle, PollLifecycleManager
from .staking import StakingController

logger = logging.getLogger(__name__)


def log_notifier(title: Optional[str], message: Optional[str]) -> None:
    """Default notification hook: log what a dialog would have shown."""
    logger.warning(
        "Notification: %s",
        message or "Could not reach the node. Please check that it is running.",
        extra={"title": title},
    )


class SessionClosedError(RuntimeError):
    """Raised when a closed session is asked to issue more requests."""


class WalletSyncSession:
    """Live state of one wallet, fed by single-shot polls."""

    def __init__(
        self,
        provider: NodeApiProvider,
        wallet_name: str,
        *,
        account_name: Optional[str] = None,
        notifier: Optional[Notifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.identity = WalletIdentity(
            name=wallet_name,
            account_name=account_name or settings.account_name,
        )
        self.provider = provider
        self.state = WalletState()
        self.notifier: Notifier = notifier or log_notifier
        self.logger = logger or logging.getLogger(__name__)
        self._closed = False

        self.staking = StakingController(
            provider,
            self.identity,
            self.state,
            self.notifier,
            logger=self.logger.getChild("staking"),
        )
        self.polls = PollLifecycleManager(
            provider,
            self.identity,
            self.state,
            self.notifier,
            on_staking_status=self.staking.reconcile,
            logger=self.logger.getChild("polls"),
        )

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session for wallet {self.identity.name} is closed")

    # ---------------------------
    # Polling
    # ---------------------------
    def start(self) -> List[PollHandle]:
        """Issue one balance, history and staking-status fetch."""
        self._ensure_open()
        return self.polls.start()

    async def refresh(self) -> WalletState:
        """Run one sync cycle to completion and return the resulting state."""
        self.start()
        await self.polls.wait()
        return self.state

    # ---------------------------
    # Staking
    # ---------------------------
    async def start_staking(self, password: Optional[str] = None) -> bool:
        self._ensure_open()
        return await self.staking.start_staking(password)

    async def stop_staking(self) -> bool:
        self._ensure_open()
        return await self.staking.stop_staking()

    async def fetch_staking_history(self) -> Optional[List[StakingHistoryItem]]:
        """
        Fetch past staking events for the wallet.

        Failures are classified like a staking action: they may notify the
        user but never touch the status polls. Returns None on failure.
        """
        self._ensure_open()
        try:
            payload = await self.provider.get_staking_history(self.identity.name)
            items = [parse_payload(RawStakingHistoryItem, item) for item in payload or []]
        except NodeApiFailure as failure:
            directive = classify_staking_failure(failure)
            self.logger.warning(
                "Staking history failed with status %s: %s -> %s",
                failure.status_code,
                directive.category.value,
                directive.action.value,
            )
            if directive.action == DirectiveAction.NOTIFY:
                self.notifier(None, directive.message)
            return None
        except MalformedResponseError as exc:
            self.logger.warning("Discarding malformed staking history: %s", exc.message)
            return None
        return normalize_staking_history(items)

    # ---------------------------
    # Teardown
    # ---------------------------
    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.polls.cancel_all()
        tasks = [h.task for h in self.polls.handles.values() if h.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.logger.debug("Closed sync session for wallet %s", self.identity.name)

    async def __aenter__(self) -> "WalletSyncSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.close()

    def snapshot(self) -> Dict[str, Any]:
        data = self.state.to_dict()
        data["wallet"] = self.identity.name
        data["stakingState"] = self.staking.state.value
        return data

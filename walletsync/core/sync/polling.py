"""
Poll Lifecycle Manager

Issues the balance, history and staking-status fetches for one wallet as
independent asyncio tasks and tracks each one with a PollHandle.

Each fetch is single-shot. A handle is marked cancelled synchronously by
`cancel_all()`, and every fetch checks its handle before writing state, so
a request that is still in flight when it gets cancelled can never apply
its result afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional
from uuid import uuid4

from ...providers.base import NodeApiProvider
from ...types.node import BalanceResponse, HistoryResponse, StakingInfoResponse, parse_payload
from ..recovery import (
    DirectiveAction,
    ErrorDirective,
    MalformedResponseError,
    NodeApiFailure,
    classify_poll_failure,
)
from .history import normalize_history
from .models import (
    BalanceSnapshot,
    Notifier,
    PollKind,
    StakingStatus,
    WalletIdentity,
    WalletState,
)


StakingStatusCallback = Callable[[StakingStatus], None]


class PollState(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


def _running_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


@dataclass
class PollHandle:
    """Lifecycle of one fetch. Cancelling is idempotent."""

    kind: PollKind
    generation: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))
    state: PollState = PollState.ACTIVE
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task: Optional[asyncio.Task] = None

    @property
    def is_cancelled(self) -> bool:
        return self.state == PollState.CANCELLED

    @property
    def done(self) -> bool:
        return self.task is not None and self.task.done()

    def cancel(self) -> bool:
        """Mark the handle cancelled. Returns False if it already was."""
        if self.state == PollState.CANCELLED:
            return False
        self.state = PollState.CANCELLED
        # A fetch that cancels its own batch (restart from inside a failure)
        # finishes its current step; the state check keeps it from writing.
        if self.task is not None and not self.task.done() and self.task is not _running_task():
            self.task.cancel()
        return True


class PollLifecycleManager:
    """
    Owns the three status polls of a sync session.

    Results are written to the shared WalletState; failures are classified
    and their directives executed here (notify, log, restart everything, or
    cancel the batch on connectivity loss).
    """

    def __init__(
        self,
        provider: NodeApiProvider,
        identity: WalletIdentity,
        state: WalletState,
        notifier: Notifier,
        on_staking_status: Optional[StakingStatusCallback] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.provider = provider
        self.identity = identity
        self.state = state
        self._notifier = notifier
        self._on_staking_status = on_staking_status
        self.logger = logger or logging.getLogger(__name__)

        self._handles: Dict[PollKind, PollHandle] = {}
        self._generation = 0
        self._fetchers: Dict[PollKind, Callable[[], Awaitable[Any]]] = {
            PollKind.BALANCE: self._fetch_balance,
            PollKind.HISTORY: self._fetch_history,
            PollKind.STAKING_STATUS: self._fetch_staking_status,
        }
        self._appliers: Dict[PollKind, Callable[[Any], None]] = {
            PollKind.BALANCE: self._apply_balance,
            PollKind.HISTORY: self._apply_history,
            PollKind.STAKING_STATUS: self._apply_staking_status,
        }

    # ---------------------------
    # Introspection
    # ---------------------------
    @property
    def handles(self) -> Dict[PollKind, PollHandle]:
        return dict(self._handles)

    @property
    def generation(self) -> int:
        """Number of batches issued so far."""
        return self._generation

    @property
    def active_handles(self) -> List[PollHandle]:
        return [h for h in self._handles.values() if not h.is_cancelled and not h.done]

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def start(self) -> List[PollHandle]:
        """
        Issue one balance, one history and one staking-status fetch.

        Any batch still tracked is cancelled first, so only the newest
        handles can write state.
        """
        self.cancel_all()
        self._generation += 1
        issued: List[PollHandle] = []
        for kind in PollKind:
            handle = PollHandle(kind=kind, generation=self._generation)
            handle.task = asyncio.create_task(
                self._run(handle),
                name=f"poll-{kind.value}-{self._generation}",
            )
            self._handles[kind] = handle
            issued.append(handle)
        self.logger.debug(
            "Issued poll batch %d for wallet %s",
            self._generation,
            self.identity.name,
        )
        return issued

    def cancel_all(self) -> int:
        """Cancel every tracked poll. Returns how many were newly cancelled."""
        cancelled = sum(1 for handle in self._handles.values() if handle.cancel())
        if cancelled:
            self.logger.debug("Cancelled %d poll(s) for wallet %s", cancelled, self.identity.name)
        return cancelled

    def restart(self) -> List[PollHandle]:
        return self.start()

    async def wait(self) -> None:
        """Wait until the tracked polls, including restarted ones, have finished."""
        while True:
            pending = [h for h in self._handles.values() if h.task is not None and not h.task.done()]
            if not pending:
                return
            results = await asyncio.gather(*(h.task for h in pending), return_exceptions=True)
            for handle, result in zip(pending, results):
                if isinstance(result, Exception):
                    self.logger.error(
                        "%s poll crashed: %r",
                        handle.kind.value,
                        result,
                        exc_info=result,
                    )

    # ---------------------------
    # Fetch execution
    # ---------------------------
    async def _run(self, handle: PollHandle) -> None:
        try:
            result = await self._fetchers[handle.kind]()
        except NodeApiFailure as failure:
            if handle.is_cancelled:
                self.logger.debug("Ignoring failure of cancelled %s poll", handle.kind.value)
                return
            self._handle_failure(handle, failure)
            return
        except MalformedResponseError as exc:
            if not handle.is_cancelled:
                self.logger.warning(
                    "Discarding malformed %s response: %s",
                    handle.kind.value,
                    exc.message,
                )
            return

        if handle.is_cancelled:
            self.logger.debug("Discarding late result of cancelled %s poll", handle.kind.value)
            return

        self._appliers[handle.kind](result)
        self.state.mark_updated(handle.kind)

    def _handle_failure(self, handle: PollHandle, failure: NodeApiFailure) -> ErrorDirective:
        directive = classify_poll_failure(failure)
        self.logger.warning(
            "%s poll failed with status %s: %s -> %s",
            handle.kind.value,
            failure.status_code,
            directive.category.value,
            directive.action.value,
        )

        if directive.cancel_polls:
            self.cancel_all()

        if directive.action == DirectiveAction.NOTIFY:
            self._notifier(None, directive.message)
        elif directive.action == DirectiveAction.RESTART_ALL:
            self.logger.info("Restarting all polls for wallet %s", self.identity.name)
            self.restart()

        return directive

    # ---------------------------
    # Fetchers
    # ---------------------------
    async def _fetch_balance(self) -> BalanceSnapshot:
        payload = await self.provider.get_balance(self.identity.name, self.identity.account_name)
        response = parse_payload(BalanceResponse, payload)
        if not response.balances:
            raise MalformedResponseError("Balance response has no accounts", payload=payload)
        # TODO: pick the account by name once multi-account wallets are exposed
        account = response.balances[0]
        return BalanceSnapshot(
            confirmed=account.amount_confirmed,
            unconfirmed=account.amount_unconfirmed,
        )

    async def _fetch_history(self) -> HistoryResponse:
        payload = await self.provider.get_history(self.identity.name, self.identity.account_name)
        return parse_payload(HistoryResponse, payload)

    async def _fetch_staking_status(self) -> StakingStatus:
        payload = await self.provider.get_staking_info()
        response = parse_payload(StakingInfoResponse, payload)
        return StakingStatus(
            enabled=response.enabled,
            active=response.staking,
            weight=response.weight,
            net_weight=response.net_stake_weight,
            expected_seconds=response.expected_time,
        )

    # ---------------------------
    # Appliers
    # ---------------------------
    def _apply_balance(self, balance: BalanceSnapshot) -> None:
        self.state.balance = balance

    def _apply_history(self, response: HistoryResponse) -> None:
        transactions = response.history[0].transactions_history if response.history else []
        self.state.transactions = normalize_history(transactions)

    def _apply_staking_status(self, status: StakingStatus) -> None:
        self.state.staking = status
        if self._on_staking_status is not None:
            self._on_staking_status(status)

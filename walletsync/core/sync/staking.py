"""
Staking Control State Machine

Drives user-initiated start/stop staking requests. The node's staking
status is the durable source of truth; `is_starting` and `is_stopping`
are overlays that only the next staking-status poll clears on the success
path.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ...providers.base import NodeApiProvider
from ..recovery import DirectiveAction, ErrorDirective, NodeApiFailure, classify_staking_failure
from .models import Notifier, StakingStatus, WalletIdentity, WalletState


class StakingState(str, Enum):
    """Staking state as shown to the user."""

    IDLE = "idle"          # Not staking, nothing in flight
    STARTING = "starting"  # Start requested, waiting for the node to report staking
    ACTIVE = "active"      # Node reports staking
    STOPPING = "stopping"  # Stop requested, waiting for the node to report idle


class StakingTrigger(str, Enum):
    """What caused a staking state change."""

    USER_ACTION = "user_action"
    REQUEST_FAILED = "request_failed"
    STATUS_POLL = "status_poll"


@dataclass
class StakingTransition:
    """Record of a staking state change."""

    from_state: StakingState
    to_state: StakingState
    trigger: StakingTrigger
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromState": self.from_state.value,
            "toState": self.to_state.value,
            "trigger": self.trigger.value,
            "timestamp": self.timestamp.isoformat(),
            "reason": self.reason,
        }


@dataclass
class StakingForm:
    """Password input of the staking form. Cleared after every start attempt."""

    wallet_password: str = ""

    def clear(self) -> None:
        self.wallet_password = ""


class StakingController:
    """
    Start/stop staking for one wallet.

    Failures are classified with the staking classifier, which never asks
    for a poll restart: a failed action only rolls back its own flags.
    """

    def __init__(
        self,
        provider: NodeApiProvider,
        identity: WalletIdentity,
        state: WalletState,
        notifier: Notifier,
        logger: Optional[logging.Logger] = None,
    ):
        self.provider = provider
        self.identity = identity
        self.wallet_state = state
        self.form = StakingForm()
        self._notifier = notifier
        self.logger = logger or logging.getLogger(__name__)
        self.transitions: List[StakingTransition] = []

    @property
    def state(self) -> StakingState:
        flags = self.wallet_state.flags
        if flags.is_starting:
            return StakingState.STARTING
        if flags.is_stopping:
            return StakingState.STOPPING
        if self.wallet_state.staking.active:
            return StakingState.ACTIVE
        return StakingState.IDLE

    async def start_staking(self, password: Optional[str] = None) -> bool:
        """
        Ask the node to start staking.

        Args:
            password: Wallet password; defaults to the staking form field

        Returns:
            True if the node accepted the request
        """
        if password is None:
            password = self.form.wallet_password

        before = self.state
        self.wallet_state.flags.mark_starting()
        self._record(before, StakingTrigger.USER_ACTION, "Start staking requested")

        try:
            await self.provider.start_staking(self.identity.name, password)
        except NodeApiFailure as failure:
            before = self.state
            self.wallet_state.flags.is_starting = False
            self.wallet_state.staking.enabled = False
            self.form.clear()
            self._record(before, StakingTrigger.REQUEST_FAILED, "Start staking failed")
            self._apply_directive("start", failure)
            return False

        # is_starting stays set until a status poll reports the node staking
        self.wallet_state.staking.enabled = True
        self.form.clear()
        self.logger.info("Start staking accepted for wallet %s", self.identity.name)
        return True

    async def stop_staking(self) -> bool:
        """Ask the node to stop staking. Returns True if the node accepted."""
        before = self.state
        self.wallet_state.flags.mark_stopping()
        self._record(before, StakingTrigger.USER_ACTION, "Stop staking requested")

        try:
            await self.provider.stop_staking()
        except NodeApiFailure as failure:
            # Flags stay as set above; the next status poll corrects them
            self._apply_directive("stop", failure)
            return False

        self.wallet_state.staking.enabled = False
        self.logger.info("Stop staking accepted for wallet %s", self.identity.name)
        return True

    def reconcile(self, status: StakingStatus) -> None:
        """Clear the overlay flag the latest staking-status poll has settled."""
        before = self.state
        if status.active:
            self.wallet_state.flags.is_starting = False
        else:
            self.wallet_state.flags.is_stopping = False
        self._record(before, StakingTrigger.STATUS_POLL, "Staking status received")

    def _apply_directive(self, action: str, failure: NodeApiFailure) -> ErrorDirective:
        directive = classify_staking_failure(failure)
        self.logger.warning(
            "%s staking failed with status %s: %s -> %s",
            action.capitalize(),
            failure.status_code,
            directive.category.value,
            directive.action.value,
        )
        if directive.action == DirectiveAction.NOTIFY:
            self._notifier(None, directive.message)
        return directive

    def _record(self, from_state: StakingState, trigger: StakingTrigger, reason: str) -> None:
        to_state = self.state
        if to_state == from_state:
            return
        self.transitions.append(
            StakingTransition(
                from_state=from_state,
                to_state=to_state,
                trigger=trigger,
                reason=reason,
            )
        )
        self.logger.info(
            "Staking %s: %s -> %s (%s)",
            self.identity.name,
            from_state.value,
            to_state.value,
            reason,
        )

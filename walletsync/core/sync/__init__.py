"""
Wallet Sync Module

Single-shot status polling, history normalization and staking control
for a full-node wallet.
"""

from .formatting import format_amount, seconds_to_string
from .history import map_transaction_kind, normalize_history, normalize_staking_history
from .models import (
    BalanceSnapshot,
    Notifier,
    PollKind,
    StakingActionFlags,
    StakingHistoryItem,
    StakingStatus,
    TransactionKind,
    TransactionRecord,
    WalletIdentity,
    WalletState,
)
from .polling import PollHandle, PollLifecycleManager, PollState
from .session import SessionClosedError, WalletSyncSession, log_notifier
from .staking import (
    StakingController,
    StakingForm,
    StakingState,
    StakingTransition,
    StakingTrigger,
)

__all__ = [
    # Session
    "WalletSyncSession",
    "SessionClosedError",
    "log_notifier",
    # Polling
    "PollLifecycleManager",
    "PollHandle",
    "PollState",
    # Staking
    "StakingController",
    "StakingForm",
    "StakingState",
    "StakingTransition",
    "StakingTrigger",
    # Models
    "BalanceSnapshot",
    "Notifier",
    "PollKind",
    "StakingActionFlags",
    "StakingHistoryItem",
    "StakingStatus",
    "TransactionKind",
    "TransactionRecord",
    "WalletIdentity",
    "WalletState",
    # Pure helpers
    "format_amount",
    "map_transaction_kind",
    "normalize_history",
    "normalize_staking_history",
    "seconds_to_string",
]

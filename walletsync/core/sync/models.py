"""
Wallet Sync Models

Entity state owned by a sync session: balance, transaction history,
staking status and the transient staking overlay flags.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .formatting import seconds_to_string


class TransactionKind(str, Enum):
    """Display kind of a wallet transaction."""

    SENT = "sent"
    RECEIVED = "received"
    STAKED = "staked"


class PollKind(str, Enum):
    """The three status fetches issued per sync cycle."""

    BALANCE = "balance"
    HISTORY = "history"
    STAKING_STATUS = "staking_status"


@dataclass(frozen=True)
class WalletIdentity:
    """Wallet the session is bound to. Fixed for the session's lifetime."""

    name: str
    account_name: str = "account 0"


@dataclass
class BalanceSnapshot:
    confirmed: int = 0
    unconfirmed: int = 0

    @property
    def has_balance(self) -> bool:
        return (self.confirmed + self.unconfirmed) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confirmed": self.confirmed,
            "unconfirmed": self.unconfirmed,
            "hasBalance": self.has_balance,
        }


@dataclass
class TransactionRecord:
    """
    One display-ready wallet transaction.

    `kind` is None when the node reported a type this client does not know;
    `raw_type` keeps the original string in every case.
    """

    kind: Optional[TransactionKind]
    id: str
    amount: int
    fee: int = 0
    confirmed_in_block: Optional[int] = None
    timestamp: Union[int, str, None] = None
    raw_type: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_in_block is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value if self.kind else None,
            "rawType": self.raw_type,
            "id": self.id,
            "amount": self.amount,
            "fee": self.fee,
            "confirmedInBlock": self.confirmed_in_block,
            "timestamp": self.timestamp,
        }


@dataclass
class StakingStatus:
    enabled: bool = False
    active: bool = False
    weight: int = 0
    net_weight: int = 0
    expected_seconds: int = 0

    @property
    def expected_duration_text(self) -> str:
        return seconds_to_string(self.expected_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "active": self.active,
            "weight": self.weight,
            "netWeight": self.net_weight,
            "expectedSeconds": self.expected_seconds,
            "expectedDurationText": self.expected_duration_text,
        }


@dataclass
class StakingActionFlags:
    """
    UI overlay for an in-flight staking action.

    Only correct until the next staking-status poll arrives. At most one
    flag is set intentionally; setting one clears the other.
    """

    is_starting: bool = False
    is_stopping: bool = False

    def mark_starting(self) -> None:
        self.is_starting = True
        self.is_stopping = False

    def mark_stopping(self) -> None:
        self.is_stopping = True
        self.is_starting = False


@dataclass
class StakingHistoryItem:
    status: str
    side: str
    amount: str
    date_time: str
    wallet: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "side": self.side,
            "amount": self.amount,
            "dateTime": self.date_time,
            "wallet": self.wallet,
        }


@dataclass
class WalletState:
    """All entity state of one sync session."""

    balance: BalanceSnapshot = field(default_factory=BalanceSnapshot)
    transactions: List[TransactionRecord] = field(default_factory=list)
    staking: StakingStatus = field(default_factory=StakingStatus)
    flags: StakingActionFlags = field(default_factory=StakingActionFlags)

    # When each poll last applied a result
    updated_at: Dict[PollKind, datetime] = field(default_factory=dict)

    @property
    def has_balance(self) -> bool:
        return self.balance.has_balance

    def mark_updated(self, kind: PollKind) -> None:
        self.updated_at[kind] = datetime.now(timezone.utc)

    def is_loaded(self, kind: PollKind) -> bool:
        return kind in self.updated_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balance": self.balance.to_dict(),
            "hasBalance": self.has_balance,
            "transactions": [t.to_dict() for t in self.transactions],
            "staking": self.staking.to_dict(),
            "isStarting": self.flags.is_starting,
            "isStopping": self.flags.is_stopping,
            "updatedAt": {k.value: v.isoformat() for k, v in self.updated_at.items()},
        }


# notify(title, message) hook supplied by the presentation layer
Notifier = Callable[[Optional[str], Optional[str]], None]

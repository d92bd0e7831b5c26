from .node import (
    AccountBalance,
    AccountHistory,
    BalanceResponse,
    HistoryResponse,
    RawStakingHistoryItem,
    RawTransaction,
    StakingInfoResponse,
    parse_payload,
)

__all__ = [
    "AccountBalance",
    "AccountHistory",
    "BalanceResponse",
    "HistoryResponse",
    "RawStakingHistoryItem",
    "RawTransaction",
    "StakingInfoResponse",
    "parse_payload",
]

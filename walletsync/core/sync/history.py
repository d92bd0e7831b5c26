"""Normalization of raw node transaction listings into display records."""

from typing import Dict, Iterable, List, Optional

from ...types.node import RawStakingHistoryItem, RawTransaction
from .models import StakingHistoryItem, TransactionKind, TransactionRecord


# Node type string -> display kind. Anything else stays unmapped.
TRANSACTION_KINDS: Dict[str, TransactionKind] = {
    "send": TransactionKind.SENT,
    "received": TransactionKind.RECEIVED,
    "staked": TransactionKind.STAKED,
}


def map_transaction_kind(raw_type: Optional[str]) -> Optional[TransactionKind]:
    if raw_type is None:
        return None
    return TRANSACTION_KINDS.get(raw_type)


def normalize_history(transactions: Iterable[RawTransaction]) -> List[TransactionRecord]:
    """
    Build a fresh list of TransactionRecords.

    The result is meant to replace whatever list the caller held before;
    it is never merged into an existing one.
    """
    records: List[TransactionRecord] = []
    for transaction in transactions:
        records.append(
            TransactionRecord(
                kind=map_transaction_kind(transaction.type),
                id=transaction.id,
                amount=transaction.amount,
                fee=transaction.fee or 0,
                confirmed_in_block=transaction.confirmed_in_block,
                timestamp=transaction.timestamp,
                raw_type=transaction.type,
            )
        )
    return records


def normalize_staking_history(items: Iterable[RawStakingHistoryItem]) -> List[StakingHistoryItem]:
    return [
        StakingHistoryItem(
            status=item.status,
            side=item.side,
            amount=item.amount,
            date_time=item.date_time,
            wallet=item.wallet,
        )
        for item in items
    ]

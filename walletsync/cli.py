#!/usr/bin/env python3
"""Command line front end for checking a wallet and controlling staking"""

import argparse
import asyncio
import getpass
import sys
from datetime import datetime, timezone
from typing import List, Optional

from .config import settings
from .core.sync import (
    StakingHistoryItem,
    WalletState,
    WalletSyncSession,
    format_amount,
)
from .logging_config import bind_wallet_context, setup_logging
from .providers import NodeApiClient


def print_notification(title: Optional[str], message: Optional[str]) -> None:
    """Notification hook used by the CLI"""
    text = message or "Could not reach the node. Please check that it is running."
    if title:
        text = f"{title}: {text}"
    print(f"⚠️  {text}")


def _coins(amount: int) -> str:
    return f"{format_amount(amount, settings.coin_decimals)} {settings.coin_unit}"


def _format_timestamp(timestamp) -> str:
    try:
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
    except (TypeError, ValueError, OverflowError):
        return str(timestamp or "")


def print_state(wallet_name: str, state: WalletState, staking_state: str, limit: int = 10) -> None:
    """Pretty print one sync cycle"""
    print(f"\n💼 Wallet: {wallet_name}")
    print("=" * 50)
    print(f"Confirmed:   {_coins(state.balance.confirmed)}")
    print(f"Unconfirmed: {_coins(state.balance.unconfirmed)}")
    if not state.has_balance:
        print("No balance yet")

    staking = state.staking
    print("\nStaking")
    print("-" * 50)
    print(f"State:          {staking_state}")
    print(f"Enabled:        {'yes' if staking.enabled else 'no'}")
    print(f"Weight:         {_coins(staking.weight)}")
    print(f"Network weight: {_coins(staking.net_weight)}")
    print(f"Expected in:    {staking.expected_duration_text}")

    if state.transactions:
        print(f"\nLatest transactions ({min(limit, len(state.transactions))} of {len(state.transactions)})")
        print("-" * 50)
        for record in state.transactions[:limit]:
            kind = record.kind.value if record.kind else f"? ({record.raw_type})"
            block = record.confirmed_in_block if record.is_confirmed else "unconfirmed"
            print(f"{_format_timestamp(record.timestamp):<17} {kind:<10} {_coins(record.amount):>20}  [{block}]")
            if record.fee:
                print(f"{'':<28}fee {_coins(record.fee)}")


def print_staking_history(items: List[StakingHistoryItem]) -> None:
    if not items:
        print("No staking history")
        return
    for item in items:
        print(f"{item.date_time:<20} {item.side:<8} {item.amount:>16} {item.status}")


def _make_session(wallet_name: str) -> WalletSyncSession:
    bind_wallet_context(wallet_name, settings.account_name)
    return WalletSyncSession(
        NodeApiClient(),
        wallet_name,
        notifier=print_notification,
    )


async def cli_status(wallet_name: str, limit: int) -> None:
    async with _make_session(wallet_name) as session:
        state = await session.refresh()
        print_state(wallet_name, state, session.staking.state.value, limit)


async def cli_watch(wallet_name: str, interval: float, limit: int) -> None:
    """Refresh on an interval until interrupted"""
    async with _make_session(wallet_name) as session:
        while True:
            state = await session.refresh()
            print_state(wallet_name, state, session.staking.state.value, limit)
            await asyncio.sleep(interval)


async def cli_start_staking(wallet_name: str, password: Optional[str]) -> int:
    if password is None:
        password = getpass.getpass("Wallet password: ")
    async with _make_session(wallet_name) as session:
        if await session.start_staking(password):
            print("✅ Staking requested")
            return 0
        print("❌ Could not start staking")
        return 1


async def cli_stop_staking(wallet_name: str) -> int:
    async with _make_session(wallet_name) as session:
        if await session.stop_staking():
            print("✅ Staking stop requested")
            return 0
        print("❌ Could not stop staking")
        return 1


async def cli_staking_history(wallet_name: str) -> int:
    async with _make_session(wallet_name) as session:
        items = await session.fetch_staking_history()
        if items is None:
            print("❌ Could not load staking history")
            return 1
        print_staking_history(items)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Full node wallet sync CLI")
    parser.add_argument(
        "--wallet",
        default=settings.wallet_name,
        help="Wallet name (default: WALLET_NAME from the environment)",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    status_parser = subparsers.add_parser("status", help="Fetch balance, history and staking once")
    status_parser.add_argument("--limit", type=int, default=10, help="Transactions to show")

    watch_parser = subparsers.add_parser("watch", help="Refresh status on an interval")
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=settings.watch_interval_seconds,
        help="Seconds between refreshes",
    )
    watch_parser.add_argument("--limit", type=int, default=10, help="Transactions to show")

    start_parser = subparsers.add_parser("start-staking", help="Start staking")
    start_parser.add_argument("--password", default=None, help="Wallet password (prompted if omitted)")

    subparsers.add_parser("stop-staking", help="Stop staking")
    subparsers.add_parser("staking-history", help="List past staking events")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.log_level)

    if not args.wallet:
        print("❌ No wallet name given (use --wallet or set WALLET_NAME)")
        return 2

    command = args.command.lower()

    if command == "status":
        await cli_status(args.wallet, args.limit)

    elif command == "watch":
        await cli_watch(args.wallet, args.interval, args.limit)

    elif command == "start-staking":
        return await cli_start_staking(args.wallet, args.password)

    elif command == "stop-staking":
        return await cli_stop_staking(args.wallet)

    elif command == "staking-history":
        return await cli_staking_history(args.wallet)

    else:
        print(f"❌ Unknown command: {command}")
        parser.print_help()
        return 2

    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nGoodbye! 👋")


if __name__ == "__main__":
    run()

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class NodeApiProvider(ABC):
    """
    Transport to the full node REST API.

    Every method returns the decoded JSON body on success and raises
    NodeApiFailure otherwise; a request that never reached the node is
    reported with status code 0.
    """

    name: str = "node"

    @abstractmethod
    async def get_balance(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        """Get confirmed and unconfirmed balances for a wallet account"""
        pass

    @abstractmethod
    async def get_history(self, wallet_name: str, account_name: str) -> Dict[str, Any]:
        """Get the transaction history of a wallet account"""
        pass

    @abstractmethod
    async def get_staking_info(self) -> Dict[str, Any]:
        """Get the node's staking status"""
        pass

    @abstractmethod
    async def start_staking(self, name: str, password: str) -> None:
        """Ask the node to start staking with the given wallet"""
        pass

    @abstractmethod
    async def stop_staking(self) -> None:
        """Ask the node to stop staking"""
        pass

    @abstractmethod
    async def get_staking_history(self, wallet_name: str) -> List[Dict[str, Any]]:
        """Get past staking events for a wallet"""
        pass

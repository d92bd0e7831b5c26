from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.recovery.errors import MalformedResponseError


ModelT = TypeVar("ModelT", bound=BaseModel)


class NodeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AccountBalance(NodeModel):
    account_name: Optional[str] = Field(default=None, alias="accountName")
    amount_confirmed: int = Field(default=0, alias="amountConfirmed", description="Confirmed amount in base units")
    amount_unconfirmed: int = Field(default=0, alias="amountUnconfirmed", description="Unconfirmed amount in base units")


class BalanceResponse(NodeModel):
    balances: List[AccountBalance] = Field(description="One entry per wallet account")


class RawTransaction(NodeModel):
    type: Optional[str] = Field(default=None, description="send, received or staked")
    id: str = Field(description="Transaction id")
    amount: int = Field(default=0, description="Amount in base units")
    fee: Optional[int] = Field(default=None, description="Fee in base units, absent for incoming transactions")
    confirmed_in_block: Optional[int] = Field(default=None, alias="confirmedInBlock")
    timestamp: Union[int, str, None] = Field(default=None, description="Unix time as reported by the node")


class AccountHistory(NodeModel):
    account_name: Optional[str] = Field(default=None, alias="accountName")
    transactions_history: List[RawTransaction] = Field(default_factory=list, alias="transactionsHistory")


class HistoryResponse(NodeModel):
    history: List[AccountHistory] = Field(description="One entry per wallet account")


class StakingInfoResponse(NodeModel):
    enabled: bool = Field(default=False, description="Staking has been requested on this node")
    staking: bool = Field(default=False, description="The node is currently staking")
    weight: int = Field(default=0, description="Wallet staking weight")
    net_stake_weight: int = Field(default=0, alias="netStakeWeight", description="Network staking weight")
    expected_time: int = Field(default=0, alias="expectedTime", description="Expected seconds until the next reward")
    errors: Optional[str] = Field(default=None, description="Node-side staking error text")


class RawStakingHistoryItem(NodeModel):
    status: str = ""
    side: str = ""
    amount: str = ""
    date_time: str = Field(default="", alias="dateTime")
    wallet: str = ""


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate a node response body, raising MalformedResponseError on mismatch."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Unexpected {model.__name__} payload: {exc.error_count()} validation error(s)",
            payload=payload,
        ) from exc

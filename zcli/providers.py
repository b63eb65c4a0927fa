"""Interfaces of the collaborators the wallet operations drive.

The layer-2 network and the settlement chain are reached through a
``Connector``. ``zcli.zksync_client`` provides the implementation used by the
command line; tests substitute in-memory fakes.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from .models import Network
from .tokens import TokenSet

class AccountDepth(BaseModel):
    nonce: int = 0
    # Balances in base units keyed by token symbol
    balances: Dict[str, int] = Field(default_factory=dict)

class AccountState(BaseModel):
    address: str
    id: Optional[int] = None
    committed: AccountDepth = Field(default_factory=AccountDepth)

class TxHandle(ABC):
    """A submitted transaction"""

    @abstractmethod
    async def await_receipt(self) -> Any:
        """Suspend until the transaction is confirmed; raises if it fails"""

class L2Provider(ABC):
    """Open connection to a layer-2 network"""

    token_set: TokenSet

    @abstractmethod
    async def get_state(self, address: str) -> AccountState:
        ...

    @abstractmethod
    async def get_tokens(self) -> TokenSet:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

class L2Wallet(ABC):
    """Layer-2 account bound to a settlement-chain signer"""

    @abstractmethod
    async def is_signing_key_set(self) -> bool:
        ...

    @abstractmethod
    async def set_signing_key(self) -> TxHandle:
        ...

    @abstractmethod
    async def sync_transfer(self, to: str, token: str, amount: int) -> TxHandle:
        ...

    @abstractmethod
    async def deposit_to_sync_from_settlement(self, deposit_to: str, token: str, amount: int,
                                              approve_deposit_amount_for_erc20: bool) -> TxHandle:
        ...

class Connector(ABC):
    """Factory for connections to both chains"""

    @abstractmethod
    async def connect(self, network: Network) -> L2Provider:
        ...

    @abstractmethod
    def settlement_provider(self, network: Network) -> Any:
        ...

    @abstractmethod
    def settlement_signer(self, privkey: str, provider: Any) -> Any:
        ...

    @abstractmethod
    async def l2_wallet(self, signer: Any, provider: L2Provider) -> L2Wallet:
        ...

def default_connector() -> Connector:
    """Connector backed by zksync_sdk and web3 (the ``zksync`` extra)"""
    from .zksync_client import ZkSyncConnector
    return ZkSyncConnector()

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal
from enum import Enum

class Network(str, Enum):
    LOCALHOST = "localhost"
    ROPSTEN = "ropsten"
    RINKEBY = "rinkeby"
    MAINNET = "mainnet"

# Enumeration order is also the order networks are probed in
ALL_NETWORKS: List[Network] = list(Network)

class Wallet(BaseModel):
    address: str
    privkey: str

    @field_validator('address')
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return v.lower()

class Config(BaseModel):
    """Locally known wallets and the default network/wallet selection"""
    model_config = ConfigDict(populate_by_name=True)

    network: Network = Network.LOCALHOST
    default_wallet: Optional[str] = Field(default=None, alias="defaultWallet")
    wallets: List[Wallet] = Field(default_factory=list)

    @field_validator('default_wallet')
    @classmethod
    def normalize_default_wallet(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else None

    @model_validator(mode='after')
    def default_wallet_is_known(self) -> 'Config':
        if self.default_wallet is not None:
            if self.default_wallet not in [w.address for w in self.wallets]:
                raise ValueError(f"default wallet {self.default_wallet} is not among wallets")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=4)

class AccountInfo(BaseModel):
    address: str
    network: Network
    account_id: Optional[int] = None
    nonce: int
    balances: Dict[str, str] = Field(default_factory=dict)

class TransactionDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success", "error"]
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    hash: str
    operation: Optional[str] = None
    nonce: Optional[int] = None
    amount: Optional[str] = None
    fee: Optional[str] = None
    token: Optional[str] = None

class TxInfo(BaseModel):
    network: Network
    transaction: Optional[TransactionDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain data; amount/fee/token are left out when never assigned"""
        data = {"network": self.network.value, "transaction": None}
        if self.transaction is not None:
            data["transaction"] = self.transaction.model_dump(by_alias=True, exclude_unset=True)
        return data

class TransferInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    amount: str = Field(..., description="Amount as a decimal string in display units")
    to: str
    from_: str = Field(..., alias="from")

    @field_validator('amount', mode='before')
    @classmethod
    def amount_as_string(cls, v: Any) -> str:
        # JSON input may carry the amount as a number
        if isinstance(v, (int, float)):
            return str(v)
        return v

class NetworkProbe(BaseModel):
    network: Network
    available: bool
    error: Optional[str] = None

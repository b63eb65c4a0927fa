"""Connector over the zkSync Python SDK and web3.

Requires the ``zksync`` extra, and ``ZK_SYNC_LIBRARY_PATH`` pointing at the
zks-crypto shared library for signing.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3, HTTPProvider
from zksync_sdk import (
    ZkSyncProviderV01, HttpJsonRPCTransport, network as zk_network,
    ZkSync, EthereumProvider, Wallet, EthereumSignerWeb3, ZkSyncSigner, ZkSyncLibrary,
)
from zksync_sdk.types import ChangePubKeyEcdsa
from zksync_sdk.types.responses import EthOpInfo
from zksync_sdk.zksync_provider.transaction import TransactionResult, TransactionStatus
from .exceptions import ConfigurationError, TransactionFailed
from .models import Network
from .providers import AccountDepth, AccountState, Connector, L2Provider, L2Wallet, TxHandle
from .tokens import Token, TokenSet, NATIVE_TOKEN_SYMBOL
from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)

@dataclass
class SettlementSigner:
    account: LocalAccount
    web3: Web3

class ZkSyncTxHandle(TxHandle):
    def __init__(self, transaction, poll_interval_ms: int):
        self.transaction = transaction
        self.poll_interval_ms = poll_interval_ms

    async def await_receipt(self) -> TransactionResult:
        result = await self.transaction.await_committed(attempts_timeout=self.poll_interval_ms)
        if result.status == TransactionStatus.FAILED:
            raise TransactionFailed(f"transaction failed: {result.fail_reason}",
                                    {"hash": self.transaction.transaction_hash, "reason": result.fail_reason})
        return result

def check_settlement_receipt(receipt, action: str) -> None:
    """Raise when a mined settlement-chain transaction reverted"""
    if receipt["status"] == 0:
        tx_hash = receipt["transactionHash"].hex()
        raise TransactionFailed(f"{action} transaction {tx_hash} reverted", {"hash": tx_hash})

def priority_serial_id(zksync: ZkSync, receipt) -> int:
    """Serial id of the priority operation a deposit receipt emitted"""
    events = zksync.contract.events.NewPriorityRequest().processReceipt(receipt)
    if not events:
        raise TransactionFailed("deposit receipt carries no priority request",
                                {"hash": receipt["transactionHash"].hex()})
    return events[0]["args"]["serialId"]

class DepositTxHandle(TxHandle):
    """Deposit mined on the settlement chain, pending on the L2 network"""

    def __init__(self, receipt, serial_id: int, provider: ZkSyncProviderV01, poll_interval_ms: int):
        self.receipt = receipt
        self.serial_id = serial_id
        self.provider = provider
        self.poll_interval_ms = poll_interval_ms

    async def await_receipt(self) -> EthOpInfo:
        while True:
            info = await self.provider.get_priority_op_status(self.serial_id)
            if info.executed and info.block.committed:
                return info
            await asyncio.sleep(self.poll_interval_ms / 1000)

class ZkSyncProvider(L2Provider):
    def __init__(self, network: Network):
        self.network = network
        self.provider = ZkSyncProviderV01(
            provider=HttpJsonRPCTransport(network=getattr(zk_network, network.value))
        )
        self.contracts = None
        self.token_set = TokenSet([])
        self._sdk_tokens = None

    async def open(self) -> "ZkSyncProvider":
        self.contracts = await self.provider.get_contract_address()
        self.token_set = await self.get_tokens()
        return self

    async def get_state(self, address: str) -> AccountState:
        state = await self.provider.get_state(address)
        return AccountState(
            address=state.address,
            id=state.id,
            committed=AccountDepth(nonce=state.committed.nonce,
                                   balances={k: int(v) for k, v in state.committed.balances.items()}),
        )

    async def get_tokens(self) -> TokenSet:
        self._sdk_tokens = await self.provider.get_tokens()
        return TokenSet(
            Token(id=t.id, symbol=t.symbol, decimals=t.decimals, address=t.address)
            for t in self._sdk_tokens.tokens
        )

    def sdk_token(self, token: str):
        """Token object of the SDK for a symbol or address"""
        symbol = self.token_set.resolve(token).symbol
        return self._sdk_tokens.find_by_symbol(symbol)

    async def disconnect(self) -> None:
        # HTTP transport keeps no open connection
        self.contracts = None

class ZkSyncWallet(L2Wallet):
    def __init__(self, wallet: Wallet, provider: ZkSyncProvider, signer: SettlementSigner,
                 poll_interval_ms: int = 500):
        self.wallet = wallet
        self.provider = provider
        self.signer = signer
        self.poll_interval_ms = poll_interval_ms

    async def is_signing_key_set(self) -> bool:
        return await self.wallet.is_signing_key_set()

    async def set_signing_key(self) -> TxHandle:
        tx = await self.wallet.set_signing_key(NATIVE_TOKEN_SYMBOL, eth_auth_data=ChangePubKeyEcdsa())
        return ZkSyncTxHandle(tx, self.poll_interval_ms)

    async def sync_transfer(self, to: str, token: str, amount: int) -> TxHandle:
        sdk_token = self.provider.sdk_token(token)
        tx = await self.wallet.transfer(to, amount=sdk_token.decimal_amount(amount), token=sdk_token)
        return ZkSyncTxHandle(tx, self.poll_interval_ms)

    async def deposit_to_sync_from_settlement(self, deposit_to: str, token: str, amount: int,
                                              approve_deposit_amount_for_erc20: bool) -> TxHandle:
        sdk_token = self.provider.sdk_token(token)
        decimal_amount = sdk_token.decimal_amount(amount)
        ethereum_provider = self.wallet.ethereum_provider
        if approve_deposit_amount_for_erc20:
            approval = await ethereum_provider.approve_deposit(sdk_token, decimal_amount)
            check_settlement_receipt(approval, "approve")
        # The SDK waits for the settlement-chain receipt before returning
        receipt = await ethereum_provider.deposit(sdk_token, decimal_amount, deposit_to)
        check_settlement_receipt(receipt, "deposit")
        serial_id = priority_serial_id(ethereum_provider.zksync, receipt)
        logger.debug(f"Deposit queued as priority operation {serial_id}")
        return DepositTxHandle(receipt, serial_id, self.provider.provider, self.poll_interval_ms)

class ZkSyncConnector(Connector):
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._library = None

    @property
    def library(self) -> ZkSyncLibrary:
        # Loading the shared library is only needed for signing
        if self._library is None:
            self._library = ZkSyncLibrary()
        return self._library

    async def connect(self, network: Network) -> ZkSyncProvider:
        logger.debug(f"Connecting to {network.value}")
        return await ZkSyncProvider(network).open()

    def settlement_provider(self, network: Network) -> Web3:
        if network is Network.LOCALHOST:
            url = self.settings.localhost_rpc_url
        else:
            if not self.settings.infura_project_id:
                raise ConfigurationError(f"infura project id is required for {network.value}",
                                         {"setting": "ZCLI_INFURA_PROJECT_ID"})
            url = f"https://{network.value}.infura.io/v3/{self.settings.infura_project_id}"
        return Web3(HTTPProvider(url))

    def settlement_signer(self, privkey: str, provider: Web3) -> SettlementSigner:
        return SettlementSigner(account=Account.from_key(privkey), web3=provider)

    async def l2_wallet(self, signer: SettlementSigner, provider: ZkSyncProvider) -> ZkSyncWallet:
        zksync = ZkSync(account=signer.account, web3=signer.web3,
                        zksync_contract_address=provider.contracts.main_contract)
        chain_id = getattr(zk_network, provider.network.value).chain_id
        wallet = Wallet(
            ethereum_provider=EthereumProvider(signer.web3, zksync),
            zk_signer=ZkSyncSigner.from_account(signer.account, self.library, chain_id),
            eth_signer=EthereumSignerWeb3(account=signer.account),
            provider=provider.provider,
        )
        return ZkSyncWallet(wallet, provider, signer, self.settings.receipt_poll_interval_ms)

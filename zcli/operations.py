"""Transfers and deposits signed with a locally held key.

Both operations return the hash of the newest transaction in the recipient's
history once the submitted transaction is confirmed. That assumes no other
transaction to the same recipient landed in between.
"""
from typing import Optional, Tuple, Union
from .models import Config, Network, TransferInfo
from .networks import validate_network
from .providers import Connector, L2Provider, L2Wallet, default_connector
from .explorer import Explorer
from .tokens import is_native_token
from .wallets import get_privkey
from .logging_config import get_logger, monitor_operation

logger = get_logger(__name__)

async def _open_wallet(connector: Connector, network: Network,
                       privkey: str) -> Tuple[L2Provider, L2Wallet]:
    settlement_provider = connector.settlement_provider(network)
    provider = await connector.connect(network)
    try:
        signer = connector.settlement_signer(privkey, settlement_provider)
        wallet = await connector.l2_wallet(signer, provider)
    except Exception:
        await provider.disconnect()
        raise
    return provider, wallet

@monitor_operation("transfer")
async def transfer(config: Config, transfer_info: TransferInfo,
                   network: Union[str, Network] = Network.LOCALHOST,
                   connector: Optional[Connector] = None,
                   explorer: Optional[Explorer] = None) -> str:
    network = validate_network(network)
    # Unknown sender fails before anything is contacted
    privkey = get_privkey(config, transfer_info.from_)
    connector = connector or default_connector()
    explorer = explorer or Explorer(network)

    provider, wallet = await _open_wallet(connector, network, privkey)
    try:
        if not await wallet.is_signing_key_set():
            logger.info(f"Registering signing key for {transfer_info.from_}")
            change_pubkey = await wallet.set_signing_key()
            await change_pubkey.await_receipt()
        tx_handle = await wallet.sync_transfer(
            to=transfer_info.to,
            token=transfer_info.token,
            amount=provider.token_set.parse_token(transfer_info.token, transfer_info.amount),
        )
        await tx_handle.await_receipt()
    finally:
        await provider.disconnect()

    logger.info(f"Transfer of {transfer_info.amount} {transfer_info.token} to {transfer_info.to} confirmed")
    return await explorer.latest_transaction_hash(transfer_info.to)

@monitor_operation("deposit")
async def deposit(config: Config, transfer_info: TransferInfo,
                  network: Union[str, Network] = Network.LOCALHOST,
                  connector: Optional[Connector] = None,
                  explorer: Optional[Explorer] = None) -> str:
    network = validate_network(network)
    privkey = get_privkey(config, transfer_info.from_)
    connector = connector or default_connector()
    explorer = explorer or Explorer(network)

    provider, wallet = await _open_wallet(connector, network, privkey)
    try:
        deposit_handle = await wallet.deposit_to_sync_from_settlement(
            deposit_to=transfer_info.to,
            token=transfer_info.token,
            amount=provider.token_set.parse_token(transfer_info.token, transfer_info.amount),
            approve_deposit_amount_for_erc20=not is_native_token(transfer_info.token),
        )
        await deposit_handle.await_receipt()
    finally:
        await provider.disconnect()

    logger.info(f"Deposit of {transfer_info.amount} {transfer_info.token} to {transfer_info.to} confirmed")
    return await explorer.latest_transaction_hash(transfer_info.to)

from typing import Optional, Union
from .models import AccountInfo, Network, TransactionDetails, TxInfo
from .networks import validate_network
from .providers import Connector, default_connector
from .explorer import Explorer
from .tokens import NO_TOKEN_ID
from .exceptions import TokenNotFound
from .logging_config import get_logger, monitor_operation

logger = get_logger(__name__)

@monitor_operation("account_info")
async def account_info(address: str, network: Union[str, Network] = Network.LOCALHOST,
                       connector: Optional[Connector] = None) -> AccountInfo:
    """Committed state of an L2 account with balances in display units"""
    network = validate_network(network)
    connector = connector or default_connector()
    provider = await connector.connect(network)
    try:
        state = await provider.get_state(address)
        balances = {}
        for token, balance in state.committed.balances.items():
            balances[token] = provider.token_set.format_token(token, balance)
    finally:
        await provider.disconnect()
    return AccountInfo(
        address=address,
        network=network,
        account_id=state.id,
        nonce=state.committed.nonce,
        balances=balances,
    )

@monitor_operation("tx_info")
async def tx_info(tx_hash: str, network: Union[str, Network] = Network.LOCALHOST,
                  connector: Optional[Connector] = None,
                  explorer: Optional[Explorer] = None) -> TxInfo:
    """Status and details of one transaction.

    An unknown hash is reported as ``transaction=None``. Amount, fee and token
    are resolved against the network's token registry unless the transaction
    moves no token; a token id missing from the registry raises TokenNotFound.
    """
    network = validate_network(network)
    explorer = explorer or Explorer(network)
    tx = await explorer.transaction(tx_hash)
    if tx is None:
        return TxInfo(network=network, transaction=None)

    details = {
        "status": "error" if tx.get("fail_reason") else "success",
        "from": tx.get("from"),
        "to": tx.get("to"),
        "hash": tx_hash,
        "operation": tx.get("tx_type"),
        "nonce": tx.get("nonce"),
    }
    if tx.get("token") == NO_TOKEN_ID:
        return TxInfo(network=network, transaction=TransactionDetails(**details))

    connector = connector or default_connector()
    provider = await connector.connect(network)
    try:
        tokens = await provider.get_tokens()
    finally:
        await provider.disconnect()
    token = tokens.find_by_id(tx.get("token"))
    if token is None:
        logger.error(f"Transaction {tx_hash} references unknown token id {tx.get('token')}")
        raise TokenNotFound(tx.get("token"))

    details["amount"] = tokens.format_token(token.symbol, tx["amount"])
    if tx.get("fee"):
        details["fee"] = tokens.format_token(token.symbol, tx["fee"])
    details["token"] = token.symbol
    return TxInfo(network=network, transaction=TransactionDetails(**details))

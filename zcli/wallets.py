from typing import List, Optional
from eth_account import Account
from .models import Config, Wallet
from .repository import ConfigRepository
from .exceptions import AddressNotFound
from .logging_config import get_logger

logger = get_logger(__name__)

def _persist(config: Config, repository: Optional[ConfigRepository]) -> None:
    if repository is not None:
        repository.save(config)

def add_wallet(config: Config, privkey: Optional[str] = None,
               repository: Optional[ConfigRepository] = None) -> str:
    """Import privkey, or generate a fresh key, and register the wallet.

    The first wallet added becomes the default. Returns the checksum address.
    """
    account = Account.from_key(privkey) if privkey else Account.create()
    address = account.address.lower()
    config.wallets.append(Wallet(address=address, privkey="0x" + bytes(account.key).hex()))
    if not config.default_wallet:
        config.default_wallet = address
    _persist(config, repository)
    logger.info(f"Added wallet {address} ({'imported' if privkey else 'generated'})")
    return account.address

def list_wallets(config: Config) -> List[str]:
    return [w.address for w in config.wallets]

def remove_wallet(config: Config, address: str,
                  repository: Optional[ConfigRepository] = None) -> None:
    address = address.lower()
    config.wallets = [w for w in config.wallets if w.address != address]
    if config.default_wallet == address:
        config.default_wallet = None
    # Saved even when nothing matched
    _persist(config, repository)
    logger.info(f"Removed wallet {address}")

def default_wallet(config: Config, address: Optional[str] = None,
                   repository: Optional[ConfigRepository] = None) -> Optional[str]:
    """Get the default wallet, or set it when address is given"""
    if address:
        address = address.lower()
        if address not in list_wallets(config):
            raise AddressNotFound(address)
        config.default_wallet = address
        _persist(config, repository)
    return config.default_wallet

def get_privkey(config: Config, address: str) -> str:
    """Private key of a locally known wallet"""
    address = address.lower()
    for wallet in config.wallets:
        if wallet.address == address:
            return wallet.privkey
    raise AddressNotFound(address)

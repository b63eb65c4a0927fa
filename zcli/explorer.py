from typing import Any, Dict, List, Optional, Union
import aiohttp
from .models import Network
from .networks import api_server
from .exceptions import TransactionNotFound
from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)

class Explorer:
    """Block-explorer style REST endpoints of a network"""

    def __init__(self, network: Union[str, Network], session: Optional[aiohttp.ClientSession] = None,
                 settings: Optional[Settings] = None):
        self.api_base_url = api_server(network, settings or get_settings())
        self.session = session

    async def _make_request(self, endpoint: str) -> Any:
        """GET an endpoint and decode its JSON body"""
        url = f"{self.api_base_url}/{endpoint}"
        try:
            if self.session is not None:
                return await self._get_json(self.session, url)
            async with aiohttp.ClientSession() as session:
                return await self._get_json(session, url)
        except aiohttp.ClientError as e:
            logger.error(f"API request failed: {str(e)}")
            raise

    @staticmethod
    async def _get_json(session: aiohttp.ClientSession, url: str) -> Any:
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Transaction record, or None when the network does not know the hash"""
        return await self._make_request(f"transactions_all/{tx_hash}")

    async def history(self, address: str, offset: int = 0, limit: int = 1) -> List[Dict[str, Any]]:
        """Transactions of an account, newest first"""
        return await self._make_request(f"account/{address}/history/{offset}/{limit}")

    async def latest_transaction_hash(self, address: str) -> str:
        transactions = await self.history(address, 0, 1)
        if not transactions:
            raise TransactionNotFound(f"no transactions for {address}", {"address": address})
        return transactions[0]["hash"]

from typing import List, Optional, Union
from .models import Config, Network, NetworkProbe, ALL_NETWORKS
from .repository import ConfigRepository
from .providers import Connector
from .exceptions import InvalidNetwork
from .config import Settings
from .logging_config import get_logger

logger = get_logger(__name__)

API_PATH = "/api/v0.1"

SERVERS = {
    Network.LOCALHOST: "http://localhost:3001",
    Network.ROPSTEN: "https://ropsten-api.zksync.io",
    Network.RINKEBY: "https://rinkeby-api.zksync.io",
    Network.MAINNET: "https://api.zksync.io",
}

def validate_network(network: Union[str, Network]) -> Network:
    """Network for a name, raising InvalidNetwork outside the supported set"""
    try:
        return Network(network)
    except ValueError:
        raise InvalidNetwork(network) from None

def api_server(network: Union[str, Network], settings: Optional[Settings] = None) -> str:
    """Base URL of the explorer API of a network"""
    network = validate_network(network)
    server = SERVERS[network]
    if network is Network.LOCALHOST and settings is not None:
        server = settings.localhost_api_url
    return f"{server}{API_PATH}"

def default_network(config: Config, network: Optional[Union[str, Network]] = None,
                    repository: Optional[ConfigRepository] = None) -> Network:
    """Get the default network, or set it when network is given"""
    if network:
        config.network = validate_network(network)
        if repository is not None:
            repository.save(config)
        logger.info(f"Default network set to {config.network.value}")
    return config.network

async def probe_networks(connector: Connector) -> List[NetworkProbe]:
    """Try to connect to every network, one at a time"""
    probes = []
    for network in ALL_NETWORKS:
        try:
            provider = await connector.connect(network)
            await provider.disconnect()
        except Exception as e:
            logger.debug(f"Network {network.value} is not reachable: {str(e)}")
            probes.append(NetworkProbe(network=network, available=False, error=str(e)))
        else:
            probes.append(NetworkProbe(network=network, available=True))
    return probes

async def available_networks(connector: Connector) -> List[Network]:
    return [probe.network for probe in await probe_networks(connector) if probe.available]

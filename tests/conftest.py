import pytest
from zcli.explorer import Explorer
from zcli.models import Config, Wallet
from zcli.providers import AccountDepth, AccountState, Connector, L2Provider, L2Wallet, TxHandle
from zcli.repository import InMemoryConfigRepository
from zcli.tokens import Token, TokenSet

ADDRESS_A = "0x" + "a1" * 20
ADDRESS_B = "0x" + "b2" * 20
ADDRESS_C = "0x" + "c3" * 20
PRIVKEY_A = "0x" + "11" * 32
PRIVKEY_B = "0x" + "22" * 32

class FakeTxHandle(TxHandle):
    def __init__(self, connector, name, error=None):
        self.connector = connector
        self.name = name
        self.error = error

    async def await_receipt(self):
        self.connector.calls.append(("await_receipt", self.name))
        if self.error:
            raise self.error
        return {"executed": True}

class FakeProvider(L2Provider):
    def __init__(self, connector, network):
        self.connector = connector
        self.network = network
        self.token_set = connector.token_set

    async def get_state(self, address):
        return self.connector.states[address]

    async def get_tokens(self):
        self.connector.calls.append(("get_tokens", self.network))
        return self.connector.token_set

    async def disconnect(self):
        self.connector.calls.append(("disconnect", self.network))

class FakeWallet(L2Wallet):
    def __init__(self, connector, signer):
        self.connector = connector
        self.signer = signer

    async def is_signing_key_set(self):
        return self.connector.signing_key_set

    async def set_signing_key(self):
        self.connector.calls.append(("set_signing_key",))
        return FakeTxHandle(self.connector, "change_pubkey", self.connector.receipt_errors.get("change_pubkey"))

    async def sync_transfer(self, to, token, amount):
        self.connector.calls.append(("sync_transfer", to, token, amount))
        return FakeTxHandle(self.connector, "transfer", self.connector.receipt_errors.get("transfer"))

    async def deposit_to_sync_from_settlement(self, deposit_to, token, amount, approve_deposit_amount_for_erc20):
        self.connector.calls.append(("deposit", deposit_to, token, amount, approve_deposit_amount_for_erc20))
        return FakeTxHandle(self.connector, "deposit", self.connector.receipt_errors.get("deposit"))

class FakeConnector(Connector):
    """Records every call made against both chains"""

    def __init__(self, token_set=None, states=None, signing_key_set=True, unreachable=(), receipt_errors=None):
        self.token_set = token_set if token_set is not None else default_tokens()
        self.states = states or {}
        self.signing_key_set = signing_key_set
        self.unreachable = set(unreachable)
        self.receipt_errors = receipt_errors or {}
        self.calls = []

    @property
    def connected(self):
        return any(call[0] == "connect" for call in self.calls)

    async def connect(self, network):
        self.calls.append(("connect", network))
        if network in self.unreachable:
            raise ConnectionError(f"cannot reach {network.value}")
        return FakeProvider(self, network)

    def settlement_provider(self, network):
        self.calls.append(("settlement_provider", network))
        return {"network": network}

    def settlement_signer(self, privkey, provider):
        self.calls.append(("settlement_signer", privkey))
        return {"privkey": privkey, "provider": provider}

    async def l2_wallet(self, signer, provider):
        self.calls.append(("l2_wallet", signer["privkey"]))
        return FakeWallet(self, signer)

class FakeExplorer(Explorer):
    """Explorer answering from a dict of endpoint -> JSON payload"""

    def __init__(self, network="localhost", responses=None):
        super().__init__(network)
        self.responses = responses or {}
        self.requests = []

    async def _make_request(self, endpoint):
        self.requests.append(endpoint)
        return self.responses.get(endpoint)

def default_tokens():
    return TokenSet([
        Token(id=0, symbol="ETH", decimals=18),
        Token(id=2, symbol="USDC", decimals=6, address="0x" + "ee" * 20),
    ])

@pytest.fixture
def connector():
    return FakeConnector()

@pytest.fixture
def repository():
    return InMemoryConfigRepository()

@pytest.fixture
def config():
    return Config(
        default_wallet=ADDRESS_A,
        wallets=[Wallet(address=ADDRESS_A, privkey=PRIVKEY_A), Wallet(address=ADDRESS_B, privkey=PRIVKEY_B)],
    )

@pytest.fixture
def account_state():
    return AccountState(address=ADDRESS_A, id=7,
                        committed=AccountDepth(nonce=3, balances={"ETH": 1500000000000000000, "USDC": 2500000}))

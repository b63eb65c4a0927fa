import asyncio
import pytest
from zcli.exceptions import AddressNotFound, TransactionNotFound, InvalidAmount, TransactionFailed
from zcli.models import Network, TransferInfo
from zcli.operations import transfer, deposit
from conftest import FakeConnector, FakeExplorer, ADDRESS_A, ADDRESS_B, ADDRESS_C, PRIVKEY_A

RESULT_HASH = "sync-tx:" + "cd" * 32

def history_explorer(address=ADDRESS_B, network="localhost"):
    return FakeExplorer(network, responses={
        f"account/{address}/history/0/1": [{"hash": RESULT_HASH, "tx_type": "Transfer"}],
    })

def transfer_info(**overrides):
    data = {"token": "USDC", "amount": "1.25", "to": ADDRESS_B, "from": ADDRESS_A}
    data.update(overrides)
    return TransferInfo(**data)

class TestTransfer:
    def test_transfer_with_registered_key(self, config):
        connector = FakeConnector(signing_key_set=True)
        explorer = history_explorer()
        result = asyncio.run(transfer(config, transfer_info(), connector=connector, explorer=explorer))

        assert result == RESULT_HASH
        assert connector.calls == [
            ("settlement_provider", Network.LOCALHOST),
            ("connect", Network.LOCALHOST),
            ("settlement_signer", PRIVKEY_A),
            ("l2_wallet", PRIVKEY_A),
            ("sync_transfer", ADDRESS_B, "USDC", 1250000),
            ("await_receipt", "transfer"),
            ("disconnect", Network.LOCALHOST),
        ]
        assert explorer.requests == [f"account/{ADDRESS_B}/history/0/1"]

    def test_signing_key_registered_first(self, config):
        connector = FakeConnector(signing_key_set=False)
        asyncio.run(transfer(config, transfer_info(), connector=connector, explorer=history_explorer()))

        names = [call[0] for call in connector.calls]
        assert names.index("set_signing_key") < names.index("sync_transfer")
        assert connector.calls[names.index("set_signing_key") + 1] == ("await_receipt", "change_pubkey")

    def test_unknown_sender_fails_before_connecting(self, config):
        connector = FakeConnector()
        explorer = history_explorer()
        with pytest.raises(AddressNotFound) as exc_info:
            asyncio.run(transfer(config, transfer_info(**{"from": ADDRESS_C}), connector=connector, explorer=explorer))

        assert exc_info.value.message == "address is not present"
        assert connector.calls == []
        assert explorer.requests == []

    def test_sender_lookup_ignores_case(self, config):
        info = transfer_info(**{"from": ADDRESS_A.upper().replace("0X", "0x")})
        result = asyncio.run(transfer(config, info, connector=FakeConnector(), explorer=history_explorer()))
        assert result == RESULT_HASH

    def test_receipt_failure_propagates(self, config):
        connector = FakeConnector(receipt_errors={"transfer": RuntimeError("transaction rejected")})
        explorer = history_explorer()
        with pytest.raises(RuntimeError, match="transaction rejected"):
            asyncio.run(transfer(config, transfer_info(), connector=connector, explorer=explorer))

        assert connector.calls[-1] == ("disconnect", Network.LOCALHOST)
        assert explorer.requests == []

    def test_registration_failure_stops_transfer(self, config):
        connector = FakeConnector(signing_key_set=False,
                                  receipt_errors={"change_pubkey": RuntimeError("not committed")})
        with pytest.raises(RuntimeError):
            asyncio.run(transfer(config, transfer_info(), connector=connector, explorer=history_explorer()))

        assert "sync_transfer" not in [call[0] for call in connector.calls]

    def test_amount_with_too_many_decimals(self, config):
        connector = FakeConnector()
        with pytest.raises(InvalidAmount):
            asyncio.run(transfer(config, transfer_info(amount="0.0000001"), connector=connector,
                                 explorer=history_explorer()))
        assert connector.calls[-1] == ("disconnect", Network.LOCALHOST)

    def test_empty_recipient_history(self, config):
        with pytest.raises(TransactionNotFound):
            asyncio.run(transfer(config, transfer_info(), connector=FakeConnector(),
                                 explorer=FakeExplorer(responses={f"account/{ADDRESS_B}/history/0/1": []})))

class TestDeposit:
    def test_erc20_deposit_needs_approval(self, config):
        connector = FakeConnector(signing_key_set=False)
        result = asyncio.run(deposit(config, transfer_info(), "ropsten", connector=connector,
                                     explorer=history_explorer(network="ropsten")))

        assert result == RESULT_HASH
        assert ("deposit", ADDRESS_B, "USDC", 1250000, True) in connector.calls
        assert ("await_receipt", "deposit") in connector.calls
        assert "set_signing_key" not in [call[0] for call in connector.calls]
        assert connector.calls[-1] == ("disconnect", Network.ROPSTEN)

    def test_native_deposit_skips_approval(self, config):
        connector = FakeConnector()
        info = transfer_info(token="ETH", amount="0.5", to=ADDRESS_A)
        asyncio.run(deposit(config, info, connector=connector, explorer=history_explorer(ADDRESS_A)))

        assert ("deposit", ADDRESS_A, "ETH", 5 * 10 ** 17, False) in connector.calls

    def test_unknown_sender(self, config):
        connector = FakeConnector()
        with pytest.raises(AddressNotFound):
            asyncio.run(deposit(config, transfer_info(**{"from": ADDRESS_C}), connector=connector,
                                explorer=history_explorer()))
        assert not connector.connected

    def test_failed_deposit_propagates(self, config):
        error = TransactionFailed("deposit transaction 0xab reverted", {"hash": "0xab"})
        connector = FakeConnector(receipt_errors={"deposit": error})
        explorer = history_explorer()
        with pytest.raises(TransactionFailed, match="reverted"):
            asyncio.run(deposit(config, transfer_info(), connector=connector, explorer=explorer))

        assert ("await_receipt", "deposit") in connector.calls
        assert connector.calls[-1] == ("disconnect", Network.LOCALHOST)
        assert explorer.requests == []

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from web3.exceptions import BlockNotFound, TransactionNotFound

from core.enums import FinalityPolicy, Network
from core.errors import FinalizedReferenceUnavailable, ProviderCommunicationFailure
from core.networks import NETWORKS
from engine.evaluator import FinalityEvaluator
from providers.web3_provider import Web3ChainDataProvider


class FakeEth:
    def __init__(self, chain_id: int = 80002) -> None:
        self.chain_id = chain_id
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.finalized: Optional[Dict[str, Any]] = None
        self.requested_tags = []

    def get_transaction(self, tx_hash):
        if tx_hash not in self.transactions:
            raise TransactionNotFound(f"Transaction with hash: {tx_hash!r} not found.")
        return self.transactions[tx_hash]

    def get_block(self, tag):
        self.requested_tags.append(tag)
        if self.finalized is None:
            raise BlockNotFound(f"Block with id: {tag!r} not found.")
        return self.finalized


class FakeWeb3:
    def __init__(self, connected: bool = True, chain_id: int = 80002) -> None:
        self.eth = FakeEth(chain_id)
        self._connected = connected

    def is_connected(self) -> bool:
        return self._connected


def make_provider(w3: FakeWeb3) -> Web3ChainDataProvider:
    return Web3ChainDataProvider(NETWORKS[Network.AMOY], rpc_url="http://node:8545", w3=w3)


def test_inclusion_block_of_mined_transaction(tx_hash):
    w3 = FakeWeb3()
    w3.eth.transactions[tx_hash] = {"hash": tx_hash, "blockNumber": 1234}
    assert make_provider(w3).get_inclusion_block(tx_hash[2:]) == 1234


def test_inclusion_block_of_pending_transaction(tx_hash):
    w3 = FakeWeb3()
    w3.eth.transactions[tx_hash] = {"hash": tx_hash, "blockNumber": None}
    assert make_provider(w3).get_inclusion_block(tx_hash) is None


def test_inclusion_block_of_unknown_transaction(tx_hash):
    assert make_provider(FakeWeb3()).get_inclusion_block(tx_hash) is None


def test_finalized_block_uses_finalized_tag():
    w3 = FakeWeb3()
    w3.eth.finalized = {"number": 9000, "hash": bytes.fromhex("11" * 32), "timestamp": 1_700_000_000}
    ref = make_provider(w3).get_finalized_block()
    assert ref.block_number == 9000
    assert ref.block_hash == "0x" + "11" * 32
    assert ref.timestamp == 1_700_000_000
    assert w3.eth.requested_tags == ["finalized"]


def test_finalized_block_unavailable():
    assert make_provider(FakeWeb3()).get_finalized_block() is None


def test_evaluator_with_web3_provider(tx_hash):
    w3 = FakeWeb3()
    w3.eth.transactions[tx_hash] = {"blockNumber": 1000}
    w3.eth.finalized = {"number": 1256}
    result = FinalityEvaluator().check(make_provider(w3), tx_hash, FinalityPolicy.STRICT)
    assert result.final is True

    w3.eth.finalized = None
    with pytest.raises(FinalizedReferenceUnavailable):
        FinalityEvaluator().check(make_provider(w3), tx_hash, FinalityPolicy.STRICT)


def test_ensure_connected_raises_when_unreachable():
    provider = make_provider(FakeWeb3(connected=False))
    with pytest.raises(ProviderCommunicationFailure) as exc:
        provider.ensure_connected()
    assert exc.value.endpoint == "http://node:8545"


def test_ensure_connected_warns_on_chain_id_mismatch(caplog):
    provider = make_provider(FakeWeb3(chain_id=137))
    provider.ensure_connected()
    assert "expected 80002" in caplog.text

from __future__ import annotations

import logging
from typing import Any, Optional

from web3 import Web3
from web3.exceptions import BlockNotFound, TransactionNotFound
from web3.middleware import ExtraDataToPOAMiddleware

from core.errors import ProviderCommunicationFailure
from core.models import BlockNumber, FinalizedReference, TransactionReference
from core.networks import NetworkConfig
from providers.base import ChainDataProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


class Web3ChainDataProvider(ChainDataProvider):
    """
    ChainDataProvider backed by a JSON-RPC endpoint through web3.py.

      - get_inclusion_block   -> eth_getTransactionByHash(tx).blockNumber
      - get_finalized_block   -> eth_getBlockByNumber("finalized")

    Polygon PoS headers carry more than 32 bytes of extraData, so the POA
    middleware is injected for networks flagged `poa`.

    A `w3` instance can be passed in directly (tests, custom transports);
    otherwise an HTTPProvider is built from the network's RPC URL.
    """

    def __init__(
        self,
        config: NetworkConfig,
        *,
        rpc_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        w3: Optional[Web3] = None,
    ) -> None:
        self.config = config
        self.network = config.network
        self.rpc_url = config.rpc_url(rpc_url)

        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(self.rpc_url, request_kwargs={"timeout": timeout}))
            if config.poa:
                w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self._w3 = w3

    def ensure_connected(self) -> None:
        """
        Raise ProviderCommunicationFailure if the endpoint does not answer.

        A chain id that differs from the configured network is only logged;
        custom RPC URLs (forks, local nodes) legitimately report other ids.
        """
        if not self._w3.is_connected():
            raise ProviderCommunicationFailure(self.rpc_url)

        chain_id = self._w3.eth.chain_id
        if chain_id != self.config.chain_id:
            logger.warning(
                "RPC endpoint %s reports chain id %s, expected %s for %s",
                self.rpc_url, chain_id, self.config.chain_id, self.config.display_name,
            )

    def get_inclusion_block(self, tx_hash: str) -> Optional[BlockNumber]:
        tx_hash = TransactionReference(tx_hash=tx_hash).tx_hash
        try:
            tx = self._w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            logger.info("Transaction %s not found on %s", tx_hash, self.network.value)
            return None

        # Pending transactions are returned with blockNumber = None.
        block_number = tx.get("blockNumber")
        if block_number is None:
            logger.info("Transaction %s is pending on %s", tx_hash, self.network.value)
            return None
        return int(block_number)

    def get_finalized_block(self) -> Optional[FinalizedReference]:
        try:
            block = self._w3.eth.get_block("finalized")
        except BlockNotFound:
            logger.warning("Node at %s reports no finalized block", self.rpc_url)
            return None

        number = block.get("number")
        if number is None:
            return None
        return FinalizedReference(
            block_number=int(number),
            block_hash=_hex(block.get("hash")),
            timestamp=block.get("timestamp"),
        )

from __future__ import annotations

from typing import Dict, Optional

from core.enums import Network
from core.models import BlockNumber, FinalizedReference, TransactionReference
from providers.base import ChainDataProvider


class InMemoryChainDataProvider(ChainDataProvider):
    """
    Minimal in-memory chain view used in tests and dry runs.

    This is *not* a consensus model. It only records:
        - transactions:  tx_hash -> inclusion block (None = pending)
        - finalized:     the block currently reported as finalized

    Test code populates it with include_transaction(...) / set_finalized(...)
    and the evaluator reads it through the ChainDataProvider interface.
    """

    def __init__(self, network: Network = Network.AMOY) -> None:
        self.network = network
        self._transactions: Dict[str, Optional[BlockNumber]] = {}
        self._finalized: Optional[FinalizedReference] = None
        # Lookup counters, so tests can assert which calls were made.
        self.inclusion_lookups = 0
        self.finalized_lookups = 0

    # ------------------------------------------------------------------
    # Population API
    # ------------------------------------------------------------------
    def include_transaction(self, tx_hash: str, block_number: BlockNumber) -> str:
        """Record tx_hash as included at block_number and return the normalized hash."""
        ref = TransactionReference(tx_hash=tx_hash, inclusion_block=block_number)
        self._transactions[ref.tx_hash] = ref.inclusion_block
        return ref.tx_hash

    def add_pending_transaction(self, tx_hash: str) -> str:
        """Record tx_hash as known to the mempool but not yet mined."""
        ref = TransactionReference(tx_hash=tx_hash)
        self._transactions[ref.tx_hash] = None
        return ref.tx_hash

    def set_finalized(self, block_number: BlockNumber, *, block_hash: Optional[str] = None) -> None:
        self._finalized = FinalizedReference(block_number=block_number, block_hash=block_hash)

    def clear_finalized(self) -> None:
        """Simulate a node that cannot report a finalized block."""
        self._finalized = None

    # ------------------------------------------------------------------
    # ChainDataProvider
    # ------------------------------------------------------------------
    def get_inclusion_block(self, tx_hash: str) -> Optional[BlockNumber]:
        self.inclusion_lookups += 1
        key = TransactionReference(tx_hash=tx_hash).tx_hash
        return self._transactions.get(key)

    def get_finalized_block(self) -> Optional[FinalizedReference]:
        self.finalized_lookups += 1
        return self._finalized

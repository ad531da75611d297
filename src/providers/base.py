from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from core.enums import Network
from core.models import BlockNumber, FinalizedReference, TransactionReference


# ======================================================================
# ChainDataProvider — the chain-data collaborator consumed by the evaluator
# ======================================================================

class ChainDataProvider(ABC):
    """
    Abstract interface for the source of chain data used by a finality check.

    A provider answers exactly two questions against one selected network:

        (1) In which block was transaction `tx_hash` included?
        (2) Which block does the network currently report as finalized?

    Crucially:
        • Providers contain *no finality logic*. They only report what the
          node says; FinalityEvaluator decides what the numbers mean.

        • All blocking I/O (RPC round-trips, timeouts) lives here. The
          evaluator never suspends or blocks.

        • Lower-level transport errors are not translated. They propagate to
          the caller as raised by the underlying client.
    """

    network: Network

    @abstractmethod
    def get_inclusion_block(self, tx_hash: str) -> Optional[BlockNumber]:
        """
        Return the block number in which the transaction was included, or
        None if the transaction is unknown to the node or still pending.
        """
        raise NotImplementedError

    @abstractmethod
    def get_finalized_block(self) -> Optional[FinalizedReference]:
        """
        Return the block currently reported under the "finalized" tag, or
        None if the node cannot report one.
        """
        raise NotImplementedError

    def get_transaction_reference(self, tx_hash: str) -> TransactionReference:
        """
        Normalize the hash and attach whatever inclusion block the provider
        reports for it.
        """
        ref = TransactionReference(tx_hash=tx_hash)
        return ref.model_copy(update={"inclusion_block": self.get_inclusion_block(ref.tx_hash)})

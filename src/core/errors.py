# src/core/errors.py
from __future__ import annotations

from typing import Iterable, Optional


class FinalityError(Exception):
    """Base class for every error raised by the finality checker."""


class InvalidPolicy(FinalityError, ValueError):
    def __init__(self, value: object, allowed: Iterable[str]) -> None:
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"InvalidPolicy: {value!r}. Allowed values are: {', '.join(self.allowed)}"
        )


class InvalidNetwork(FinalityError, ValueError):
    def __init__(self, value: object, allowed: Iterable[str]) -> None:
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"InvalidNetwork: {value!r}. Allowed values are: {', '.join(self.allowed)}"
        )


class NotYetIncluded(FinalityError):
    """
    The transaction hash does not resolve to an included block (unknown to the
    node, or still pending in the mempool).

    This is a domain answer rather than a fault: the evaluator turns it into a
    negative verdict instead of letting it escape.
    """

    def __init__(self, tx_hash: Optional[str]) -> None:
        self.tx_hash = tx_hash
        super().__init__(f"NotYetIncluded: transaction {tx_hash} is not included in any block")


class FinalizedReferenceUnavailable(FinalityError):
    """The chain-data provider could not report a finalized block."""

    def __init__(self, network: Optional[str] = None) -> None:
        self.network = network
        where = f" on {network}" if network else ""
        super().__init__(f"FinalizedReferenceUnavailable: no finalized block reported{where}")


class ProviderCommunicationFailure(FinalityError):
    """The RPC endpoint could not be reached at all."""

    def __init__(self, endpoint: str, detail: Optional[str] = None) -> None:
        self.endpoint = endpoint
        self.detail = detail
        msg = f"ProviderCommunicationFailure: cannot reach RPC endpoint {endpoint}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)

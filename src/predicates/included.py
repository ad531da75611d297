# src/predicates/included.py
from __future__ import annotations

from core.enums import PredicateName
from predicates.base import Predicate, FinalityContext, PredicateResult


class IncludedPredicate(Predicate):
    """
    Included(tx): the transaction has been recorded in a block.

    A transaction the node does not know, or one still waiting in the
    mempool, cannot be final under any policy. This is reported as ok=False
    rather than raised: "not mined yet" is a legitimate answer.
    """

    name = PredicateName.INCLUDED
    description = "Transaction resolves to an inclusion block."

    def evaluate(self, ctx: FinalityContext) -> PredicateResult:
        if not ctx.tx.is_included():
            return PredicateResult(
                name=self.name,
                ok=False,
                reason=f"Included: transaction {ctx.tx.tx_hash} is not yet included in a block.",
                metadata={"tx_hash": ctx.tx.tx_hash, "not_yet_included": True},
            )

        return PredicateResult(
            name=self.name,
            ok=True,
            metadata={
                "tx_hash": ctx.tx.tx_hash,
                "inclusion_block": ctx.tx.inclusion_block,
            },
        )

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.enums import FinalityPolicy, PredicateName
from core.errors import FinalizedReferenceUnavailable
from core.models import BlockNumber, TransactionReference, rule_for
from predicates.base import FinalityContext, PredicateResult
from predicates.registry import get_pipeline_for_policy
from providers.base import ChainDataProvider

logger = logging.getLogger(__name__)

# Placeholder hash used when evaluate() is called with bare block numbers.
_ANONYMOUS_TX = "0x" + "0" * 64


class FinalityResult(BaseModel):
    """
    Result of a single finality evaluation over (inclusion, finalized, policy).

    Fields
    ------
    final : bool
        The verdict. True iff every predicate in the pipeline returned ok=True.
        Only meaningful relative to `finalized_block`, which was sampled
        during this same evaluation.

    not_yet_included : bool
        True when the verdict is False because the transaction has no
        inclusion block. Lets callers tell "not mined" apart from
        "mined but not deep enough" without changing the boolean verdict.

    depth : Optional[int]
        finalized_block - inclusion_block, when both are known.

    predicate_results : List[PredicateResult]
        Per-predicate diagnostics, in execution order.
    """
    final: bool
    policy: FinalityPolicy
    tx_hash: Optional[str] = None
    inclusion_block: Optional[BlockNumber] = None
    finalized_block: Optional[BlockNumber] = None
    depth: Optional[int] = None
    not_yet_included: bool = False
    violated_predicates: List[PredicateName] = Field(default_factory=list)
    predicate_results: List[PredicateResult] = Field(default_factory=list)


class FinalityEvaluator:
    """
    Decides, from two block numbers and a policy, whether a transaction is final.

    The evaluator is a pure, stateless function of its inputs:

        final(tx, f, policy)  :=  ∧_{P ∈ pipeline(policy)}  P(tx, f)

    It performs no I/O. `check()` is the only method that talks to a
    ChainDataProvider, and it does so before any predicate runs.

    Error handling semantics
    ------------------------
    - Unknown inclusion block: not an error. The result is final=False with
      not_yet_included=True, whatever the policy.
    - Unknown finalized block (for an included transaction): raises
      FinalizedReferenceUnavailable. No verdict is produced.
    - Provider exceptions propagate unmodified; nothing is retried.
    """

    def evaluate(
        self,
        inclusion_block: Optional[BlockNumber],
        finalized_block: Optional[BlockNumber],
        policy: FinalityPolicy | str,
        *,
        tx_hash: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> FinalityResult:
        """
        Run the predicate pipeline for one (inclusion, finalized, policy) tuple.

        Parameters
        ----------
        inclusion_block : Optional[int]
            Block the transaction was included in; None if not yet included.
        finalized_block : Optional[int]
            Block the provider reports as finalized; None if unavailable.
        policy : FinalityPolicy or its string value
            "pre_milestones" (StrictFinality) or "milestones" (StandardFinality).
        tx_hash : Optional[str]
            Used for reporting only.
        """
        policy = FinalityPolicy.parse(policy)
        rule = rule_for(policy)
        tx = TransactionReference(tx_hash=tx_hash or _ANONYMOUS_TX, inclusion_block=inclusion_block)

        if tx.is_included() and finalized_block is None:
            raise FinalizedReferenceUnavailable()

        logger.info("Latest finalized block: %s", finalized_block)
        logger.info("Your transaction block: %s", inclusion_block)

        ctx = FinalityContext(
            tx=tx,
            finalized_block=finalized_block,
            policy=policy,
            rule=rule,
            params=params or {},
        )

        results: List[PredicateResult] = []
        violated: List[PredicateName] = []

        for pred in get_pipeline_for_policy(policy):
            res = pred(ctx)
            results.append(res)
            if not res.ok:
                violated.append(res.name)
                # Later predicates depend on the earlier ones holding.
                break

        final = len(violated) == 0
        depth = None
        if tx.is_included() and finalized_block is not None:
            depth = rule.depth(tx.inclusion_block, finalized_block)

        for res in results:
            if res.reason:
                logger.info(res.reason)

        return FinalityResult(
            final=final,
            policy=policy,
            tx_hash=tx.tx_hash if tx_hash else None,
            inclusion_block=inclusion_block,
            finalized_block=finalized_block,
            depth=depth,
            not_yet_included=not tx.is_included(),
            violated_predicates=violated,
            predicate_results=results,
        )

    def check(
        self,
        provider: ChainDataProvider,
        tx_hash: str,
        policy: FinalityPolicy | str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> FinalityResult:
        """
        Query `provider` for both block numbers and evaluate them.

        The inclusion block is fetched first; a transaction that is not
        included short-circuits to a negative result without asking for the
        finalized block.
        """
        policy = FinalityPolicy.parse(policy)
        tx = provider.get_transaction_reference(tx_hash)

        if not tx.is_included():
            logger.info("Transaction %s is not yet included on %s", tx.tx_hash, provider.network.value)
            return self.evaluate(None, None, policy, tx_hash=tx.tx_hash, params=params)

        finalized = provider.get_finalized_block()
        if finalized is None:
            raise FinalizedReferenceUnavailable(provider.network.value)

        return self.evaluate(
            tx.inclusion_block,
            finalized.block_number,
            policy,
            tx_hash=tx.tx_hash,
            params=params,
        )


def check_finality(
    provider: ChainDataProvider,
    tx_hash: str,
    policy: FinalityPolicy | str,
) -> bool:
    """Boolean shortcut for FinalityEvaluator().check(...)."""
    return FinalityEvaluator().check(provider, tx_hash, policy).final

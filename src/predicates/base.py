# src/predicates/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from core.enums import FinalityPolicy, PredicateName
from core.models import BlockNumber, FinalityRule, TransactionReference


JsonDict = Dict[str, Any]


class FinalityContext(BaseModel):
    """
    Unified input context passed to every predicate.

      * tx: The transaction reference (hash + inclusion block, if any).
      * finalized_block: Block number the provider reported as finalized,
        sampled once for this evaluation. None only while the Included
        check short-circuits a not-yet-mined transaction.
      * policy / rule: The selected FinalityPolicy and its depth rule.
      * params: Free-form parameter bag (debug flags, trace annotations).

    The FinalityEvaluator is responsible for constructing this context
    before calling any predicates.
    """

    tx: TransactionReference = Field(
        ...,
        description="Transaction whose finality is being decided.",
    )

    finalized_block: Optional[BlockNumber] = Field(
        default=None,
        description="Finalized block number sampled during this evaluation.",
    )

    policy: FinalityPolicy = Field(
        ...,
        description="Finality policy selected by the caller.",
    )

    rule: FinalityRule = Field(
        ...,
        description="Depth rule the policy maps to.",
    )

    params: JsonDict = Field(
        default_factory=dict,
        description="Optional predicate configuration / parameters.",
    )


class PredicateResult(BaseModel):
    """
    Result of evaluating a single predicate on a given context.

    Fields:
      * name:
          Which predicate was evaluated (PredicateName).
      * ok:
          True  -> the predicate holds under the current context.
          False -> it does not (yet); a later evaluation may differ as the
                   finalized block advances.
      * reason:
          Human-readable explanation, intended for logs and console output.
      * metadata:
          Structured data for inspection (block numbers, depth, threshold).
    """

    name: PredicateName
    ok: bool
    reason: Optional[str] = None
    metadata: JsonDict = Field(default_factory=dict)


class Predicate(ABC):
    """
    Abstract base class for the checks making up a finality evaluation
    (Included, Final).

    Each concrete predicate must set `name` and `description`, and
    implement `evaluate(self, ctx) -> PredicateResult`.
    Predicates read only from `ctx` and have no side effects.
    """

    name: PredicateName
    description: str = ""

    def __call__(self, ctx: FinalityContext) -> PredicateResult:
        return self.evaluate(ctx)

    @abstractmethod
    def evaluate(self, ctx: FinalityContext) -> PredicateResult:
        raise NotImplementedError

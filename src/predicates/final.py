# src/predicates/final.py
from __future__ import annotations

from core.enums import PredicateName
from predicates.base import Predicate, FinalityContext, PredicateResult


class FinalPredicate(Predicate):
    """
    Final(tx, f): depth rule of the selected policy.

        depth := finalized_block - inclusion_block
        Final  := depth >= rule.min_depth

      * pre_milestones: min_depth = 256 (conservative buffer beyond the
        network's own checkpoint).
      * milestones:     min_depth = 1, i.e. finalized_block > inclusion_block.

    A finalized block that lies behind the inclusion block (a lagging data
    source) gives a negative depth. That is a stale but valid answer, so the
    predicate returns ok=False instead of raising.
    """

    name = PredicateName.FINAL
    description = "Finalized checkpoint is at least min_depth blocks past inclusion."

    def evaluate(self, ctx: FinalityContext) -> PredicateResult:
        rule = ctx.rule
        inclusion = ctx.tx.require_inclusion_block()
        finalized = ctx.finalized_block
        if finalized is None:
            raise ValueError("Final predicate requires a finalized block in the context")

        depth = rule.depth(inclusion, finalized)
        metadata = {
            "policy": ctx.policy.value,
            "inclusion_block": inclusion,
            "finalized_block": finalized,
            "depth": depth,
            "min_depth": rule.min_depth,
        }

        if rule.is_satisfied(inclusion, finalized):
            return PredicateResult(
                name=self.name,
                ok=True,
                reason=rule.confirmation_note or None,
                metadata=metadata,
            )

        if depth < 0:
            reason = (
                f"Final: finalized block {finalized} precedes inclusion block "
                f"{inclusion}; the finalized reference is stale."
            )
        else:
            reason = (
                f"Final: depth {depth} is below the {rule.min_depth}-block "
                f"threshold of policy {ctx.policy.value}."
            )
        return PredicateResult(name=self.name, ok=False, reason=reason, metadata=metadata)

"""
Predicate registry.

Maps each PredicateName to its implementation class and builds the ordered
pipeline a FinalityEvaluator runs for a given policy.

Policies do not get their own predicate classes: both run the same
pipeline, and the policy only selects the FinalityRule that the Final
predicate applies (see core.models.POLICY_RULES).
"""

from __future__ import annotations

from typing import Dict, List, Type

from core.enums import FinalityPolicy, PredicateName
from predicates.base import Predicate
from predicates.final import FinalPredicate
from predicates.included import IncludedPredicate


# ================================================================
# 1) PredicateName -> concrete implementation class
# ================================================================

REAL_PREDICATE_CLASSES: Dict[PredicateName, Type[Predicate]] = {
    PredicateName.INCLUDED: IncludedPredicate,
    PredicateName.FINAL:    FinalPredicate,
}


# ================================================================
# 2) Canonical predicate order
#    Included must run first: Final is only defined once the
#    transaction has an inclusion block.
# ================================================================

CANONICAL_ORDER: List[PredicateName] = [
    PredicateName.INCLUDED,     # Included(tx)
    PredicateName.FINAL,        # Final(tx, finalized)
]


def _make_pred(name: PredicateName) -> Predicate:
    cls = REAL_PREDICATE_CLASSES[name]
    return cls()


def get_pipeline_for_policy(policy: FinalityPolicy | str) -> List[Predicate]:
    """
    Construct the predicate pipeline for a finality policy.

    Raises InvalidPolicy for names outside the FinalityPolicy enum.
    """
    FinalityPolicy.parse(policy)
    return [_make_pred(n) for n in CANONICAL_ORDER if n in REAL_PREDICATE_CLASSES]

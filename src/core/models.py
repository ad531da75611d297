from __future__ import annotations
import re
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator

from core.enums import FinalityPolicy
from core.errors import NotYetIncluded

JsonDict = Dict[str, Any]

# A block's position in the canonical chain. Non-negative, monotonically
# increasing, unique per chain.
BlockNumber = int

_TX_HASH_RE = re.compile(r"^0x[0-9a-f]{64}$")


# ======================================================================
# 1. TransactionReference — tx hash + (once located) its inclusion block
# ======================================================================

class TransactionReference(BaseModel):
    """
    A submitted transaction as seen by the chain-data provider.

        tx = (tx_hash, inclusion_block)

    • tx_hash:          32-byte transaction hash. A missing "0x" prefix is
                        added and hex digits are lowercased, so both
                        "0xABC…" and "abc…" are accepted on the command line.
    • inclusion_block:  block number the transaction was recorded in, or None
                        while the transaction is unknown or still pending.

    The reference is never mutated by the checker: inclusion is discovered
    once by the provider and carried through the evaluation as-is.
    """

    tx_hash: str = Field(
        ...,
        description="Normalized 0x-prefixed transaction hash.",
    )

    inclusion_block: Optional[BlockNumber] = Field(
        default=None,
        ge=0,
        description="Block number the transaction was included in (None if not yet included).",
    )

    @field_validator("tx_hash", mode="before")
    @classmethod
    def _normalize_tx_hash(cls, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        if not isinstance(value, str):
            raise ValueError(f"transaction hash must be a string, got {type(value).__name__}")
        value = value.strip().lower()
        if not value.startswith("0x"):
            value = "0x" + value
        if not _TX_HASH_RE.match(value):
            raise ValueError(f"not a 32-byte hex transaction hash: {value!r}")
        return value

    def is_included(self) -> bool:
        return self.inclusion_block is not None

    def require_inclusion_block(self) -> BlockNumber:
        """
        Return the inclusion block, or raise NotYetIncluded when the
        transaction has not been mined yet.
        """
        if self.inclusion_block is None:
            raise NotYetIncluded(self.tx_hash)
        return self.inclusion_block


# ======================================================================
# 2. FinalizedReference — point-in-time snapshot of the finalized block
# ======================================================================

class FinalizedReference(BaseModel):
    """
    The block the provider reports under the "finalized" block tag.

    Sampled once per evaluation and never cached: a verdict is only
    meaningful relative to the snapshot taken during that same evaluation.
    """

    block_number: BlockNumber = Field(
        ...,
        ge=0,
        description="Number of the block currently certified as final.",
    )

    block_hash: Optional[str] = Field(
        default=None,
        description="Hash of the finalized block (if the provider reports it).",
    )

    timestamp: Optional[int] = Field(
        default=None,
        description="Block timestamp (UNIX seconds) of the finalized block.",
    )

    extra: JsonDict = Field(
        default_factory=dict,
        description="Provider-specific block data.",
    )


# ======================================================================
# 3. FinalityRule — one parameterized rule for every policy
# ======================================================================

class FinalityRule(BaseModel):
    """
    Depth rule selected by a FinalityPolicy.

        final  :=  finalized_block - inclusion_block >= min_depth

    On whole block numbers "finalized > inclusion" is the same as a depth of
    at least 1, so both policies are expressed by a single threshold.
    """

    policy: FinalityPolicy
    min_depth: int = Field(..., ge=1)
    label: str = Field(
        ...,
        description="Human-readable policy name used in console output.",
    )
    confirmation_note: str = ""

    def depth(self, inclusion_block: BlockNumber, finalized_block: BlockNumber) -> int:
        return finalized_block - inclusion_block

    def is_satisfied(self, inclusion_block: BlockNumber, finalized_block: BlockNumber) -> bool:
        return self.depth(inclusion_block, finalized_block) >= self.min_depth


POLICY_RULES: Dict[FinalityPolicy, FinalityRule] = {
    FinalityPolicy.STRICT: FinalityRule(
        policy=FinalityPolicy.STRICT,
        min_depth=256,
        label="Pre-milestones",
        confirmation_note="Your transaction block has been confirmed after 256 blocks",
    ),
    FinalityPolicy.STANDARD: FinalityRule(
        policy=FinalityPolicy.STANDARD,
        min_depth=1,
        label="Milestones",
        confirmation_note="Your transaction block has been confirmed after 16 blocks",
    ),
}


def rule_for(policy: FinalityPolicy | str) -> FinalityRule:
    """Look up the FinalityRule for a policy (raises InvalidPolicy on unknown names)."""
    return POLICY_RULES[FinalityPolicy.parse(policy)]

# src/core/enums.py
from __future__ import annotations

from enum import Enum
from typing import Union

from core.errors import InvalidNetwork, InvalidPolicy


class FinalityPolicy(str, Enum):
    """
    Named finality policies accepted on the command line.

      * STRICT   ("pre_milestones"):
          the finalized checkpoint must be at least 256 blocks ahead of the
          transaction's inclusion block. This is the confirmation depth used
          on Polygon PoS before milestones were introduced.

      * STANDARD ("milestones"):
          the network's own finalized checkpoint is trusted as-is; any block
          strictly behind it is final.
    """
    STRICT = "pre_milestones"
    STANDARD = "milestones"

    @classmethod
    def parse(cls, value: Union[str, "FinalityPolicy"]) -> "FinalityPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidPolicy(value, [p.value for p in cls]) from None


class Network(str, Enum):
    """
    Networks a finality check can run against: Polygon PoS mainnet and its
    Amoy test network.
    """
    POLYGON = "polygon"
    AMOY = "amoy"

    @classmethod
    def parse(cls, value: Union[str, "Network"]) -> "Network":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidNetwork(value, [n.value for n in cls]) from None


class PredicateName(str, Enum):
    """
    Canonical names of the checks that make up one finality evaluation.

      Included(tx):      the transaction has an inclusion block
      Final(tx, f_blk):  the finalized block satisfies the policy's depth rule
    """

    INCLUDED = "Included"
    FINAL = "Final"

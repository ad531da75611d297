# src/finality_checker.py
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError

from core.enums import FinalityPolicy, Network
from core.errors import FinalityError, InvalidNetwork, InvalidPolicy
from core.models import TransactionReference, rule_for
from engine.evaluator import FinalityEvaluator, FinalityResult
from providers import ChainDataProvider, make_provider_for_network
from providers.web3_provider import DEFAULT_TIMEOUT

logger = logging.getLogger("finality_checker")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


@dataclass
class CheckConfig:
    """
    Configuration for a single finality check:

      - tx_hash:  transaction to check (with or without 0x prefix)
      - policy:   "pre_milestones" or "milestones"
      - network:  "polygon" or "amoy"
      - rpc_url:  optional endpoint override
    """
    tx_hash: str
    policy: FinalityPolicy
    network: Network
    rpc_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


def run_check(config: CheckConfig, provider: Optional[ChainDataProvider] = None) -> FinalityResult:
    """
    Execute one finality check and print the result lines.

    Responsibilities:
      - build the RPC provider for the selected network (unless given)
      - ask the evaluator for a verdict
      - print inclusion block, finalized block and the verdict
    """
    if provider is None:
        provider = make_provider_for_network(
            config.network, rpc_url=config.rpc_url, timeout=config.timeout
        )
        provider.ensure_connected()

    result = FinalityEvaluator().check(provider, config.tx_hash, config.policy)

    if result.not_yet_included:
        print("Your transaction block: not yet included")
    else:
        print(f"Latest finalized block: {result.finalized_block}")
        print(f"Your transaction block: {result.inclusion_block}")
        for pr in result.predicate_results:
            if pr.ok and pr.reason:
                print(pr.reason)

    label = rule_for(config.policy).label
    print(f"{label} finality check result: {str(result.final).lower()}")
    return result


# -------------------------------------------------------------------------
# Command line
# -------------------------------------------------------------------------

def _tx_hash_arg(value: str) -> str:
    try:
        return TransactionReference(tx_hash=value).tx_hash
    except ValidationError:
        raise argparse.ArgumentTypeError(
            f"not a 32-byte hex transaction hash: {value!r}"
        ) from None


def _policy_arg(value: str) -> FinalityPolicy:
    try:
        return FinalityPolicy.parse(value)
    except InvalidPolicy as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _network_arg(value: str) -> Network:
    try:
        return Network.parse(value)
    except InvalidNetwork as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finality-check",
        description="Check whether a Polygon PoS transaction has reached finality.",
    )
    parser.add_argument(
        "-t", "--tx-hash", "--txHash",
        dest="tx_hash",
        required=True,
        type=_tx_hash_arg,
        help="Transaction hash (0x prefix optional).",
    )
    parser.add_argument(
        "-f", "--function", "--policy",
        dest="policy",
        required=True,
        type=_policy_arg,
        metavar="{pre_milestones,milestones}",
        help="Finality policy: pre_milestones (256-block depth) or milestones (finalized tag).",
    )
    parser.add_argument(
        "-n", "--network",
        required=True,
        type=_network_arg,
        metavar="{polygon,amoy}",
        help="Network to query.",
    )
    parser.add_argument(
        "--rpc-url",
        default=None,
        help="JSON-RPC endpoint; defaults to $POLYGON_RPC_URL / $AMOY_RPC_URL or a public node.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"RPC request timeout in seconds. Default: {DEFAULT_TIMEOUT:g}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics on stderr. Default: WARNING",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    config = CheckConfig(
        tx_hash=args.tx_hash,
        policy=args.policy,
        network=args.network,
        rpc_url=args.rpc_url,
        timeout=args.timeout,
    )

    try:
        run_check(config)
    except FinalityError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.debug("Finality check failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

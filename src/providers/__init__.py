# providers/__init__.py
from __future__ import annotations

from typing import Optional, Union

from core.enums import Network
from core.networks import resolve_network
from providers.base import ChainDataProvider
from providers.memory import InMemoryChainDataProvider
from providers.web3_provider import DEFAULT_TIMEOUT, Web3ChainDataProvider


def make_provider_for_network(
    network: Union[str, Network],
    *,
    rpc_url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Web3ChainDataProvider:
    """
    Construct the RPC-backed provider for a network selector.

    The selector is resolved to its NetworkConfig here, once, so nothing
    downstream handles raw network strings. No request is sent until the
    provider is first queried.
    """
    config = resolve_network(network)
    return Web3ChainDataProvider(config, rpc_url=rpc_url, timeout=timeout)


__all__ = [
    "ChainDataProvider",
    "InMemoryChainDataProvider",
    "Web3ChainDataProvider",
    "make_provider_for_network",
]

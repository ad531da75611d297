# src/core/networks.py
from __future__ import annotations

import os
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

from core.enums import Network


class NetworkConfig(BaseModel):
    """
    Static description of a network the checker can query.

    The RPC endpoint is resolved in this order:
        1) an explicit override (e.g. --rpc-url),
        2) the network's environment variable (POLYGON_RPC_URL / AMOY_RPC_URL),
        3) the public default endpoint.
    """

    network: Network
    chain_id: int = Field(..., description="EIP-155 chain id.")
    display_name: str
    default_rpc_url: str
    rpc_env_var: str
    poa: bool = Field(
        default=True,
        description="Block headers carry oversized extraData (Bor/Clique style).",
    )

    class Config:
        frozen = True

    def rpc_url(self, override: Optional[str] = None) -> str:
        if override:
            return override
        from_env = os.environ.get(self.rpc_env_var, "").strip()
        if from_env:
            return from_env
        return self.default_rpc_url


NETWORKS: Dict[Network, NetworkConfig] = {
    Network.POLYGON: NetworkConfig(
        network=Network.POLYGON,
        chain_id=137,
        display_name="Polygon PoS",
        default_rpc_url="https://polygon-rpc.com",
        rpc_env_var="POLYGON_RPC_URL",
    ),
    Network.AMOY: NetworkConfig(
        network=Network.AMOY,
        chain_id=80002,
        display_name="Polygon Amoy",
        default_rpc_url="https://rpc-amoy.polygon.technology",
        rpc_env_var="AMOY_RPC_URL",
    ),
}


def resolve_network(value: Union[str, Network]) -> NetworkConfig:
    """Map a network selector to its configuration (raises InvalidNetwork)."""
    return NETWORKS[Network.parse(value)]

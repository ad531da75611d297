from __future__ import annotations

import pytest

from core.enums import Network
from providers.memory import InMemoryChainDataProvider

TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def provider() -> InMemoryChainDataProvider:
    return InMemoryChainDataProvider(network=Network.AMOY)


@pytest.fixture
def tx_hash() -> str:
    return TX_HASH

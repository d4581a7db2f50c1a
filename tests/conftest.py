from __future__ import annotations

import pytest

from papertrade.domain.models import AssetClass, Instrument


@pytest.fixture
def bitcoin() -> Instrument:
    return Instrument(symbol="BTC", asset_id="bitcoin", name="Bitcoin", asset_class=AssetClass.CRYPTO)


@pytest.fixture
def apple() -> Instrument:
    return Instrument(symbol="AAPL", asset_id="aapl", name="Apple Inc", asset_class=AssetClass.STOCK)

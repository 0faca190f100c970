import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from storefront.schemas import IssuerProfile, Order  # noqa: E402
from tests._orders import order_payload  # noqa: E402


@pytest.fixture
def order() -> Order:
    return Order.model_validate(order_payload())


@pytest.fixture
def issuer() -> IssuerProfile:
    return IssuerProfile(
        name="Green Acres Agro Agencies",
        tagline="Seeds, fertilizers and farm tools",
        gstin="07AAACG1234A1Z5",
        pan="AAACG1234A",
        phone="+91 98100 00000",
        email="billing@greenacres.example",
        jurisdiction="Gurgaon",
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 4, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"

"""Shared fixtures for the Catalogue service tests."""
import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app import schemas
from app.main import create_app
from app.store import InventoryStore

# 12:00 in Manila, the default report timezone
START = datetime(2024, 6, 10, 4, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_draft(**overrides) -> schemas.PartDraft:
    fields = {
        "name": "Brake Pad",
        "sku": "BP-1",
        "category": schemas.PartCategory.BRAKES,
        "stock": 5,
        "price": Decimal("500"),
        "description": "Sintered front brake pad.",
    }
    fields.update(overrides)
    return schemas.PartDraft(**fields)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(clock):
    counter = itertools.count(1)
    return InventoryStore(clock=clock, id_factory=lambda: f"part-{next(counter)}")


@pytest.fixture
def app(store):
    return create_app(store=store, genai_api_key="")


@pytest.fixture
def client(app):
    return TestClient(app)

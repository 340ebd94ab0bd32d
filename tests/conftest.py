from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from backend.estimator.core.database import configure_engine, dispose_engine, get_session_factory, init_db
from backend.estimator.models import EstimateStatus
from backend.estimator.seed import seed_sample_data
from backend.estimator.services.store import EstimationStore


@pytest.fixture
def store(tmp_path):
    configure_engine(f"sqlite:///{(tmp_path / 'estimator.db').as_posix()}")
    init_db()
    yield EstimationStore(get_session_factory())
    dispose_engine()


@pytest.fixture
def seeded_store(store):
    seed_sample_data(store)
    return store


@pytest.fixture
def make_client(store):
    def factory(name: str = "Acme Builders", email: str = "office@acme.example"):
        return store.create_client(name=name, email=email, city="Springfield", state="IL")

    return factory


@pytest.fixture
def make_estimate(store):
    def factory(client_id: str, number: str, amount: str = "1000.00", status=EstimateStatus.DRAFT, **extra):
        return store.create_estimate(
            client_id=client_id,
            estimate_number=number,
            title=extra.pop("title", f"Estimate {number}"),
            description=extra.pop("description", ""),
            total_amount=Decimal(amount),
            status=status,
            **extra,
        )

    return factory

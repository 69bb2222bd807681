import random

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from password_please.config import Settings
from password_please.main import create_app
from password_please.services.counter_store import CounterStore
from password_please.services.password_service import PasswordService


@pytest.fixture
def counter_path(tmp_path):
    return tmp_path / "counter.txt"


@pytest.fixture
def make_settings(tmp_path):
    """Settings isolated from the environment: empty template dir, no counter file."""

    def _make(**overrides) -> Settings:
        values = {"template_dir": str(tmp_path), "counter_file": None}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest_asyncio.fixture
async def service():
    svc = PasswordService(rng=random.Random(1234))
    await svc.start()
    yield svc
    await svc.stop()


@pytest_asyncio.fixture
async def persistent_service(counter_path):
    svc = PasswordService(store=CounterStore(counter_path), rng=random.Random(1234))
    await svc.start()
    yield svc
    await svc.stop()


@pytest.fixture
def client(make_settings):
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client

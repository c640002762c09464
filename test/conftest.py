"""
Shared pytest fixtures for record adapter tests.
"""

import pytest
from fastapi.testclient import TestClient

from helpers import RecordingStore
from recordkv.adapter.record_adapter import RecordAdapter
from recordkv.impl.embedded_store import EmbeddedTransactionalStore
from recordkv.impl.http_store import HttpTransactionalStore
from recordkv.service.store_service import create_app


@pytest.fixture
def snapshot_path(tmp_path):
    """Provide a path for a store snapshot file."""
    return str(tmp_path / "store.json")


@pytest.fixture
def backing_store():
    """Provide a fresh in-memory embedded store."""
    return EmbeddedTransactionalStore()


@pytest.fixture
def service_client(backing_store):
    """Provide a TestClient for a store service serving backing_store."""
    with TestClient(create_app(backing_store)) as client:
        yield client


@pytest.fixture(params=["embedded", "http"])
def store(request, backing_store):
    """
    Provide each store variant on top of backing_store.

    The http variant talks to the store service in-process through TestClient.
    """
    if request.param == "embedded":
        yield backing_store
        return
    with TestClient(create_app(backing_store)) as client:
        yield HttpTransactionalStore(base_url="http://testserver", http_client=client)


@pytest.fixture
def recording_store(store):
    return RecordingStore(store)


@pytest.fixture
def adapter(recording_store):
    """Provide a RecordAdapter over a recording store."""
    return RecordAdapter(recording_store)

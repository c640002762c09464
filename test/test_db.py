import pytest
from fastapi.testclient import TestClient

from recordkv.adapter.config import AdapterConfig
from recordkv.adapter.db import StoreDB, open_store
from recordkv.base.exceptions import AdapterStateError
from recordkv.base.status import Status
from recordkv.impl.embedded_store import EmbeddedTransactionalStore
from recordkv.impl.http_store import HttpTransactionalStore
from recordkv.service.store_service import create_app


# =========================================================
# Configuration
# =========================================================

def test_properties_map_onto_fields():
    config = AdapterConfig.from_properties({
        "store.backend": "embedded",
        "store.host": "db1",
        "store.port": "9191",
        "unrelated.property": "x",
    })
    assert config.store_backend == "embedded"
    assert config.store_host == "db1"
    assert config.store_port == 9191
    assert config.base_url == "http://db1:9191"


def test_store_url_overrides_host_and_port():
    config = AdapterConfig.from_properties({"store.url": "http://kv:1234/", "store.host": "ignored"})
    assert config.base_url == "http://kv:1234"


def test_open_store_variants(snapshot_path):
    http = open_store(AdapterConfig(store_backend="http"))
    assert isinstance(http, HttpTransactionalStore)
    http.close()

    embedded = open_store(AdapterConfig(store_backend="EMBEDDED", snapshot_path=snapshot_path))
    assert isinstance(embedded, EmbeddedTransactionalStore)
    assert embedded.snapshot_path == snapshot_path
    embedded.close()


def test_open_store_rejects_unknown_backend():
    with pytest.raises(AdapterStateError):
        open_store(AdapterConfig(store_backend="carrier-pigeon"))


# =========================================================
# Lifecycle
# =========================================================

def test_crud_before_init_is_error():
    db = StoreDB()
    assert db.read("t", "k") == (Status.ERROR, {})
    assert db.insert("t", "k", {"FIELD0": "a"}) is Status.ERROR
    assert db.update("t", "k", {"FIELD0": "a"}) is Status.ERROR
    assert db.delete("t", "k") is Status.ERROR
    assert db.scan("t", "k", 1) == (Status.ERROR, [])


def test_double_init_fails():
    db = StoreDB(store=EmbeddedTransactionalStore())
    db.init()
    with pytest.raises(AdapterStateError):
        db.init()
    db.cleanup()


def test_cleanup_without_init_is_noop():
    StoreDB().cleanup()


def test_embedded_binding_persists_across_instances(snapshot_path):
    props = {"store.backend": "embedded", "snapshot.path": snapshot_path}

    db = StoreDB(props)
    db.init()
    assert db.insert("usertable", "user1", {"FIELD0": "a", "FIELD1": "b"}) is Status.OK
    db.cleanup()
    assert not db.initialized

    db = StoreDB(props)
    db.init()
    assert db.read("usertable", "user1", ["FIELD0", "FIELD1"]) == (
        Status.OK,
        {"FIELD0": "a", "FIELD1": "b"},
    )
    assert db.delete("usertable", "user1") is Status.OK
    assert db.read("usertable", "user1") == (Status.OK, {})
    db.cleanup()


def test_http_binding_against_service(backing_store):
    with TestClient(create_app(backing_store)) as client:
        store = HttpTransactionalStore(base_url="http://testserver", http_client=client)
        db = StoreDB(store=store)
        db.init()
        assert db.update("usertable", "user9", {"FIELD4": "e"}) is Status.OK
        assert db.read("usertable", "user9") == (Status.OK, {"FIELD4": "e"})
        assert db.scan("usertable", "user9", 5) == (Status.ERROR, [])
        db.cleanup()

    assert backing_store.get("usertable$user9$FIELD4") == "e"

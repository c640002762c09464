"""
Benchmark binding.

StoreDB is the object a benchmark harness drives: one instance per client
thread, init() once before the workload and cleanup() once after it.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from recordkv.adapter.config import AdapterConfig
from recordkv.adapter.record_adapter import RecordAdapter
from recordkv.base.exceptions import AdapterStateError
from recordkv.base.status import Status
from recordkv.base.store import TransactionalStore
from recordkv.core.transaction_builder import FieldValue
from recordkv.impl.embedded_store import EmbeddedTransactionalStore
from recordkv.impl.http_store import HttpTransactionalStore

logger = logging.getLogger(__name__)


def open_store(config: AdapterConfig) -> TransactionalStore:
    """Open the store variant selected by config.store_backend."""
    backend = config.store_backend.lower()
    if backend == "http":
        return HttpTransactionalStore(
            base_url=config.base_url,
            connect_timeout=config.http_connect_timeout,
            read_timeout=config.http_read_timeout,
        )
    if backend == "embedded":
        return EmbeddedTransactionalStore(snapshot_path=config.snapshot_path)
    raise AdapterStateError(
        message=f"Unknown store backend: {config.store_backend}",
        details="expected 'http' or 'embedded'",
    )


class StoreDB:
    """
    Benchmark-facing database binding.

    Args:
        properties: Benchmark properties (e.g. {"store.host": "db1", "store.port": "9090"})
        store: Store to use instead of opening one from configuration. An
            embedded store shared by several StoreDB instances must be injected
            this way; the binding closes whatever store it holds on cleanup().
    """

    def __init__(
        self,
        properties: Optional[Mapping[str, str]] = None,
        store: Optional[TransactionalStore] = None,
    ):
        self.properties = dict(properties or {})
        self._injected_store = store
        self.adapter: Optional[RecordAdapter] = None

    @property
    def initialized(self) -> bool:
        return self.adapter is not None

    def init(self) -> None:
        """
        Initialize any state for this DB. Called once per DB instance.

        Raises:
            AdapterStateError: If the DB is already initialized
        """
        if self.initialized:
            raise AdapterStateError(message="Client is already initialized.")

        if self._injected_store is not None:
            store = self._injected_store
        else:
            config = AdapterConfig.from_properties(self.properties)
            store = open_store(config)
            logger.info(
                "StoreDB init: backend=%s url=%s snapshot=%s",
                config.store_backend, config.base_url, config.snapshot_path
            )
        self.adapter = RecordAdapter(store)

    def cleanup(self) -> None:
        """Release the store. Safe to call on a DB that was never initialized."""
        if not self.initialized:
            return
        adapter, self.adapter = self.adapter, None
        adapter.close()
        logger.info("StoreDB cleanup done")

    # =========================================================
    # CRUD
    # =========================================================

    def read(
        self, table: str, key: str, fields: Optional[Iterable[str]] = None
    ) -> Tuple[Status, Dict[str, str]]:
        if not self.initialized:
            return Status.ERROR, {}
        return self.adapter.read(table, key, fields)

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: Optional[Iterable[str]] = None,
    ) -> Tuple[Status, List[Dict[str, str]]]:
        if not self.initialized:
            return Status.ERROR, []
        return self.adapter.scan(table, start_key, record_count, fields)

    def insert(self, table: str, key: str, values: Mapping[str, FieldValue]) -> Status:
        if not self.initialized:
            return Status.ERROR
        return self.adapter.insert(table, key, values)

    def update(self, table: str, key: str, values: Mapping[str, FieldValue]) -> Status:
        if not self.initialized:
            return Status.ERROR
        return self.adapter.update(table, key, values)

    def delete(self, table: str, key: str) -> Status:
        if not self.initialized:
            return Status.ERROR
        return self.adapter.delete(table, key)

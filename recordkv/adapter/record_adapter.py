"""
Record Adapter

Public CRUD surface used by the benchmark harness. Each call builds one
transaction program, submits it to the transactional store in a single round
trip, and reports the outcome as a Status.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from recordkv.base.status import Status
from recordkv.base.store import TransactionalStore
from recordkv.core.fields import resolve_fields
from recordkv.core.response_decoder import decode_response
from recordkv.core.transaction_builder import (
    FieldValue,
    build_delete_program,
    build_read_program,
    build_write_program,
)

logger = logging.getLogger(__name__)


class RecordAdapter:
    """
    Maps logical records onto a flat transactional key-value store.

    The adapter keeps no state between calls besides the store handle and
    does no locking of its own: use one adapter per worker thread unless the
    store is safe for concurrent use.
    """

    def __init__(self, store: TransactionalStore):
        self.store = store

    def read(
        self,
        table: str,
        key: str,
        fields: Optional[Iterable[str]] = None,
    ) -> Tuple[Status, Dict[str, str]]:
        """
        Read a record.

        Args:
            table: The name of the table
            key: The record key of the record to read
            fields: The fields to read, or None for the default field set

        Returns:
            (Status.OK, field -> value for every field that has a value), or
            (Status.ERROR, {}) if anything failed
        """
        try:
            names = resolve_fields(fields)
            program = build_read_program(table, key, names)
            result = self.store.execute(program)
            values = decode_response(result.extract_text(), names)
        except Exception as e:
            logger.warning(
                "RecordAdapter.read failed: table=%s key=%s err=%r", table, key, e
            )
            return Status.ERROR, {}

        logger.debug(
            "RecordAdapter.read: table=%s key=%s fields=%d found=%d",
            table, key, len(names), len(values)
        )
        return Status.OK, values

    def insert(self, table: str, key: str, values: Mapping[str, FieldValue]) -> Status:
        """
        Insert a record. Every field value is written to its own flat key,
        overwriting earlier values; all writes are applied together or not at all.
        """
        try:
            program = build_write_program(table, key, values)
            self.store.execute(program)
        except Exception as e:
            logger.warning(
                "RecordAdapter.insert failed: table=%s key=%s err=%r", table, key, e
            )
            return Status.ERROR

        logger.debug("RecordAdapter.insert: table=%s key=%s fields=%d", table, key, len(values))
        return Status.OK

    def update(self, table: str, key: str, values: Mapping[str, FieldValue]) -> Status:
        # Update is equivalent to an insert.
        return self.insert(table, key, values)

    def delete(self, table: str, key: str) -> Status:
        """Erase every default field of the record."""
        try:
            program = build_delete_program(table, key)
            self.store.execute(program)
        except Exception as e:
            logger.warning(
                "RecordAdapter.delete failed: table=%s key=%s err=%r", table, key, e
            )
            return Status.ERROR

        logger.debug("RecordAdapter.delete: table=%s key=%s", table, key)
        return Status.OK

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: Optional[Iterable[str]] = None,
    ) -> Tuple[Status, List[Dict[str, str]]]:
        # Range scans are not supported by flat keys.
        return Status.ERROR, []

    def close(self) -> None:
        self.store.close()

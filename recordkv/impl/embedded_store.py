import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, Optional

from recordkv.base.exceptions import ProgramFormatError, StoreClosedError
from recordkv.base.program import Add, Program, Read, Text, TransactionResult, Write, children, op_of
from recordkv.base.store import TransactionalStore

logger = logging.getLogger(__name__)


class EmbeddedTransactionalStore(TransactionalStore):
    """
    In-process transactional key-value store.

    Programs run one at a time under a lock. Writes go to a staging buffer
    that is applied only once the whole program evaluated without error, so a
    failing program leaves no trace.

    When snapshot_path is given the whole store is loaded from it at
    construction and written back to it on save()/close().
    """

    def __init__(self, snapshot_path: Optional[str] = None):
        self.snapshot_path = snapshot_path
        self._entries: Dict[str, str] = {}
        self._mutex = threading.Lock()
        self._closed = False
        if snapshot_path:
            self._entries = self._load_snapshot(snapshot_path)

        logger.info(
            "EmbeddedTransactionalStore opened: snapshot=%s entries=%d",
            snapshot_path, len(self._entries)
        )

    # =========================================================
    # Snapshot persistence
    # =========================================================

    def _load_snapshot(self, path: str) -> Dict[str, str]:
        """
        Snapshot file schema:
        {
          "entries": {"<flat key>": "<value>", ...}
        }
        """
        if not os.path.exists(path):
            return {}
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
        entries = obj.get("entries", {}) if isinstance(obj, dict) else None
        if not isinstance(entries, dict):
            raise ValueError(f"malformed snapshot file: {path}")
        return {str(k): str(v) for k, v in entries.items()}

    def _atomic_write_json(self, obj: Dict[str, Any], path: str):
        """
        Atomic write: write temp -> fsync -> replace.
        """
        d = os.path.dirname(os.path.abspath(path))
        os.makedirs(d, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp_snapshot_", dir=d)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(obj, f, ensure_ascii=False, separators=(",", ":"))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _save_locked(self) -> None:
        # caller holds _mutex
        if not self.snapshot_path:
            return
        self._atomic_write_json({"entries": dict(self._entries)}, self.snapshot_path)
        logger.info("EmbeddedTransactionalStore saved: snapshot=%s entries=%d", self.snapshot_path, len(self._entries))

    def save(self) -> None:
        with self._mutex:
            self._save_locked()

    # =========================================================
    # Program evaluation
    # =========================================================

    def _lookup(self, key: str, staged: Dict[str, str]) -> str:
        if key in staged:
            return staged[key]
        return self._entries.get(key, "")

    def _evaluate(self, program: Program, staged: Dict[str, str]) -> str:
        """
        Evaluate with an explicit stack, children left to right.

        A node is visited once to push its children and once more to combine
        their results, so program depth is not bounded by the interpreter stack.
        """
        results = []
        stack = [(program, False)]
        while stack:
            node, expanded = stack.pop()
            if isinstance(node, Text):
                results.append(node.value)
                continue
            if op_of(node) is None:
                raise ProgramFormatError(details=f"unknown program node {type(node).__name__}")
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(children(node)))
                continue

            if isinstance(node, Read):
                results.append(self._lookup(results.pop(), staged))
            elif isinstance(node, Write):
                value = results.pop()
                key = results.pop()
                staged[key] = value
                results.append("")
            elif isinstance(node, Add):
                right = results.pop()
                left = results.pop()
                results.append(left + right)
            else:
                second = results.pop()
                results.pop()
                results.append(second)
        return results.pop()

    def execute(self, program: Program) -> TransactionResult:
        with self._mutex:
            if self._closed:
                raise StoreClosedError()
            staged: Dict[str, str] = {}
            value = self._evaluate(program, staged)
            # erased fields stay in the store with value ""
            self._entries.update(staged)

        logger.debug("EmbeddedTransactionalStore.execute: writes=%d", len(staged))
        return TransactionResult(value)

    # =========================================================
    # Inspection
    # =========================================================

    def get(self, flat_key: str) -> Optional[str]:
        with self._mutex:
            return self._entries.get(flat_key)

    def snapshot(self) -> Dict[str, str]:
        with self._mutex:
            return dict(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Save the snapshot and refuse further programs.

        Both happen under the mutex, so every program acknowledged before
        close() is in the snapshot and every later one raises StoreClosedError.
        """
        with self._mutex:
            if self._closed:
                return
            self._save_locked()
            self._closed = True
        logger.info("EmbeddedTransactionalStore closed: snapshot=%s", self.snapshot_path)

"""
Record Adapter Test Helper Functions
Stub stores and record generators shared by the tests.
"""
from typing import Dict, List

from recordkv.base.program import Add, Program, Text, TransactionResult, children
from recordkv.base.store import TransactionalStore
from recordkv.core.fields import DEFAULT_FIELDS


# ==================== Stub Stores ====================

class RecordingStore(TransactionalStore):
    """Store wrapper remembering every submitted program."""

    def __init__(self, inner: TransactionalStore):
        self.inner = inner
        self.programs: List[Program] = []
        self.closed = False

    def execute(self, program: Program) -> TransactionResult:
        self.programs.append(program)
        return self.inner.execute(program)

    def close(self) -> None:
        self.closed = True
        self.inner.close()


class FailingStore(TransactionalStore):
    """Store whose every execute raises the given exception."""

    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    def execute(self, program: Program) -> TransactionResult:
        self.calls += 1
        raise self.exc

    def close(self) -> None:
        pass


class FixedResponseStore(TransactionalStore):
    """Store answering every program with the same text."""

    def __init__(self, text: str):
        self.text = text

    def execute(self, program: Program) -> TransactionResult:
        return TransactionResult(self.text)

    def close(self) -> None:
        pass


# ==================== Record Helpers ====================

def full_record(prefix: str = "v") -> Dict[str, str]:
    """A value for every default field"""
    return {field: f"{prefix}{i}" for i, field in enumerate(DEFAULT_FIELDS)}


def wide_record(width: int) -> Dict[str, str]:
    """A record with many more fields than the default set"""
    return {f"F{i}": f"value-{i}" for i in range(width)}


# ==================== Program Helpers ====================

def program_depth(program: Program) -> int:
    """Longest root-to-leaf path, counted in nodes"""
    deepest = 0
    stack = [(program, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children(node))
    return deepest


def deep_chain(length: int) -> Program:
    """Left-nested Add chain of the given length; evaluates to "x" * length"""
    program = Text("")
    for _ in range(length):
        program = Add(program, Text("x"))
    return program

"""
Transaction programs.

A program is an immutable expression tree submitted to the transactional
store in one request. Every node evaluates to a string:

    Text(value)          -> value
    Read(key)            -> current value stored under key, "" if unset
    Write(key, value)    -> "" (stores value under key)
    Add(left, right)     -> left + right
    Cons(first, second)  -> second (first is evaluated for its effects)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from recordkv.base.exceptions import ProgramFormatError


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Read:
    key: "Program"


@dataclass(frozen=True)
class Write:
    key: "Program"
    value: "Program"


@dataclass(frozen=True)
class Add:
    left: "Program"
    right: "Program"


@dataclass(frozen=True)
class Cons:
    first: "Program"
    second: "Program"


Program = Union[Text, Read, Write, Add, Cons]

EMPTY = Text("")


@dataclass(frozen=True)
class TransactionResult:
    """Final value of an executed program."""

    text: str = ""

    def extract_text(self) -> str:
        return self.text


# =========================================================
# Builder capability
# =========================================================

def text(value: str) -> Text:
    return Text(value)


def read(key: Program) -> Read:
    return Read(key)


def write(key: Program, value: Program) -> Write:
    return Write(key, value)


def add(left: Program, right: Program) -> Add:
    return Add(left, right)


def cons(first: Program, second: Program) -> Cons:
    return Cons(first, second)


def _reduce_pairwise(combine, nodes: Iterable[Program]) -> Program:
    """
    Combine nodes left to right into a balanced tree.

    Depth grows with log2(len(nodes)), so programs over many fields stay
    shallow for every evaluator and for the JSON wire form.
    """
    level = list(nodes)
    if not level:
        return EMPTY
    while len(level) > 1:
        paired = [combine(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]


def concat_all(nodes: Iterable[Program]) -> Program:
    """Add over all nodes; evaluates to their results concatenated in order."""
    return _reduce_pairwise(add, nodes)


def sequence_all(nodes: Iterable[Program]) -> Program:
    """Cons over all nodes; evaluates them in order."""
    return _reduce_pairwise(cons, nodes)


# =========================================================
# Node structure
# =========================================================

# op -> child attribute names, in evaluation order
CHILDREN: Dict[str, Tuple[str, ...]] = {
    "text": (),
    "read": ("key",),
    "write": ("key", "value"),
    "add": ("left", "right"),
    "cons": ("first", "second"),
}

_NODE_TYPES = {"text": Text, "read": Read, "write": Write, "add": Add, "cons": Cons}
_OPS = {node_type: op for op, node_type in _NODE_TYPES.items()}


def op_of(node: Any) -> Optional[str]:
    return _OPS.get(type(node))


def children(node: Any) -> Tuple[Any, ...]:
    op = op_of(node)
    if op is None:
        return ()
    return tuple(getattr(node, name) for name in CHILDREN[op])


# =========================================================
# Inspection
# =========================================================

def iter_nodes(program: Program) -> Iterator[Program]:
    """Yield every node of the program, depth first, left to right."""
    stack = [program]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def count_reads(program: Program) -> int:
    return sum(1 for node in iter_nodes(program) if isinstance(node, Read))


def count_writes(program: Program) -> int:
    return sum(1 for node in iter_nodes(program) if isinstance(node, Write))


# =========================================================
# Wire form
# =========================================================
# Both directions walk the tree with an explicit stack: a node is visited
# once to push its children and once more to assemble it from their results.

def to_wire(program: Program) -> Dict[str, Any]:
    """Convert a program into its JSON-compatible wire form."""
    built: List[Dict[str, Any]] = []
    stack = [(program, False)]
    while stack:
        node, expanded = stack.pop()
        op = op_of(node)
        if op is None:
            raise ProgramFormatError(details=f"unknown program node {type(node).__name__}")
        if op == "text":
            built.append({"op": "text", "value": node.value})
            continue
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children(node)))
            continue
        names = CHILDREN[op]
        args = built[-len(names):]
        del built[-len(names):]
        wire = {"op": op}
        wire.update(zip(names, args))
        built.append(wire)
    return built.pop()


def from_wire(obj: Any) -> Program:
    """
    Rebuild a program from its wire form.

    Raises:
        ProgramFormatError: If obj is not a well-formed program
    """
    built: List[Program] = []
    stack = [(obj, False)]
    while stack:
        item, expanded = stack.pop()
        if not isinstance(item, dict):
            raise ProgramFormatError(details=f"expected object, got {type(item).__name__}")

        op = item.get("op")
        if not isinstance(op, str) or op not in CHILDREN:
            raise ProgramFormatError(details=f"unknown op {op!r}")
        if op == "text":
            value = item.get("value")
            if not isinstance(value, str):
                raise ProgramFormatError(details="text value must be a string")
            built.append(Text(value))
            continue

        names = CHILDREN[op]
        if not expanded:
            missing = [name for name in names if name not in item]
            if missing:
                raise ProgramFormatError(details=f"{op} node is missing {missing[0]!r}")
            stack.append((item, True))
            stack.extend((item[name], False) for name in reversed(names))
            continue

        args = built[-len(names):]
        del built[-len(names):]
        built.append(_NODE_TYPES[op](*args))
    return built.pop()

from typing import Iterable, Optional, Tuple

# By default, each record has 10 possible fields.
DEFAULT_FIELDS: Tuple[str, ...] = tuple(f"FIELD{i}" for i in range(10))


def resolve_fields(fields: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    Freeze the fields of one call into a tuple.

    The tuple order is the order both the read program and the decoder use,
    so it must be taken exactly once per call.
    """
    if fields is None:
        return DEFAULT_FIELDS
    return tuple(fields)

"""
Transaction Builder

Packs every field access of one logical record into a single program so the
store applies them atomically in one round trip.
"""

import logging
from typing import Iterable, Mapping, Union

from recordkv.base.exceptions import SeparatorViolationError
from recordkv.base.program import Program, add, concat_all, read, sequence_all, text, write
from recordkv.core.fields import DEFAULT_FIELDS
from recordkv.core.key_encoder import encode_key

logger = logging.getLogger(__name__)

# Terminates every field value in a composite read response.
VALUE_SEPARATOR = "\0"

FieldValue = Union[str, bytes]


def to_text(value: FieldValue) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def build_read_program(table: str, key: str, fields: Iterable[str]) -> Program:
    """
    Build a program reading every field and returning them as one string.

    The result is v0 + SEP + v1 + SEP + ... + v(n-1) + SEP, in the iteration
    order of fields. Unset keys contribute an empty value. No fields gives
    EMPTY, which evaluates to "".
    """
    return concat_all(
        add(read(text(encode_key(table, key, field))), text(VALUE_SEPARATOR))
        for field in fields
    )


def build_write_program(table: str, key: str, values: Mapping[str, FieldValue]) -> Program:
    """
    Build a program writing every field value to its own flat key.

    Raises:
        SeparatorViolationError: If a value contains VALUE_SEPARATOR; such a
            value could never be read back unambiguously
    """
    writes = []
    for field, value in values.items():
        value = to_text(value)
        if VALUE_SEPARATOR in value:
            logger.warning(
                "Rejecting write: table=%s key=%s field=%s contains value separator",
                table, key, field
            )
            raise SeparatorViolationError(field=field, details=f"table={table} key={key}")
        writes.append(write(text(encode_key(table, key, field)), text(value)))
    return sequence_all(writes)


def build_delete_program(table: str, key: str) -> Program:
    """Erase every default field by writing the empty string to it."""
    return build_write_program(table, key, {field: "" for field in DEFAULT_FIELDS})

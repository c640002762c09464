from typing import Dict, Sequence

from recordkv.base.exceptions import ResponseDecodeError
from recordkv.core.transaction_builder import VALUE_SEPARATOR


def decode_response(composite: str, field_names: Sequence[str]) -> Dict[str, str]:
    """
    Split a composite read response back into field values.

    Segments are paired with field_names by position. The segment after the
    final separator must be empty and is dropped. Empty values mean the field
    is absent and are left out of the result.

    Raises:
        ResponseDecodeError: If the number of segments does not match field_names
    """
    segments = composite.split(VALUE_SEPARATOR)
    if len(segments) != len(field_names) + 1 or segments[-1] != "":
        raise ResponseDecodeError(
            expected=len(field_names),
            actual=len(segments) - 1,
            details=f"fields={list(field_names)}",
        )

    result = {}
    for name, value in zip(field_names, segments):
        if value:
            result[name] = value
    return result

import pytest

from recordkv.base.exceptions import ResponseDecodeError
from recordkv.core.response_decoder import decode_response

SEP = "\0"


def test_decode_pairs_segments_by_position():
    composite = "a" + SEP + "b" + SEP
    assert decode_response(composite, ["FIELD0", "FIELD1"]) == {"FIELD0": "a", "FIELD1": "b"}


def test_decode_drops_empty_segments():
    composite = SEP + "b" + SEP + SEP
    assert decode_response(composite, ["FIELD0", "FIELD1", "FIELD2"]) == {"FIELD1": "b"}


def test_decode_all_absent():
    assert decode_response(SEP * 3, ["A", "B", "C"]) == {}


def test_decode_no_fields():
    assert decode_response("", []) == {}


def test_decode_keeps_unicode_and_dollar_signs():
    composite = "π$x" + SEP
    assert decode_response(composite, ["FIELD0"]) == {"FIELD0": "π$x"}


@pytest.mark.parametrize(
    "composite, names",
    [
        ("a" + SEP, ["FIELD0", "FIELD1"]),            # too few segments
        ("a" + SEP + "b" + SEP, ["FIELD0"]),          # too many segments
        ("a" + SEP + "b", ["FIELD0", "FIELD1"]),      # missing trailing separator
        ("a", ["FIELD0"]),
        ("x", []),
    ],
)
def test_decode_rejects_mismatched_response(composite, names):
    with pytest.raises(ResponseDecodeError):
        decode_response(composite, names)

"""
Module 01 - Canonical JSON Unit Tests
Tests for core/schemas/canonical.py

Verifies:
- Deterministic output (sorted keys, no whitespace)
- Bytes rendered as 0x hex, None fields dropped
- List order preserved
- Non-finite floats and unknown types rejected
"""
import pytest

from core.schemas.canonical import (
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)
from core.schemas.errors import CanonicalizationException, ErrorCodes
from core.schemas.proof import Side

from fixtures import make_tree


class TestDumpsCanonical:
    """Tests for canonical serialization."""

    def test_sorted_keys_no_whitespace(self):
        assert dumps_canonical({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_key_order_irrelevant(self):
        assert dumps_canonical({"x": 1, "y": 2}) == dumps_canonical({"y": 2, "x": 1})

    def test_bytes_as_hex(self):
        assert dumps_canonical({"d": b"\x01\xff"}) == '{"d":"0x01ff"}'

    def test_none_fields_dropped(self):
        assert dumps_canonical({"a": None, "b": 1}) == '{"b":1}'

    def test_list_order_preserved(self):
        assert dumps_canonical([3, 1, 2]) == "[3,1,2]"

    def test_enum_value(self):
        assert dumps_canonical({"side": Side.LEFT}) == '{"side":"left"}'

    def test_unicode_kept(self):
        assert dumps_canonical({"k": "交易"}) == '{"k":"交易"}'

    def test_model_dump(self):
        summary = make_tree(["A", "B"]).summary()
        text = dumps_canonical(summary)
        assert text == dumps_canonical(summary.model_dump(mode="json"))
        assert '"algorithm":"sha256"' in text


class TestRejections:
    """Values with no canonical form."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float(self, value):
        with pytest.raises(CanonicalizationException) as exc_info:
            canonicalize_value({"x": value})
        assert exc_info.value.code == ErrorCodes.CANONICALIZATION_ERROR
        assert exc_info.value.details["path"] == "x"

    def test_unknown_type(self):
        with pytest.raises(CanonicalizationException, match="set"):
            dumps_canonical({"x": {1, 2}})


class TestHelpers:
    """Tests for loads_canonical."""

    def test_loads(self):
        assert loads_canonical('{"a":1}') == {"a": 1}


"""Tests for condition values."""

import pytest

from whenkit.values import ConditionParseError, ConditionValue, ValueKind, dumps, parse_condition


class TestFromJson:
    def test_scalars(self):
        assert ConditionValue.from_json(None).kind == ValueKind.NULL
        assert ConditionValue.from_json("x") == ConditionValue.string("x")
        assert ConditionValue.from_json(3) == ConditionValue.number(3)
        assert ConditionValue.from_json(2.5) == ConditionValue.number(2.5)

    def test_bool_is_not_number(self):
        v = ConditionValue.from_json(True)
        assert v.kind == ValueKind.BOOLEAN
        assert v.value is True

    def test_nested(self):
        v = ConditionValue.from_json({"$and": [{"&a": {"$eq": 1}}, {"&b": None}]})
        assert v.kind == ValueKind.OBJECT
        assert v.keys() == ["$and"]
        inner = v.value["$and"]
        assert inner.kind == ValueKind.ARRAY
        assert len(inner) == 2

    def test_non_finite_rejected(self):
        with pytest.raises(ConditionParseError):
            ConditionValue.from_json(float("nan"))

    def test_unsupported_type(self):
        with pytest.raises(ConditionParseError):
            ConditionValue.from_json(object())

    def test_round_trip_keeps_key_order(self):
        data = {"z": 1, "a": [True, None, "s"], "m": {"y": 2, "b": 3}}
        assert list(ConditionValue.from_json(data).to_json()) == ["z", "a", "m"]
        assert ConditionValue.from_json(data).to_json() == data


class TestParseCondition:
    def test_valid(self):
        v = parse_condition('{"&x": {"$gt": 10}}')
        assert v.to_json() == {"&x": {"$gt": 10}}

    def test_invalid_json(self):
        with pytest.raises(ConditionParseError):
            parse_condition("{not json")

    def test_nan_constant_rejected(self):
        with pytest.raises(ConditionParseError):
            parse_condition('{"a": NaN}')

    def test_oversized_integer(self):
        with pytest.raises(ConditionParseError):
            parse_condition("1" * 5000)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_condition("")


class TestHelpers:
    def test_is_container(self):
        assert ConditionValue.object().is_container
        assert ConditionValue.array().is_container
        assert not ConditionValue.string("x").is_container
        assert len(ConditionValue.string("x")) == 0

    def test_keys_of_non_object(self):
        assert ConditionValue.array().keys() == []

    def test_dumps_structured(self):
        assert dumps(ConditionValue.from_json({"a": "é"})) == '{"a": "é"}'

    def test_dumps_raw_string(self):
        assert dumps("not json") == '"not json"'

"""Tests for the type coercer (hydrator_kernel.domain.coercion)."""

import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from hydrator_kernel.domain.coercion import (
    MAX_INT_DIGITS,
    TIMESTAMP_FORMAT,
    coerce_value,
    describe_type,
    to_int,
    to_timestamp,
)
from hydrator_kernel.domain.types import TargetType
from hydrator_kernel.exceptions import HydrationError, TypeMismatchError


def _coerce(value, target_type):
    return coerce_value(
        value,
        target_type,
        target_field="field",
        entity_type="tests.Entity",
        source_key="column",
    )


class TestToInt:
    def test_int_passthrough(self):
        assert to_int(42) == 42

    def test_numeric_strings(self):
        assert to_int("42") == 42
        assert to_int(" 7 ") == 7
        assert to_int("-13") == -13
        assert to_int("1e3") == 1000

    def test_truncates_toward_zero(self):
        assert to_int("3.9") == 3
        assert to_int("-3.9") == -3
        assert to_int(2.7) == 2
        assert to_int(Decimal("-0.5")) == 0

    @pytest.mark.parametrize("value", ["abc", "", "12abc", "NaN", "Infinity", float("inf"), True, None, [1]])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(ValueError):
            to_int(value)

    def test_digit_ceiling(self):
        assert to_int("9" * MAX_INT_DIGITS) == int("9" * MAX_INT_DIGITS)
        assert to_int(f"1e{MAX_INT_DIGITS - 1}") == 10 ** (MAX_INT_DIGITS - 1)

    @pytest.mark.parametrize("value", [f"1e{MAX_INT_DIGITS}", "1e2000000", "-4.2E999999999", Decimal("1e5000")])
    def test_rejects_values_past_digit_ceiling(self, value):
        with pytest.raises(ValueError, match="digits"):
            to_int(value)


class TestToTimestamp:
    def test_parses_fixed_format(self):
        assert to_timestamp("2023-05-01 10:00:00") == datetime(2023, 5, 1, 10, 0, 0)

    def test_datetime_unchanged(self):
        ts = datetime(2024, 2, 29, 23, 59, 59)
        assert to_timestamp(ts) is ts

    def test_date_becomes_midnight(self):
        assert to_timestamp(date(2024, 1, 2)) == datetime(2024, 1, 2)

    def test_struct_time(self):
        st = time.strptime("2023-05-01 10:00:00", TIMESTAMP_FORMAT)
        assert to_timestamp(st) == datetime(2023, 5, 1, 10)

    @pytest.mark.parametrize("value", ["2023-05-01", "2023-05-01T10:00:00", "yesterday", 1682935200, None])
    def test_rejects_other_shapes(self, value):
        with pytest.raises(ValueError):
            to_timestamp(value)


class TestCoerceValue:
    def test_huge_exponent_is_type_mismatch(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce("1e2000000", TargetType.INT)
        assert exc_info.value.actual_type == "str"

    def test_string_uses_str(self):
        assert _coerce(12, TargetType.STRING) == "12"
        assert _coerce("Ann", TargetType.STRING) == "Ann"
        assert _coerce(Decimal("1.50"), TargetType.STRING) == "1.50"

    def test_string_never_fails(self):
        class Opaque:
            def __str__(self):
                return "opaque"

        assert _coerce(Opaque(), TargetType.STRING) == "opaque"

    def test_int(self):
        assert _coerce("42", TargetType.INT) == 42

    def test_timestamp(self):
        assert _coerce("2023-05-01 10:00:00", TargetType.TIMESTAMP) == datetime(2023, 5, 1, 10)

    def test_int_mismatch_names_everything(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce("not-a-number", TargetType.INT)
        err = exc_info.value
        assert err.code == "TYPE_MISMATCH"
        assert err.actual_type == "str"
        assert err.target_field == "field"
        assert err.entity_type == "tests.Entity"
        assert err.source_key == "column"
        for part in ("str", "field", "tests.Entity", "column"):
            assert part in str(err)

    def test_timestamp_mismatch(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            _coerce(3.5, TargetType.TIMESTAMP)
        assert exc_info.value.actual_type == "float"

    def test_mismatch_is_hydration_error(self):
        with pytest.raises(HydrationError):
            _coerce([], TargetType.INT)


class TestDescribeType:
    def test_builtin(self):
        assert describe_type(1) == "int"
        assert describe_type(None) == "NoneType"

    def test_qualified_for_non_builtins(self):
        assert describe_type(Decimal("1")) == "decimal.Decimal"
        assert describe_type(datetime(2020, 1, 1)) == "datetime.datetime"

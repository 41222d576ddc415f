import numpy as np
import pytest

from chartbind.events.coercion import (
    LONG_MAX,
    LONG_MIN,
    NativeValue,
    TypeMismatchError,
    ValueKind,
    as_boolean,
    as_double,
    as_long,
    as_string,
    has_value,
)


@pytest.mark.parametrize(
    "raw, kind",
    [
        (1, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        (np.float32(1.5), ValueKind.NUMBER),
        ("Q1", ValueKind.STRING),
        (True, ValueKind.BOOLEAN),
        (np.bool_(False), ValueKind.BOOLEAN),
        (None, ValueKind.NULL),
        ({"x": 1}, ValueKind.OBJECT),
    ],
)
def test_native_value_tagging(raw, kind):
    assert NativeValue.of(raw).kind is kind


def test_native_value_of_is_idempotent():
    v = NativeValue.of(3)
    assert NativeValue.of(v) is v


def test_as_double_accepts_numbers_only():
    assert as_double(12) == 12.0
    assert isinstance(as_double(12), float)
    assert as_double(np.int64(4)) == 4.0
    for bad in ("12", True, None):
        with pytest.raises(TypeMismatchError):
            as_double(bad)


def test_as_long_truncates_toward_zero():
    assert as_long(3.7) == 3
    assert as_long(-3.7) == -3
    assert as_long(3.2) == 3
    assert as_long(-0.9) == 0
    assert as_long(1_700_000_000_000.0) == 1_700_000_000_000


def test_as_long_non_finite_values_follow_64_bit_conversion():
    assert as_long(float("nan")) == 0
    assert as_long(float("inf")) == LONG_MAX == 2**63 - 1
    assert as_long(float("-inf")) == LONG_MIN == -(2**63)
    assert as_long(1e300) == LONG_MAX
    assert as_long(-1e300) == LONG_MIN
    assert as_double(float("nan")) != as_double(float("nan"))


def test_as_long_is_derived_from_double():
    with pytest.raises(TypeMismatchError) as info:
        as_long("3")
    assert info.value.expected is ValueKind.NUMBER


def test_as_string_never_stringifies():
    assert as_string("42") == "42"
    with pytest.raises(TypeMismatchError):
        as_string(42)
    with pytest.raises(TypeMismatchError):
        as_string(False)
    with pytest.raises(TypeMismatchError):
        as_string(None)


def test_as_boolean_strict():
    assert as_boolean(True) is True
    with pytest.raises(TypeMismatchError):
        as_boolean(1)
    with pytest.raises(TypeMismatchError):
        as_boolean("true")


def test_has_value():
    assert has_value(0)
    assert has_value("")
    assert has_value(False)
    assert not has_value(None)


def test_type_mismatch_is_type_error_with_details():
    with pytest.raises(TypeError) as info:
        as_double("abc", name="x")
    err = info.value
    assert isinstance(err, TypeMismatchError)
    assert err.actual.kind is ValueKind.STRING
    assert "'x'" in str(err)
    assert "number" in str(err)

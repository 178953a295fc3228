import re

import pytest

from swifttools.awk_value import DivisionByZeroError, Value, ValueKind


def test_string_conversion():
    val = Value.string("hello")
    assert val.to_str() == "hello"
    assert val.to_number() == 0.0
    assert val.to_bool()

    assert Value.string("123").to_number() == 123.0
    assert Value.string("123.45").to_number() == 123.45
    assert Value.string("123abc").to_number() == 123.0
    assert not Value.string("").to_bool()


def test_number_conversion():
    val = Value.number(42.0)
    assert val.to_str() == "42"
    assert val.to_number() == 42.0
    assert val.to_bool()
    assert Value.number(42.5).to_str() == "42.5"
    assert not Value.number(0.0).to_bool()


def test_arithmetic():
    a = Value.number(10.0)
    b = Value.number(3.0)
    assert a.add(b) == Value.number(13.0)
    assert a.subtract(b) == Value.number(7.0)
    assert a.multiply(b) == Value.number(30.0)
    assert a.divide(b).to_number() == 10.0 / 3.0
    assert a.modulo(b) == Value.number(1.0)


def test_comparison():
    assert Value.number(10.0).compare(Value.number(20.0)) == -1
    assert Value.string("10").compare(Value.string("20")) == -1
    assert Value.string("abc").compare(Value.string("def")) == -1


def test_array_operations():
    arr = Value.array()
    arr.set_array_element("key1", Value.string("value1"))
    assert arr.has_array_key("key1")
    assert arr.get_array_element("key1") == Value.string("value1")
    assert arr.array_len() == 1
    assert "key1" in arr.array_keys()


def test_mixed_comparison_uses_strings():
    assert Value.string("b").compare(Value.number(1)) == 1
    assert Value.undefined().compare(Value.string("")) == 0


def test_leading_numeric_prefix_rules():
    assert Value.string("  12  ").to_number() == 12.0
    assert Value.string("1e3x").to_number() == 1000.0
    assert Value.string("-").to_number() == 0.0
    assert Value.string("1e").to_number() == 0.0
    assert Value.string("-2.5kg").to_number() == -2.5


def test_large_integral_number_has_no_exponent():
    assert Value.number(1e20).to_str() == "100000000000000000000"
    assert Value.number(-7.0).to_str() == "-7"


def test_division_by_zero_raises():
    with pytest.raises(DivisionByZeroError):
        Value.number(1).divide(Value.string("0"))
    with pytest.raises(ZeroDivisionError):
        Value.number(1).modulo(Value.undefined())


def test_modulo_keeps_dividend_sign():
    assert Value.number(-7).modulo(Value.number(3)).to_number() == -1.0


def test_power_and_concatenate():
    assert Value.number(2).power(Value.number(10)).to_number() == 1024.0
    assert Value.number(4).concatenate(Value.string("x")) == Value.string("4x")


def test_get_array_element_converts_scalar():
    val = Value.number(5)
    element = val.get_array_element("k")
    assert element.is_undefined()
    assert val.is_array()
    element.kind = ValueKind.STRING
    element.data = "set"
    assert val.get_array_element("k").to_str() == "set"


def test_set_array_element_on_scalar_replaces_it():
    val = Value.string("x")
    val.set_array_element("a", Value.number(1))
    assert val.array_keys() == ["a"]
    assert val.to_number() == 1.0
    assert val.to_str() == "[array]"


def test_string_helpers():
    assert Value.string("hello world").regex_match(re.compile(r"wor"))
    assert not Value.string("hello").regex_match(r"^x")
    assert Value.string("hello").contains(Value.string("ell"))
    assert Value.string("héllo").string_len() == 6
    assert Value.number(3).type_name() == "number"
    assert Value.undefined().to_str() == ""
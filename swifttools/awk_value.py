"""Dynamically typed AWK values and their conversion and arithmetic rules."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_MANTISSA = re.compile(r"[+-]?[0-9]*(?:\.[0-9]*)?")
_EXPONENT = re.compile(r"[eE][+-]?[0-9]*")
_HEX_DIGITS = re.compile(r"[+-]?[0-9a-fA-F]+")


class DivisionByZeroError(ZeroDivisionError):
    """Raised when an AWK division or modulo has a zero divisor."""

    def __init__(self) -> None:
        super().__init__("Division by zero")


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    ARRAY = "array"
    UNDEFINED = "undefined"


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _format_number(n: float) -> str:
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "inf" if n > 0 else "-inf"
    if n.is_integer() and _I64_MIN <= n <= 2**63:
        return str(min(int(n), _I64_MAX))
    return format(Decimal(repr(n)), "f")


def _leading_number(text: str) -> float:
    trimmed = text.strip()
    if not trimmed:
        return 0.0
    end = _MANTISSA.match(trimmed).end()
    if end > 0:
        exponent = _EXPONENT.match(trimmed, end)
        if exponent:
            end = exponent.end()
    prefix = trimmed[:end]
    if prefix in ("", "+", "-"):
        return 0.0
    try:
        return float(prefix)
    except ValueError:
        return 0.0


def _looks_like_float(text: str) -> bool:
    if "_" in text:
        return False
    try:
        float(text)
    except ValueError:
        return False
    return True


def _looks_like_hex(text: str) -> bool:
    if not text.startswith(("0x", "0X")):
        return False
    digits = text[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        return False
    return _I64_MIN <= int(digits, 16) <= _I64_MAX


@dataclass
class Value:
    """An AWK value: a string, a number, an associative array or undefined."""

    kind: ValueKind = ValueKind.UNDEFINED
    data: Union[str, float, dict, None] = None

    @classmethod
    def string(cls, s) -> "Value":
        return cls(ValueKind.STRING, str(s))

    @classmethod
    def number(cls, n) -> "Value":
        return cls(ValueKind.NUMBER, float(n))

    @classmethod
    def array(cls) -> "Value":
        return cls(ValueKind.ARRAY, {})

    @classmethod
    def undefined(cls) -> "Value":
        return cls(ValueKind.UNDEFINED, None)

    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    def is_undefined(self) -> bool:
        return self.kind is ValueKind.UNDEFINED

    def to_str(self) -> str:
        """Convert following AWK string conversion rules."""
        if self.kind is ValueKind.STRING:
            return self.data
        if self.kind is ValueKind.NUMBER:
            return _format_number(self.data)
        if self.kind is ValueKind.ARRAY:
            return "[array]"
        return ""

    def __str__(self) -> str:
        return self.to_str()

    def to_number(self) -> float:
        """Convert following AWK numeric conversion rules (leading numeric prefix)."""
        if self.kind is ValueKind.NUMBER:
            return self.data
        if self.kind is ValueKind.STRING:
            return _leading_number(self.data)
        if self.kind is ValueKind.ARRAY:
            return float(len(self.data))
        return 0.0

    def to_bool(self) -> bool:
        if self.kind is ValueKind.STRING:
            return self.data != ""
        if self.kind is ValueKind.NUMBER:
            return self.data != 0.0
        if self.kind is ValueKind.ARRAY:
            return bool(self.data)
        return False

    def _ensure_array(self) -> dict:
        if self.kind is not ValueKind.ARRAY:
            self.kind = ValueKind.ARRAY
            self.data = {}
        return self.data

    def get_array_element(self, key: str) -> "Value":
        """Return the element for key, creating the array and element as needed."""
        return self._ensure_array().setdefault(key, Value.undefined())

    def set_array_element(self, key: str, value: "Value") -> None:
        self._ensure_array()[key] = value

    def has_array_key(self, key: str) -> bool:
        return self.kind is ValueKind.ARRAY and key in self.data

    def array_keys(self) -> list[str]:
        return list(self.data) if self.kind is ValueKind.ARRAY else []

    def array_len(self) -> int:
        return len(self.data) if self.kind is ValueKind.ARRAY else 0

    def compare_string(self, other: "Value") -> int:
        return _cmp(self.to_str(), other.to_str())

    def compare_numeric(self, other: "Value") -> int:
        a, b = self.to_number(), other.to_number()
        if math.isnan(a) or math.isnan(b):
            return 0
        return _cmp(a, b)

    def compare(self, other: "Value") -> int:
        """Compare by AWK rules; returns -1, 0 or 1."""
        if self.is_number() and other.is_number():
            return self.compare_numeric(other)
        if self._looks_like_number() and other._looks_like_number():
            return self.compare_numeric(other)
        if self.is_string() and other.is_string():
            return _cmp(self.data, other.data)
        return self.compare_string(other)

    def _looks_like_number(self) -> bool:
        if self.kind is ValueKind.NUMBER:
            return True
        if self.kind is ValueKind.STRING:
            trimmed = self.data.strip()
            return bool(trimmed) and (
                _looks_like_float(trimmed) or _looks_like_hex(trimmed)
            )
        return False

    def add(self, other: "Value") -> "Value":
        return Value.number(self.to_number() + other.to_number())

    def subtract(self, other: "Value") -> "Value":
        return Value.number(self.to_number() - other.to_number())

    def multiply(self, other: "Value") -> "Value":
        return Value.number(self.to_number() * other.to_number())

    def divide(self, other: "Value") -> "Value":
        divisor = other.to_number()
        if divisor == 0.0:
            raise DivisionByZeroError()
        return Value.number(self.to_number() / divisor)

    def modulo(self, other: "Value") -> "Value":
        divisor = other.to_number()
        if divisor == 0.0:
            raise DivisionByZeroError()
        return Value.number(math.fmod(self.to_number(), divisor))

    def power(self, other: "Value") -> "Value":
        base, exponent = self.to_number(), other.to_number()
        try:
            result = math.pow(base, exponent)
        except OverflowError:
            odd = exponent.is_integer() and int(exponent) % 2 == 1
            result = -math.inf if base < 0 and odd else math.inf
        except ValueError:
            result = math.nan
        return Value.number(result)

    def concatenate(self, other: "Value") -> "Value":
        return Value.string(self.to_str() + other.to_str())

    def regex_match(self, pattern) -> bool:
        """True if the pattern (compiled or text) matches anywhere in the string form."""
        return re.search(pattern, self.to_str()) is not None

    def contains(self, substring: "Value") -> bool:
        return substring.to_str() in self.to_str()

    def string_len(self) -> int:
        """Length of the string form in UTF-8 bytes."""
        return len(self.to_str().encode("utf-8"))

    def type_name(self) -> str:
        return self.kind.value
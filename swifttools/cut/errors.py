"""Errors raised by the field extraction tool."""

from __future__ import annotations

from pathlib import Path


def _debug_str(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


class FastCutError(Exception):
    """Base class for field extraction errors."""


class InputFileNotFoundError(FastCutError):
    def __init__(self, path) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class InputPermissionError(FastCutError):
    def __init__(self, path) -> None:
        self.path = Path(path)
        super().__init__(f"Permission denied accessing file: {self.path}")


class InvalidFieldSelectorError(FastCutError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid field selector: {message}")


class FieldNotFoundError(FastCutError):
    def __init__(self, field: str, available) -> None:
        self.field = field
        self.available = list(available)
        listing = ", ".join(_debug_str(name) for name in self.available)
        super().__init__(f"Field not found: {field} (available: [{listing}])")


class InvalidFieldIndexError(FastCutError):
    def __init__(self, index: int, field_count: int) -> None:
        self.index = index
        self.field_count = field_count
        super().__init__(
            f"Invalid field index: {index} (line has {field_count} fields)"
        )


class NoHeaderFoundError(FastCutError):
    def __init__(self) -> None:
        super().__init__("No header found but field names specified")


class EmptyInputError(FastCutError):
    def __init__(self) -> None:
        super().__init__("Empty input data")


class InvalidConfigError(FastCutError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid configuration: {message}")


class BufferOverflowError(FastCutError):
    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Buffer overflow: line too long ({length} bytes)")


class EncodingError(FastCutError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Encoding error: {message}")


class CsvParseError(FastCutError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"CSV parsing error: {message}")
"""Splitting input lines into fields and selecting the requested ones."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import Optional

from swifttools.cut.cli import FieldSelector
from swifttools.cut.errors import (
    CsvParseError,
    FieldNotFoundError,
    InvalidFieldIndexError,
    NoHeaderFoundError,
)


@dataclass
class ParsedLine:
    """The fields selected from one input line."""

    line_number: int
    fields: list[str] = field(default_factory=list)
    raw_line: str = ""


def _split_on(line: str, delimiter: str) -> list[str]:
    if delimiter == "":
        return ["", *line, ""]
    return line.split(delimiter)


def _whitespace_gaps(line: str) -> int:
    return max(len(line.split()) - 1, 0)


class FieldParser:
    """Splits lines according to the configured delimiter mode and picks fields."""

    def __init__(
        self,
        delimiter: Optional[str],
        csv_mode: bool,
        space_mode: bool,
        field_selector: FieldSelector,
    ) -> None:
        self.delimiter = delimiter
        self.csv_mode = csv_mode
        self.space_mode = space_mode
        self.field_selector = field_selector
        self._header_map: Optional[dict[str, int]] = None

    def set_header(self, header_line: str) -> None:
        """Record the column names found in the header line."""
        header_map: dict[str, int] = {}
        for index, name in enumerate(self.split_fields(header_line)):
            header_map[name.strip()] = index
        self._header_map = header_map

    def parse_line(self, line: str, line_number: int) -> ParsedLine:
        selected = self.select_fields(self.split_fields(line))
        return ParsedLine(line_number=line_number, fields=selected, raw_line=line)

    def split_fields(self, line: str) -> list[str]:
        """Split a line into all of its fields."""
        if not line.strip():
            return []
        if self.csv_mode:
            return self._split_csv(line)
        if self.space_mode:
            return line.split()
        if self.delimiter is not None:
            return _split_on(line, self.delimiter)
        return self._auto_detect_and_split(line)

    @staticmethod
    def _split_csv(line: str) -> list[str]:
        try:
            return next(csv.reader([line]), [])
        except csv.Error as exc:
            raise CsvParseError(str(exc)) from exc

    @staticmethod
    def _auto_detect_and_split(line: str) -> list[str]:
        comma_count = line.count(",")
        tab_count = line.count("\t")
        space_count = _whitespace_gaps(line)

        if comma_count > 0 and comma_count >= tab_count and comma_count >= space_count:
            return line.split(",")
        if tab_count > 0 and tab_count >= space_count:
            return line.split("\t")
        if space_count > 0:
            return line.split()
        return [line]

    def select_fields(self, all_fields: list[str]) -> list[str]:
        """Pick the selected fields: indices first, then ranges, then names."""
        count = len(all_fields)
        selected: list[str] = []

        for index in self.field_selector.indices:
            if index >= count:
                raise InvalidFieldIndexError(index + 1, count)
            selected.append(all_fields[index])

        for start, end in self.field_selector.ranges:
            if start >= count:
                raise InvalidFieldIndexError(start + 1, count)
            selected.extend(all_fields[start:min(end, count - 1) + 1])

        if self.field_selector.names:
            if self._header_map is None:
                raise NoHeaderFoundError()
            for name in self.field_selector.names:
                if name not in self._header_map:
                    raise FieldNotFoundError(name, list(self._header_map))
                index = self._header_map[name]
                if index >= count:
                    raise InvalidFieldIndexError(index + 1, count)
                selected.append(all_fields[index])

        return selected

    def header_fields(self) -> Optional[list[str]]:
        """Header names in column order, or None when no header was set."""
        if self._header_map is None:
            return None
        ordered = sorted(self._header_map.items(), key=lambda item: item[1])
        return [name for name, _ in ordered]


def detect_delimiter(line: str) -> Optional[str]:
    """Return the most frequent of ',', tab, ';' and '|', or None if none occur."""
    counts = {delim: line.count(delim) for delim in (",", "\t", ";", "|")}
    best = max(counts.values())
    if best == 0:
        return None
    return next(delim for delim, count in counts.items() if count == best)
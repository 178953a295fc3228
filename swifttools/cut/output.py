"""Formatting extracted fields as text, CSV or JSON lines."""

from __future__ import annotations

import csv
import io
import json
from typing import Optional, Sequence

from swifttools.cut.cli import OutputFormat
from swifttools.cut.errors import CsvParseError
from swifttools.cut.field_parser import ParsedLine

_BOLD = "1"
_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_CYAN = "36"
_BRIGHT_WHITE = "97"


def _paint(text: str, *codes: str) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _to_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class OutputFormatter:
    """Renders headers, parsed lines and diagnostics in the chosen format."""

    def __init__(
        self,
        format: OutputFormat,
        use_colors: bool,
        output_delimiter: Optional[str],
        line_numbers: bool,
    ) -> None:
        if output_delimiter is None:
            output_delimiter = "\t" if format is OutputFormat.TEXT else ","
        self.format = format
        self.use_colors = use_colors
        self.output_delimiter = output_delimiter
        self.line_numbers = line_numbers
        self.header_names: Optional[list[str]] = None

    def set_header_names(self, names: Sequence[str]) -> None:
        self.header_names = list(names)

    def _csv_record(self, record: Sequence[str]) -> str:
        buffer = io.StringIO()
        delimiter = self.output_delimiter[0] if self.output_delimiter else ","
        try:
            csv.writer(buffer, delimiter=delimiter, lineterminator="\n").writerow(record)
        except (csv.Error, TypeError) as exc:
            raise CsvParseError(str(exc)) from exc
        return buffer.getvalue().rstrip()

    def format_header(self, header_fields: Sequence[str]) -> str:
        if self.format is OutputFormat.TEXT:
            prefix = f"line{self.output_delimiter}" if self.line_numbers else ""
            header_line = self.output_delimiter.join(header_fields)
            if self.use_colors:
                header_line = _paint(header_line, _BOLD, _CYAN)
            return prefix + header_line
        if self.format is OutputFormat.CSV:
            record = (["line"] if self.line_numbers else []) + list(header_fields)
            return self._csv_record(record)
        line_numbers = "true" if self.line_numbers else "false"
        return (
            f'{{"_metadata":{{"fields":{_to_json(list(header_fields))},'
            f'"line_numbers":{line_numbers}}}}}'
        )

    def format_line(self, parsed_line: ParsedLine) -> str:
        if self.format is OutputFormat.TEXT:
            return self._format_text_line(parsed_line)
        if self.format is OutputFormat.CSV:
            return self._format_csv_line(parsed_line)
        return self._format_json_line(parsed_line)

    def _format_text_line(self, parsed_line: ParsedLine) -> str:
        output = ""
        if self.line_numbers:
            number = str(parsed_line.line_number)
            if self.use_colors:
                number = _paint(number, _GREEN)
            output = number + self.output_delimiter

        fields = parsed_line.fields
        if self.use_colors and len(fields) > 1:
            fields = [
                value if position % 2 == 0 else _paint(value, _BRIGHT_WHITE)
                for position, value in enumerate(fields)
            ]
        return output + self.output_delimiter.join(fields)

    def _format_csv_line(self, parsed_line: ParsedLine) -> str:
        record = [str(parsed_line.line_number)] if self.line_numbers else []
        record.extend(parsed_line.fields)
        return self._csv_record(record)

    def _format_json_line(self, parsed_line: ParsedLine) -> str:
        obj: dict = {}
        if self.line_numbers:
            obj["line_number"] = parsed_line.line_number
        if self.header_names is not None:
            named: dict[str, str] = {}
            for position, value in enumerate(parsed_line.fields):
                if position < len(self.header_names):
                    name = self.header_names[position]
                else:
                    name = f"field_{position + 1}"
                named[name] = value
            obj["fields"] = named
        else:
            obj["fields"] = list(parsed_line.fields)
        return _to_json(obj)

    def format_error(self, error: str, line_number: Optional[int] = None) -> str:
        if line_number is not None:
            message = f"Error at line {line_number}: {error}"
        else:
            message = f"Error: {error}"
        return _paint(message, _BOLD, _RED) if self.use_colors else message

    def format_info(self, message: str) -> str:
        return _paint(message, _BLUE) if self.use_colors else message

    def format_warning(self, message: str) -> str:
        return _paint(message, _YELLOW) if self.use_colors else f"Warning: {message}"
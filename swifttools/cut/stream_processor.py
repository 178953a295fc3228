"""Streaming, line-by-line field extraction over files and standard input."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, TextIO, Union

from swifttools.cut.cli import Args
from swifttools.cut.errors import EncodingError, FastCutError, InputFileNotFoundError
from swifttools.cut.field_parser import FieldParser
from swifttools.cut.output import OutputFormatter

CHUNK_SIZE = 64 * 1024


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(str(exc)) from exc


def _strip_newline(line: str) -> str:
    """Drop a trailing LF or CRLF, as line readers do."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _split_lines(text: str) -> list[str]:
    """Split text into lines; a final line ending is optional."""
    parts = text.split("\n")
    tail = parts.pop()
    lines = [part[:-1] if part.endswith("\r") else part for part in parts]
    if tail:
        lines.append(tail)
    return lines


class StreamProcessor:
    """Reads input line by line, extracts the selected fields and writes them out."""

    def __init__(self, args: Args, out: Optional[TextIO] = None) -> None:
        selector = args.parse_field_selector()
        self.args = args
        self.out = out if out is not None else sys.stdout
        self.field_parser = FieldParser(
            args.input_delimiter(),
            args.csv_mode,
            args.space_delimiter,
            selector,
        )
        self.output_formatter = OutputFormatter(
            args.format,
            args.should_use_colors(),
            args.effective_output_delimiter(),
            args.line_numbers,
        )
        self.buffer_size = args.buffer_size_bytes()
        self.verbose = args.verbose

    def _emit(self, text: str) -> None:
        self.out.write(text + "\n")

    @staticmethod
    def _note(message: str) -> None:
        print(message, file=sys.stderr)

    def process_files(self, files: Iterable[Union[str, Path]]) -> int:
        """Process the given files, or standard input when there are none.

        Returns the number of lines written.
        """
        paths = [Path(f) for f in files]
        if not paths:
            return self._process_stdin()
        if len(paths) == 1:
            return self.process_single_file(paths[0])
        return self._process_multiple_files(paths)

    def _process_stdin(self) -> int:
        if self.verbose:
            self._note("Reading from stdin...")
        reader = getattr(sys.stdin, "buffer", sys.stdin)
        return self.process_reader(reader, "stdin")

    def process_single_file(self, file_path: Union[str, Path]) -> int:
        path = Path(file_path)
        if self.verbose:
            self._note(f"Processing file: {path}")
        buffering = self.buffer_size if self.buffer_size > 1 else -1
        try:
            handle = open(path, "rb", buffering=buffering)
        except OSError as exc:
            raise InputFileNotFoundError(path) from exc
        with handle:
            return self.process_reader(handle, str(path))

    def _process_multiple_files(self, paths: list[Path]) -> int:
        total = 0
        for done, path in enumerate(paths, start=1):
            processor = StreamProcessor(self.args, self.out)
            total += processor.process_single_file(path)
            if self.verbose:
                self._note(f"Processed {done}/{len(paths)} files")
        return total

    def process_reader(
        self,
        reader: Iterable[Union[str, bytes]],
        source_name: str = "input",
    ) -> int:
        """Process every line of reader; returns the number of lines written."""
        args = self.args
        line_number = 0
        processed = 0
        header_done = False

        for raw in reader:
            line = _strip_newline(_decode(raw) if isinstance(raw, bytes) else raw)
            line_number += 1

            if not args.should_process_line(line_number - 1):
                continue

            if args.has_header and not header_done:
                self.field_parser.set_header(line)
                header_done = True
                if not args.skip_header:
                    names = self.field_parser.header_fields()
                    if names is not None:
                        self.output_formatter.set_header_names(names)
                        self._emit(self.output_formatter.format_header(names))
                continue

            if args.non_empty_only and not line.strip():
                continue

            try:
                output = self.process_line(line, line_number)
            except FastCutError as exc:
                if self.verbose:
                    self._note(self.output_formatter.format_error(str(exc), line_number))
            else:
                if output is not None:
                    self._emit(output)
                    processed += 1

            if args.max_lines > 0 and processed >= args.max_lines:
                break

        if self.verbose:
            self._note(f"Processed {processed} lines from {source_name}")
        return processed

    def process_line(self, line: str, line_number: int) -> Optional[str]:
        """Format the selected fields of one line, or None if nothing is selected."""
        if not line.strip():
            return None
        parsed = self.field_parser.parse_line(line, line_number)
        if not parsed.fields:
            return None
        return self.output_formatter.format_line(parsed)

    def process_chunks(self, reader: BinaryIO) -> int:
        """Process a binary stream in fixed-size chunks; returns lines written."""
        chunk_number = 0
        written = 0
        while True:
            data = reader.read(CHUNK_SIZE)
            if not data:
                break
            chunk_number += 1
            if self.verbose and chunk_number % 100 == 0:
                self._note(f"Processing chunk {chunk_number}...")

            text = _decode(data)
            for offset, line in enumerate(_split_lines(text)):
                line_number = (chunk_number - 1) * CHUNK_SIZE + offset + 1
                if not self.args.should_process_line(line_number - 1):
                    continue
                try:
                    output = self.process_line(line, line_number)
                except FastCutError as exc:
                    if self.verbose:
                        self._note(
                            self.output_formatter.format_error(str(exc), line_number)
                        )
                    continue
                if output is not None:
                    self._emit(output)
                    written += 1
        return written
import io
import sys

import pytest

from swifttools.cut.cli import Args, ColorOption, OutputFormat
from swifttools.cut.errors import (
    EncodingError,
    InputFileNotFoundError,
    InvalidFieldSelectorError,
)
from swifttools.cut.stream_processor import StreamProcessor


def make_args(**overrides):
    values = dict(fields="1,3", delimiter=",", color=ColorOption.NEVER)
    values.update(overrides)
    return Args(**values)


def run_reader(text, **overrides):
    out = io.StringIO()
    processor = StreamProcessor(make_args(**overrides), out)
    count = processor.process_reader(io.StringIO(text), "test")
    return out.getvalue(), count


def test_stream_processor_creation():
    processor = StreamProcessor(make_args(), io.StringIO())
    assert processor.field_parser.field_selector.indices == [0, 2]
    assert processor.buffer_size == 64 * 1024


def test_creation_with_invalid_fields():
    with pytest.raises(InvalidFieldSelectorError):
        StreamProcessor(make_args(fields="0"), io.StringIO())


def test_process_reader():
    output, count = run_reader("field1,field2,field3\nvalue1,value2,value3\n")
    assert output == "field1,field3\nvalue1,value3\n"
    assert count == 2


def test_file_processing(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b,c\n1,2,3\nx,y,z\n")
    out = io.StringIO()
    processor = StreamProcessor(make_args(), out)
    assert processor.process_single_file(path) == 3
    assert out.getvalue() == "a,c\n1,3\nx,z\n"


def test_missing_file(tmp_path):
    processor = StreamProcessor(make_args(), io.StringIO())
    with pytest.raises(InputFileNotFoundError):
        processor.process_single_file(tmp_path / "absent.csv")


def test_header_is_printed():
    output, count = run_reader("name,age,city\nJohn,30,NYC\n", has_header=True)
    assert output == "name,age,city\nJohn,NYC\n"
    assert count == 1


def test_skipped_header_allows_named_fields():
    output, _ = run_reader(
        "name,age,city\nJohn,30,NYC\nJane,25,LA\n",
        fields="city,name",
        has_header=True,
        skip_header=True,
    )
    assert output == "NYC,John\nLA,Jane\n"


def test_skip_and_max_lines():
    output, count = run_reader(
        "a,b,c\nd,e,f\ng,h,i\nj,k,l\n", skip_lines=1, max_lines=2
    )
    assert output == "d,f\ng,i\n"
    assert count == 2


def test_line_numbers():
    output, _ = run_reader("a,b,c\nd,e,f\n", line_numbers=True)
    assert output == "1,a,c\n2,d,f\n"


def test_bad_lines_are_skipped():
    output, count = run_reader("a,b\nx,y,z\n")
    assert output == "x,z\n"
    assert count == 1


def test_blank_lines_produce_nothing():
    output, _ = run_reader("a,b,c\n\n   \nd,e,f\n")
    assert output == "a,c\nd,f\n"


def test_json_with_header():
    output, _ = run_reader(
        "name,age,city\nJohn,30,NYC\n", format=OutputFormat.JSON, has_header=True
    )
    assert output.splitlines() == [
        '{"_metadata":{"fields":["name","age","city"],"line_numbers":false}}',
        '{"fields":{"name":"John","age":"NYC"}}',
    ]


def test_bytes_reader_strips_crlf():
    out = io.StringIO()
    processor = StreamProcessor(make_args(), out)
    processor.process_reader(io.BytesIO(b"a,b,c\r\nd,e,f\r\n"), "bytes")
    assert out.getvalue() == "a,c\nd,f\n"


def test_invalid_utf8_raises():
    processor = StreamProcessor(make_args(), io.StringIO())
    with pytest.raises(EncodingError):
        processor.process_reader(io.BytesIO(b"a,\xff,c\n"), "bytes")


def test_multiple_files(tmp_path):
    first = tmp_path / "one.csv"
    second = tmp_path / "two.csv"
    first.write_text("a,b,c\n")
    second.write_text("d,e,f\ng,h,i\n")
    out = io.StringIO()
    processor = StreamProcessor(make_args(), out)
    assert processor.process_files([first, second]) == 3
    assert out.getvalue() == "a,c\nd,f\ng,i\n"


def test_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"1,2,3\n")))
    out = io.StringIO()
    processor = StreamProcessor(make_args(), out)
    assert processor.process_files([]) == 1
    assert out.getvalue() == "1,3\n"


def test_process_chunks():
    out = io.StringIO()
    processor = StreamProcessor(make_args(), out)
    assert processor.process_chunks(io.BytesIO(b"a,b,c\nd,e,f")) == 2
    assert out.getvalue() == "a,c\nd,f\n"


def test_process_chunks_invalid_utf8():
    processor = StreamProcessor(make_args(), io.StringIO())
    with pytest.raises(EncodingError):
        processor.process_chunks(io.BytesIO(b"\xff\xfe,b\n"))


def test_process_line():
    processor = StreamProcessor(make_args(), io.StringIO())
    assert processor.process_line("   ", 1) is None
    assert processor.process_line("a,b,c", 7) == "a,c"
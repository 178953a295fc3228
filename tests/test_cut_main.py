import pytest

from swifttools.cut.cli import Args, ColorOption
from swifttools.cut.errors import InvalidConfigError, InvalidFieldSelectorError
from swifttools.cut.main import main, validate_args


def test_main_functionality(tmp_path, capsys):
    path = tmp_path / "people.csv"
    path.write_text("name,age,city\nJohn,30,NYC\nJane,25,LA\n")
    code = main(["-f", "1,3", "-d", ",", "--header", "--color", "never", str(path)])
    assert code == 0
    assert capsys.readouterr().out == "name,age,city\nJohn,NYC\nJane,LA\n"


def test_field_selector_validation():
    selector = validate_args(Args(fields="1,3,5-7", color=ColorOption.NEVER))
    assert selector.indices == [0, 2]
    assert selector.ranges == [(4, 6)]


def test_invalid_field_selector():
    with pytest.raises(InvalidFieldSelectorError):
        validate_args(Args(fields="0,invalid"))


def test_conflicting_delimiters():
    with pytest.raises(InvalidConfigError, match="Multiple delimiter options"):
        validate_args(Args(fields="1", delimiter=",", tab_delimiter=True))


def test_blank_fields():
    with pytest.raises(InvalidConfigError, match="No fields specified"):
        validate_args(Args(fields="   "))


def test_main_reports_conflict(tmp_path, capsys):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n")
    code = main(["-f", "1", "-d", ",", "-t", "--color", "never", str(path)])
    assert code == 1
    assert "Multiple delimiter options" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    code = main(["-f", "1", "--color", "never", str(tmp_path / "absent.csv")])
    assert code == 1
    assert "File not found" in capsys.readouterr().err


def test_main_verbose_auto_detect(tmp_path, capsys):
    path = tmp_path / "data.txt"
    path.write_text("a,b,c\n")
    code = main(["-f", "2", "-v", "--color", "never", str(path)])
    captured = capsys.readouterr()
    assert code == 0
    assert "Auto-detecting delimiter" in captured.err
    assert captured.out == "b\n"
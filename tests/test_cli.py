import io
import json

import pytest

from densemat.cli import EXIT_BAD_INDEX, EXIT_INPUT_ERROR, EXIT_OK, EXIT_PARSE_ERROR, main


@pytest.fixture
def matrix_file(tmp_path):
    path = tmp_path / "matrix.txt"
    path.write_text("3 2\n1 2\n3 4\n5 6\n", encoding="utf-8")
    return path


def test_prints_matrix(matrix_file, capsys):
    assert main([str(matrix_file)]) == EXIT_OK
    assert capsys.readouterr().out == "[ 1 2 ]\n[ 3 4 ]\n[ 5 6 ]\n"


def test_applies_operations_in_command_line_order(matrix_file, capsys):
    code = main([str(matrix_file), "--add", "0", "2", "--swap", "0", "1", "--mult", "2", "0.5"])

    assert code == EXIT_OK
    assert capsys.readouterr().out == "[ 3 4 ]\n[ 6 8 ]\n[ 2.5 3 ]\n"


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("2 3\n1 2 3\n4 5 6\n"))

    assert main(["--mult", "0", "2.5"]) == EXIT_OK
    assert capsys.readouterr().out == "[ 2.5 5 7.5 ]\n[ 4 5 6 ]\n"


def test_rejects_out_of_range_rows_before_applying(matrix_file, capsys):
    code = main([str(matrix_file), "--swap", "0", "1", "--add", "0", "3"])
    captured = capsys.readouterr()

    assert code == EXIT_BAD_INDEX
    assert captured.out == ""
    assert "row 3" in captured.err


def test_reports_parse_errors(tmp_path, capsys):
    path = tmp_path / "short.txt"
    path.write_text("2 2\n1 2 3\n", encoding="utf-8")

    assert main([str(path)]) == EXIT_PARSE_ERROR
    assert "Expected 4 matrix elements; found 3" in capsys.readouterr().err


@pytest.mark.parametrize(
    "option",
    [
        ["--mult", "1.5", "2"],
        ["--mult", "3.0", "2"],
        ["--mult", "1e0", "2"],
        ["--mult", "1", "two"],
        ["--swap", "0", "x"],
        ["--add", "1.0", "0"],
    ],
)
def test_rejects_non_integer_rows_and_bad_scalars(matrix_file, option):
    with pytest.raises(SystemExit):
        main([str(matrix_file)] + option)


def test_empty_matrix_reports_missing_rows(tmp_path, capsys):
    path = tmp_path / "empty.txt"
    path.write_text("0 2\n", encoding="utf-8")

    assert main([str(path), "--swap", "0", "0"]) == EXIT_BAD_INDEX
    err = capsys.readouterr().err
    assert "matrix has no rows" in err
    assert "0..-1" not in err


def test_reports_missing_input_file(tmp_path, capsys):
    path = tmp_path / "absent.txt"

    assert main([str(path)]) == EXIT_INPUT_ERROR
    assert f"could not read {path}" in capsys.readouterr().err


def test_reports_input_that_is_not_utf8(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"1 1 \xff")

    assert main([str(path)]) == EXIT_INPUT_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "could not read" in captured.err


def test_reports_stdin_that_is_not_utf8(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"1 1 \xff"), encoding="utf-8"))

    assert main([]) == EXIT_INPUT_ERROR
    assert "could not read -" in capsys.readouterr().err


def test_writes_json_and_excel(matrix_file, tmp_path, capsys):
    json_path = tmp_path / "out.json"
    xlsx_path = tmp_path / "out.xlsx"

    code = main([str(matrix_file), "--swap", "0", "2", "--json", str(json_path),
                 "--excel", str(xlsx_path), "--verbose"])

    assert code == EXIT_OK
    assert json.loads(json_path.read_text(encoding="utf-8")) == {
        "rows": 3, "cols": 2, "data": [5.0, 6.0, 3.0, 4.0, 1.0, 2.0]
    }
    assert xlsx_path.stat().st_size > 0
    assert "Applied 1 row operation(s)" in capsys.readouterr().err

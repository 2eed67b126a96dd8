import io

import numpy as np
import pytest

from densemat import Matrix
from densemat.export import MatrixExcelExporter, to_frame


def test_to_frame_copies_values_with_labels():
    mat = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    df = to_frame(mat)

    assert df.shape == (2, 3)
    assert list(df.index) == ["row 0", "row 1"]
    assert list(df.columns) == ["col 0", "col 1", "col 2"]
    assert df.loc["row 1", "col 2"] == pytest.approx(6.0)
    assert df.dtypes.unique().tolist() == [np.dtype(np.float32)]

    mat.mult_row(1, 2.0)
    assert df.loc["row 1", "col 2"] == pytest.approx(6.0)


def test_excel_export_writes_workbook():
    exporter = MatrixExcelExporter()
    first = exporter.add_matrix(Matrix(2, 2, [1, 2, 3, 4]), "Input")
    second = exporter.add_matrix(Matrix(1, 2, [float("nan"), float("inf")]), "Input")
    output = exporter.close()

    assert isinstance(output, io.BytesIO)
    assert output.getvalue()[:2] == b"PK"
    assert first == "Input"
    assert second == "Input (2)"


def test_sheet_names_are_truncated(tmp_path):
    exporter = MatrixExcelExporter()
    name = exporter.add_matrix(Matrix(1, 1, [1]), "x" * 40)
    target = exporter.save(tmp_path / "out.xlsx")

    assert len(name) == 31
    assert target.exists()
    assert target.stat().st_size > 0

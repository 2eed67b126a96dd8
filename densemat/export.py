"""
Tabular export of matrices.
Builds pandas DataFrames and Excel workbooks with one worksheet per matrix.
"""
import io
from pathlib import Path
from typing import List, Union

import pandas as pd
import xlsxwriter

from .matrix import Matrix

# Excel limits sheet names to 31 characters
SHEET_NAME_LIMIT = 31
COL_WIDTH_CHARS = 12
NUMBER_FORMAT = "0.000000"


def to_frame(matrix: Matrix) -> pd.DataFrame:
    """Copy ``matrix`` into a DataFrame labelled ``row i`` / ``col j``."""

    values = matrix.data.reshape(matrix.rows, matrix.cols).copy()
    return pd.DataFrame(
        values,
        index=[f"row {i}" for i in range(matrix.rows)],
        columns=[f"col {j}" for j in range(matrix.cols)],
    )


class MatrixExcelExporter:
    def __init__(self):
        self.output = io.BytesIO()
        self.workbook = xlsxwriter.Workbook(self.output, {'in_memory': True, 'nan_inf_to_errors': True})
        self.sheet_names: List[str] = []

        self.fmt_header = self.workbook.add_format({
            'bold': True, 'bg_color': '#D9E1F2', 'border': 1,
            'align': 'center', 'valign': 'vcenter'
        })
        self.fmt_title = self.workbook.add_format({
            'bold': True, 'font_size': 12, 'bg_color': '#4472C4',
            'font_color': 'white', 'border': 1
        })
        self.fmt_num = self.workbook.add_format({'num_format': NUMBER_FORMAT, 'border': 1})

    def _unique_sheet_name(self, title: str) -> str:
        base = (title or "Matrix")[:SHEET_NAME_LIMIT]
        name = base
        suffix = 2
        while name.lower() in (existing.lower() for existing in self.sheet_names):
            tag = f" ({suffix})"
            name = base[:SHEET_NAME_LIMIT - len(tag)] + tag
            suffix += 1
        self.sheet_names.append(name)
        return name

    def add_matrix(self, matrix: Matrix, title: str = "Matrix") -> str:
        """Write ``matrix`` to a new worksheet and return the sheet name."""

        name = self._unique_sheet_name(title)
        ws = self.workbook.add_worksheet(name)
        df = to_frame(matrix)

        ws.write(0, 0, f"{title} ({matrix.rows}x{matrix.cols})", self.fmt_title)
        header_row = 2
        ws.write(header_row, 0, "", self.fmt_header)
        for col_num, label in enumerate(df.columns, start=1):
            ws.write(header_row, col_num, label, self.fmt_header)

        for row_num, (label, values) in enumerate(df.iterrows(), start=header_row + 1):
            ws.write(row_num, 0, label, self.fmt_header)
            for col_num, value in enumerate(values, start=1):
                # NaN/inf land as #NUM!/#DIV/0! cells
                ws.write(row_num, col_num, float(value), self.fmt_num)

        ws.set_column(0, max(matrix.cols, 1), COL_WIDTH_CHARS)
        ws.freeze_panes(header_row + 1, 1)
        return name

    def close(self) -> io.BytesIO:
        self.workbook.close()
        self.output.seek(0)
        return self.output

    def save(self, path: Union[str, Path]) -> Path:
        """Close the workbook and write it to ``path``."""

        target = Path(path)
        target.write_bytes(self.close().getvalue())
        return target


__all__ = ["MatrixExcelExporter", "to_frame"]

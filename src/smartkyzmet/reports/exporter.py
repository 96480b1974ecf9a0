"""Excel export for tabular reports (pandas + openpyxl)."""

from __future__ import annotations

import io

import pandas as pd
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .model import SpreadsheetReport

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_NAME = "Report"


def export_xlsx(report: SpreadsheetReport) -> bytes:
    """Render `report` as an .xlsx document.

    Layout: merged bold title in row 1, one merged row per subtitle, then the
    bold header row followed by the data rows.
    """

    n_cols = max(len(report.column_headers), 1)
    header_row = 2 + len(report.subtitles)  # 1-based row of the column headers

    df = pd.DataFrame([list(r) for r in report.rows], columns=list(report.column_headers))

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False, startrow=header_row - 1)
        ws = writer.sheets[SHEET_NAME]

        last_col = get_column_letter(n_cols)

        ws["A1"] = report.title
        ws["A1"].font = Font(bold=True, size=14)
        ws["A1"].alignment = Alignment(horizontal="center")
        if n_cols > 1:
            ws.merge_cells(f"A1:{last_col}1")

        for offset, text in enumerate(report.subtitles):
            row = 2 + offset
            ws.cell(row=row, column=1, value=text)
            if n_cols > 1:
                ws.merge_cells(f"A{row}:{last_col}{row}")

        for col in range(1, n_cols + 1):
            cell = ws.cell(row=header_row, column=col)
            cell.font = Font(bold=True)
            cell.alignment = Alignment(horizontal="center")

        # Merged title/subtitle rows are left out of the width calculation.
        for col in range(1, n_cols + 1):
            width = 0
            for (value,) in ws.iter_rows(
                min_row=header_row, min_col=col, max_col=col, values_only=True
            ):
                if value is not None:
                    width = max(width, len(str(value)))
            ws.column_dimensions[get_column_letter(col)].width = width + 2

    return buf.getvalue()

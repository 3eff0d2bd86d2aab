"""
Serialise report columns and rows into downloadable files.

Both renderers take the ``columns`` and ``rows`` of a ``ReportTable`` and
return the file content as bytes.
"""
import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
CSV_CONTENT_TYPE = 'text/csv'

SHEET_TITLE = 'Time records'


def render_xlsx(columns, rows):
    """Single-sheet workbook with a bold, centred header row."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE

    sheet.append([column.header for column in columns])
    for row in rows:
        sheet.append([row[column.id] for column in columns])

    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal='center', vertical='center')

    for data_row in sheet.iter_rows(min_row=2):
        for cell in data_row:
            cell.alignment = Alignment(vertical='center')

    for index, column in enumerate(columns, start=1):
        sheet.column_dimensions[sheet.cell(row=1, column=index).column_letter].width = column.width

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_csv(columns, rows):
    """UTF-8 CSV with a header row; values are quoted only when needed."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow([column.header for column in columns])
    for row in rows:
        writer.writerow([row[column.id] for column in columns])
    return buffer.getvalue().encode('utf-8')


RENDERERS = {
    'xlsx': (render_xlsx, XLSX_CONTENT_TYPE),
    'csv': (render_csv, CSV_CONTENT_TYPE),
}

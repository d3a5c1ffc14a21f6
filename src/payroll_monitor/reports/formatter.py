"""
Excel formatting utilities for payroll variance reports.
"""

import xlsxwriter
import pandas as pd


class ExcelFormatter:
    """Cell formats and styling helpers for report worksheets."""

    def __init__(self):
        self.formats = {}

    def add_formats(self, workbook: xlsxwriter.Workbook) -> None:
        """Add standard formats to workbook."""
        self.formats = {
            'header': workbook.add_format({
                'bold': True,
                'bg_color': '#4472c4',
                'font_color': 'white',
                'align': 'center',
                'valign': 'vcenter',
                'border': 1
            }),
            'high': workbook.add_format({
                'bg_color': '#ff9999',
                'border': 1
            }),
            'medium': workbook.add_format({
                'bg_color': '#ffcc99',
                'border': 1
            }),
            'normal': workbook.add_format({
                'border': 1
            }),
            'currency': workbook.add_format({
                'num_format': '#,##0.00',
                'border': 1
            }),
        }

    def write_headers(self, worksheet: xlsxwriter.worksheet.Worksheet, df: pd.DataFrame) -> None:
        """Rewrite the header row with the header format."""
        for col, name in enumerate(df.columns):
            worksheet.write(0, col, name, self.formats['header'])

    def apply_alert_formatting(self, worksheet: xlsxwriter.worksheet.Worksheet,
                               df: pd.DataFrame, start_row: int = 1) -> None:
        """Colour alert rows by severity; amounts get the currency format."""
        if len(df) == 0:
            return

        amount_columns = {df.columns.get_loc('Current'), df.columns.get_loc('Previous')}

        for i, (_, row) in enumerate(df.iterrows()):
            row_num = start_row + i
            format_style = self.formats.get(str(row['Severity']).lower(), self.formats['normal'])

            for col in range(len(df.columns)):
                cell_value = row.iloc[col]
                if pd.isna(cell_value):
                    worksheet.write_blank(row_num, col, None, format_style)
                elif col in amount_columns:
                    worksheet.write_number(row_num, col, float(cell_value), self.formats['currency'])
                else:
                    worksheet.write(row_num, col, cell_value, format_style)

    def adjust_column_widths(self, worksheet: xlsxwriter.worksheet.Worksheet,
                             df: pd.DataFrame) -> None:
        """Adjust column widths based on content."""
        for i, column in enumerate(df.columns):
            max_length = len(str(column))
            for value in df.iloc[:, i]:
                if pd.notna(value):
                    max_length = max(max_length, len(str(value)))

            worksheet.set_column(i, i, min(max_length + 2, 60))

#!/usr/bin/env python3
"""
Create sample monthly payroll extracts for trying out the monitor.
"""

from pathlib import Path

import numpy as np
from openpyxl import Workbook

HEADERS = ["Code", "Emp. Name", "Tot. Sal", "Add", "OT Amt", "Gross", "EPF", "SOCSO", "PCB", "NettWgs"]

MONTHS = [
    ("January", "2024", "payroll_310124.xlsx"),
    ("February", "2024", "payroll_290224.xlsx"),
    ("March", "2024", "payroll_310324.xlsx"),
]


def _employee_row(code: int, name: str, salary: float, addition: float, overtime: float) -> list:
    gross = salary + addition + overtime
    epf = round(salary * 0.11, 2)
    socso = round(min(gross, 5000) * 0.005, 2)
    pcb = round(max(gross - 3000, 0) * 0.08, 2)
    nett = round(gross - epf - socso - pcb, 2)
    return [f"E{code:03d}", name, salary, addition, overtime, gross, epf, socso, pcb, nett]


def create_sample_data(output_dir: Path = None, employees: int = 20, seed: int = 7) -> list:
    """Write one extract per month with a few deliberate changes between months."""
    rng = np.random.default_rng(seed)
    output_dir = output_dir or Path(__file__).parent.parent / "data" / "raw"
    output_dir.mkdir(parents=True, exist_ok=True)

    salaries = rng.integers(2500, 9000, size=employees).astype(float)
    written = []

    for month_index, (month, year, file_name) in enumerate(MONTHS):
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Payroll"
        sheet.cell(row=1, column=1, value="SAMPLE SDN BHD")
        sheet.cell(row=3, column=1, value=f"PAYROLL SUMMARY REPORT [{month} - {year}]")
        for col, header in enumerate(HEADERS, start=1):
            sheet.cell(row=7, column=col, value=header)

        # Headcount drops in the last month, one employee gets a raise,
        # another starts receiving overtime
        roster = employees if month_index < 2 else employees - 5
        for i in range(roster):
            salary = salaries[i] * (1.3 if i == 0 and month_index == 2 else 1.0)
            overtime = 850.0 if i == 1 and month_index >= 1 else 0.0
            addition = float(rng.choice([0, 150, 300]))
            row = _employee_row(i + 1, f"Employee {i + 1}", salary, addition, overtime)
            for col, value in enumerate(row, start=1):
                sheet.cell(row=9 + i, column=col, value=value)

        path = output_dir / file_name
        workbook.save(path)
        written.append(str(path))
        print(f"Sample extract created: {path}")

    return written


if __name__ == "__main__":
    create_sample_data()

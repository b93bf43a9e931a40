"""
Tests for Soil Analysis Excel Export.
"""
from datetime import datetime

import pytest
from openpyxl import load_workbook

from soil_advisory.services.soil_analysis_service import run_soil_analysis
from soil_advisory.services.soil_excel_service import SHEET_NAMES, generate_soil_analysis_excel


@pytest.fixture
def depleted_report(depleted_acidic_soil, low_micronutrients):
    return run_soil_analysis(depleted_acidic_soil, low_micronutrients)


def _load(report, **kwargs):
    return load_workbook(generate_soil_analysis_excel(report, **kwargs))


class TestSoilExcelExport:

    def test_sheets(self, depleted_report):
        wb = _load(depleted_report)
        assert wb.sheetnames == list(SHEET_NAMES)

    def test_summary(self, depleted_report):
        ws = _load(depleted_report, farm_name="North Field", generated_at=datetime(2024, 6, 1, 9, 30))["Summary"]

        assert ws["A1"].value == "SOIL ANALYSIS REPORT"
        assert ws["A2"].value == "Generated: 01/06/2024 09:30"
        assert ws["B5"].value == "North Field"
        assert ws["B6"].value == ("Yes" if depleted_report.validation.valid else "No")

    def test_deficiency_rows(self, depleted_report):
        ws = _load(depleted_report)["Deficiencies"]
        parameters = [ws.cell(row=r, column=1).value for r in range(2, ws.max_row + 1)]

        assert ws["A1"].value == "Parameter"
        assert parameters == [d.parameter for d in depleted_report.deficiency_analysis.deficiencies]
        assert ws["B2"].value == "severe"

    def test_remediation_sheet(self, depleted_report):
        ws = _load(depleted_report)["Remediation"]
        strategy = depleted_report.deficiency_analysis.integrated_strategy

        assert ws["A1"].value == "Action"
        assert ws["A2"].value == strategy.prioritized_actions[0].action

    def test_crops_sheet(self, balanced_soil):
        report = run_soil_analysis(balanced_soil)
        wb = load_workbook(generate_soil_analysis_excel(report))
        ws = wb["Crops"]

        assert ws["A2"].value == "Rice"
        assert ws["D2"].value == 100

    def test_report_without_deficiencies(self, balanced_soil):
        ws = _load(run_soil_analysis(balanced_soil))["Remediation"]
        assert ws["A1"].value == "Maintain current soil management practices"

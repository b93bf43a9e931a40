"""
Soil Analysis Excel Export Service.
Renders a SoilAnalysisReport into an Excel workbook held in memory.
"""
from io import BytesIO
from datetime import datetime
from typing import Any, List, Optional

from openpyxl import Workbook
from openpyxl.chart import BarChart, Reference
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from soil_advisory.services.soil_analysis_service import SoilAnalysisReport

SOIL_BROWN = "7C5A3A"
SOIL_GREEN = "2F855A"
HEADER_BG = "F3EBDD"

SEVERITY_FILLS = {
    "critical": "FECACA",
    "error": "FED7AA",
    "warning": "FEF08A",
    "severe": "FECACA",
    "moderate": "FED7AA",
    "mild": "FEF9C3",
}

SHEET_NAMES = ("Summary", "Validation", "Deficiencies", "Remediation", "Crops")


def _text(value: Any) -> Any:
    """Enum members as their values, lists joined for a single cell."""
    if isinstance(value, (list, tuple)):
        return "; ".join(str(_text(v)) for v in value)
    return getattr(value, "value", value)


class SoilAnalysisExcelService:
    """Service for generating soil analysis Excel reports."""

    def __init__(self):
        self.header_fill = PatternFill(start_color=SOIL_BROWN, end_color=SOIL_BROWN, fill_type="solid")
        self.header_font = Font(bold=True, color="FFFFFF", size=11)
        self.title_font = Font(bold=True, size=16, color=SOIL_BROWN)
        self.subtitle_font = Font(bold=True, size=12, color=SOIL_GREEN)
        self.light_fill = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
        self.border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    def _apply_header_style(self, ws, row_num: int, max_col: int):
        """Apply header styling to a row."""
        for col in range(1, max_col + 1):
            cell = ws.cell(row=row_num, column=col)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
            cell.border = self.border

    def _apply_border_to_range(self, ws, start_row: int, start_col: int, end_row: int, end_col: int):
        for row in range(start_row, end_row + 1):
            for col in range(start_col, end_col + 1):
                ws.cell(row=row, column=col).border = self.border

    def _auto_adjust_columns(self, ws):
        """Auto-adjust column widths."""
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)
            for cell in column:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[column_letter].width = min(max(max_length + 2, 12), 60)

    def _write_table(self, ws, start_row: int, headers: List[str], rows: List[List[Any]]) -> int:
        """Write a header row and data rows; returns the next free row."""
        for col, header in enumerate(headers, 1):
            ws.cell(row=start_row, column=col, value=header)
        self._apply_header_style(ws, start_row, len(headers))

        row = start_row + 1
        for values in rows:
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=_text(value))
            row += 1
        if rows:
            self._apply_border_to_range(ws, start_row + 1, 1, row - 1, len(headers))
        return row

    def _write_pairs(self, ws, row: int, pairs: List[tuple]) -> int:
        for label, value in pairs:
            ws.cell(row=row, column=1, value=label).font = Font(bold=True)
            ws.cell(row=row, column=1).fill = self.light_fill
            ws.cell(row=row, column=2, value=_text(value))
            ws.cell(row=row, column=1).border = self.border
            ws.cell(row=row, column=2).border = self.border
            row += 1
        return row

    def generate_soil_analysis_excel(
        self,
        report: SoilAnalysisReport,
        farm_name: Optional[str] = None,
        generated_at: Optional[datetime] = None
    ) -> BytesIO:
        """
        Generate Excel report for a soil analysis.

        Args:
            report: Result of run_soil_analysis
            farm_name: Optional farm name printed on the summary
            generated_at: Timestamp printed on the summary, defaults to now

        Returns:
            BytesIO with Excel file content
        """
        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_summary_sheet(wb, report, farm_name, generated_at or datetime.now())
        self._create_validation_sheet(wb, report)
        self._create_deficiencies_sheet(wb, report)
        self._create_remediation_sheet(wb, report)
        self._create_crops_sheet(wb, report)

        buffer = BytesIO()
        wb.save(buffer)
        buffer.seek(0)
        return buffer

    def _create_summary_sheet(self, wb, report: SoilAnalysisReport, farm_name: Optional[str],
                              generated_at: datetime) -> Any:
        ws = wb.create_sheet("Summary")
        row = 1

        ws.cell(row=row, column=1, value="SOIL ANALYSIS REPORT").font = self.title_font
        ws.merge_cells(f'A{row}:D{row}')
        row += 1
        ws.cell(row=row, column=1, value=f"Generated: {generated_at.strftime('%d/%m/%Y %H:%M')}").font = Font(italic=True)
        row += 2

        validation = report.validation
        health = report.health
        deficiency_analysis = report.deficiency_analysis
        crops = report.crop_analysis
        cost = deficiency_analysis.estimated_cost
        top_crop = crops.top_recommendations[0].crop_name if crops.top_recommendations else "None"

        ws.cell(row=row, column=1, value="OVERVIEW").font = self.subtitle_font
        row += 1
        row = self._write_pairs(ws, row, [
            ("Farm:", farm_name or "N/A"),
            ("Data valid:", "Yes" if validation.valid else "No"),
            ("Data confidence:", round(validation.confidence, 2)),
            ("Soil health:", f"{health.overall_health} ({health.health_score}/100)"),
            ("Deficiencies found:", len(deficiency_analysis.deficiencies)),
            (f"Estimated cost per ha ({cost.currency}):", f"{cost.min:,.0f} - {cost.max:,.0f}"),
            ("Best suited crop:", top_crop),
            ("Suitable crops:", crops.suitable_crops),
        ])
        row += 1

        ws.cell(row=row, column=1, value="PRIORITY ACTIONS").font = self.subtitle_font
        row += 1
        for action in deficiency_analysis.priority_actions:
            ws.cell(row=row, column=1, value=action)
            row += 1
        row += 1

        ws.cell(row=row, column=1, value="CONCERNS").font = self.subtitle_font
        row += 1
        for concern in health.primary_concerns or ["None"]:
            ws.cell(row=row, column=1, value=concern)
            row += 1

        self._auto_adjust_columns(ws)
        return ws

    def _create_validation_sheet(self, wb, report: SoilAnalysisReport) -> Any:
        ws = wb.create_sheet("Validation")
        validation = report.validation

        headers = ["Parameter", "Issue", "Severity", "Suggestion", "Confidence"]
        rows = [
            [i.parameter, i.issue, i.severity, i.suggestion, round(i.confidence, 2)]
            for i in validation.issues
        ]
        row = self._write_table(ws, 1, headers, rows)
        for offset, issue in enumerate(validation.issues):
            color = SEVERITY_FILLS.get(_text(issue.severity))
            if color:
                ws.cell(row=2 + offset, column=3).fill = PatternFill(
                    start_color=color, end_color=color, fill_type="solid"
                )

        row += 1
        ws.cell(row=row, column=1, value="ANOMALIES").font = self.subtitle_font
        row += 1
        row = self._write_table(
            ws, row,
            ["Parameter", "Issue", "Severity", "Description", "Recommended action"],
            [[a.parameter, a.issue, a.severity, a.description, a.recommended_action]
             for a in validation.anomalies],
        )

        if validation.statistical_analysis is not None:
            row += 1
            ws.cell(row=row, column=1, value="OUTLIERS").font = self.subtitle_font
            row += 1
            stats = validation.statistical_analysis
            row = self._write_table(
                ws, row,
                ["Parameter", "Value", "Expected min", "Expected max", "Deviation score"],
                [[o.parameter, o.value, o.expected_range[0], o.expected_range[1], round(o.deviation_score, 2)]
                 for o in stats.outliers],
            )
            row = self._write_pairs(ws, row + 1, [("Consistency score:", round(stats.consistency_score, 2))])

        row += 1
        ws.cell(row=row, column=1, value="RECOMMENDATIONS").font = self.subtitle_font
        row += 1
        for recommendation in validation.recommendations:
            ws.cell(row=row, column=1, value=recommendation)
            row += 1

        self._auto_adjust_columns(ws)
        return ws

    def _create_deficiencies_sheet(self, wb, report: SoilAnalysisReport) -> Any:
        ws = wb.create_sheet("Deficiencies")
        deficiencies = report.deficiency_analysis.deficiencies

        headers = ["Parameter", "Severity", "Current value", "Optimal min", "Optimal max",
                   "Deficit", "Impact on crops", "Symptoms", "Causes"]
        rows = [
            [d.parameter, d.deficiency_type, d.current_value, d.optimal_range.min, d.optimal_range.max,
             round(d.deficit_amount, 2), d.impact_on_crops, d.symptoms, d.causes]
            for d in deficiencies
        ]
        self._write_table(ws, 1, headers, rows)
        for offset, deficiency in enumerate(deficiencies):
            color = SEVERITY_FILLS.get(_text(deficiency.deficiency_type))
            if color:
                ws.cell(row=2 + offset, column=2).fill = PatternFill(
                    start_color=color, end_color=color, fill_type="solid"
                )

        self._auto_adjust_columns(ws)
        return ws

    def _create_remediation_sheet(self, wb, report: SoilAnalysisReport) -> Any:
        ws = wb.create_sheet("Remediation")
        analysis = report.deficiency_analysis
        strategy = analysis.integrated_strategy

        if strategy is None:
            ws.cell(row=1, column=1, value=analysis.priority_actions[0] if analysis.priority_actions else "")
            self._auto_adjust_columns(ws)
            return ws

        row = self._write_table(
            ws, 1,
            ["Action", "Dosage", "Frequency", "Effectiveness (%)", "Materials"],
            [[a.action, a.dosage, a.frequency, a.effectiveness, [m.name for m in a.materials]]
             for a in strategy.prioritized_actions],
        )

        row += 1
        ws.cell(row=row, column=1, value="COMBINED MATERIALS").font = self.subtitle_font
        row += 1
        row = self._write_table(
            ws, row,
            ["Material", "Type", "Quantity", "Unit", "Cost per unit (INR)", "Alternatives"],
            [[m.name, m.type, m.quantity, m.unit, m.cost_per_unit, m.alternatives]
             for m in strategy.combined_materials],
        )

        row += 1
        ws.cell(row=row, column=1, value="TIMELINE").font = self.subtitle_font
        row += 1
        row = self._write_table(
            ws, row,
            ["Phase", "Duration", "Actions", "Cost (INR)"],
            [[p.phase, p.duration, p.actions, round(p.cost, 2)] for p in strategy.timeline],
        )

        total = strategy.total_cost
        row = self._write_pairs(ws, row + 1, [
            ("Immediate cost (INR):", f"{total.immediate.min:,.0f} - {total.immediate.max:,.0f}"),
            ("Long-term cost (INR):", f"{total.long_term.min:,.0f} - {total.long_term.max:,.0f}"),
            ("Per hectare (INR):", f"{total.total_per_hectare.min:,.0f} - {total.total_per_hectare.max:,.0f}"),
            ("Payback:", total.payback_period),
            ("Benefit/cost ratio:", total.cost_benefit_ratio),
            ("Advisories:", strategy.advisory_source),
        ])

        row += 1
        for title, lines in (("SYNERGIES", strategy.synergies), ("WARNINGS", strategy.warnings)):
            ws.cell(row=row, column=1, value=title).font = self.subtitle_font
            row += 1
            for line in lines:
                ws.cell(row=row, column=1, value=line)
                row += 1
            row += 1

        self._auto_adjust_columns(ws)
        return ws

    def _create_crops_sheet(self, wb, report: SoilAnalysisReport) -> Any:
        ws = wb.create_sheet("Crops")
        recommendations = report.crop_analysis.top_recommendations

        headers = ["Crop", "Local name", "Season", "Suitability", "Confidence",
                   "Expected yield", "Net profit (INR/ha)", "ROI (%)", "Limiting factors"]
        rows = []
        for r in recommendations:
            y = r.projections.expected_yield
            net = r.projections.profitability.net_profit
            rows.append([
                r.crop_name, r.local_name, r.season, r.suitability_score, r.confidence,
                f"{y.min:,.0f} - {y.max:,.0f} {r.projections.yield_unit}",
                f"{net.min:,.0f} - {net.max:,.0f}",
                r.projections.profitability.roi,
                r.soil_compatibility.limiting_factors,
            ])
        row = self._write_table(ws, 1, headers, rows)

        if recommendations:
            chart = BarChart()
            chart.type = "bar"
            chart.style = 10
            chart.title = "Crop Suitability"
            chart.x_axis.title = "Crop"
            chart.y_axis.title = "Score"
            data = Reference(ws, min_col=4, min_row=1, max_row=row - 1)
            cats = Reference(ws, min_col=1, min_row=2, max_row=row - 1)
            chart.add_data(data, titles_from_data=True)
            chart.set_categories(cats)
            chart.width = 18
            chart.height = 10
            ws.add_chart(chart, "K2")

        limitations = report.crop_analysis.soil_limitations
        if limitations:
            row += 1
            ws.cell(row=row, column=1, value="SOIL LIMITATIONS").font = self.subtitle_font
            row += 1
            self._write_table(
                ws, row,
                ["Parameter", "Current value", "Optimal range", "Impact", "Suggestions"],
                [[l.parameter, l.current_value, f"{l.optimal_range.min:g}-{l.optimal_range.max:g}",
                  l.impact, l.improvement_suggestions] for l in limitations],
            )

        self._auto_adjust_columns(ws)
        return ws


soil_analysis_excel_service = SoilAnalysisExcelService()


def generate_soil_analysis_excel(
    report: SoilAnalysisReport,
    farm_name: Optional[str] = None,
    generated_at: Optional[datetime] = None
) -> BytesIO:
    return soil_analysis_excel_service.generate_soil_analysis_excel(report, farm_name, generated_at)

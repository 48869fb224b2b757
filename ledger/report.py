"""
PDF report built from a FleetSummary.

Layout: A4 portrait, 15 mm margins, a header and footer on every page, and
one section per page (summary, income, expenses, fuelings, categories,
vehicles, trend). Tables split across pages with their header row repeated.
"""

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Union
from xml.sax.saxutils import escape

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.charts.legends import Legend
from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .aggregation import ALL_VEHICLES, as_number
from .dates import ReportWindow, format_calendar_date
from .errors import ReportError
from .fleet import Fleet
from .formatters import (
    format_change,
    format_consumption,
    format_currency,
    format_km,
    format_liters,
    truncate,
)
from .kinds import TransactionStatus
from .results import CategoryBreakdown, FleetSummary
from .transaction import Transaction

log = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 15 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

BLUE = colors.HexColor("#2563EB")
GREEN = colors.HexColor("#16A34A")
RED = colors.HexColor("#DC2626")
AMBER = colors.HexColor("#F59E0B")
STRIPE = colors.HexColor("#F3F4F6")
CHART_COLORS = [
    colors.HexColor("#3B82F6"),
    colors.HexColor("#10B981"),
    colors.HexColor("#F59E0B"),
    colors.HexColor("#EF4444"),
    colors.HexColor("#8B5CF6"),
    colors.HexColor("#EC4899"),
    colors.HexColor("#14B8A6"),
    colors.HexColor("#F97316"),
]

STATUS_LABELS = {
    TransactionStatus.SCHEDULED: "Scheduled",
    TransactionStatus.SETTLED: "Settled",
}


def report_filename(window: ReportWindow) -> str:
    """File name for a report covering window, e.g. fleet-report_2025-03-01_2025-03-31.pdf."""
    return (
        f"fleet-report_{format_calendar_date(window.start)}"
        f"_{format_calendar_date(window.end)}.pdf"
    )


class ReportComposer:
    """Lays out a FleetSummary as a paginated PDF."""

    def __init__(
        self,
        summary: FleetSummary,
        fleet: Fleet,
        owner: Optional[str] = None,
        generated_at: Optional[datetime] = None,
        locale: Optional[str] = None,
        app_name: str = "Fleet Ledger",
    ):
        self.summary = summary
        self.fleet = fleet
        self.owner = owner or fleet.owner or "unknown"
        self.generated_at = generated_at or datetime.now()
        self.locale = locale
        self.app_name = app_name

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "ReportTitle", parent=styles["Heading1"], fontSize=14, spaceAfter=4
        )
        self.heading_style = ParagraphStyle(
            "ReportHeading", parent=styles["Heading2"], fontSize=12, spaceAfter=4
        )
        self.body_style = styles["Normal"]
        self.empty_style = ParagraphStyle(
            "ReportEmpty", parent=styles["Italic"], fontSize=10
        )

    def money(self, value: Optional[float]) -> str:
        return format_currency(value, self.locale)

    # -------------------------------------------------------------------------
    # Page decoration
    # -------------------------------------------------------------------------

    def _decorate_page(self, canvas, doc):
        canvas.saveState()

        top = PAGE_HEIGHT - MARGIN
        canvas.setFont("Helvetica-Bold", 16)
        canvas.drawString(MARGIN, top - 5 * mm, self.app_name)
        canvas.setFont("Helvetica", 10)
        canvas.drawRightString(
            PAGE_WIDTH - MARGIN, top - 5 * mm, self.generated_at.strftime("%Y-%m-%d")
        )
        canvas.setStrokeColor(BLUE)
        canvas.setLineWidth(0.5)
        canvas.line(MARGIN, top - 8 * mm, PAGE_WIDTH - MARGIN, top - 8 * mm)

        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(
            PAGE_WIDTH / 2,
            MARGIN + 8 * mm,
            f"Report generated automatically by {self.app_name}",
        )
        canvas.drawCentredString(
            PAGE_WIDTH / 2,
            MARGIN + 4 * mm,
            f"{self.generated_at.strftime('%Y-%m-%d %H:%M')} - User: {self.owner}",
        )
        canvas.drawRightString(PAGE_WIDTH - MARGIN, MARGIN + 4 * mm, f"Page {doc.page}")

        canvas.restoreState()

    # -------------------------------------------------------------------------
    # Building blocks
    # -------------------------------------------------------------------------

    def _table(
        self,
        header: List[str],
        rows: List[List[str]],
        widths: Sequence[float],
        color,
        footer: Optional[List[str]] = None,
        right_align: Sequence[int] = (),
    ) -> Table:
        data = [header] + rows + ([footer] if footer else [])
        table = Table(data, colWidths=[w * mm for w in widths], repeatRows=1)
        last_body_row = -2 if footer else -1
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), color),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("ROWBACKGROUNDS", (0, 1), (-1, last_body_row), [colors.white, STRIPE]),
        ]
        for column in right_align:
            style.append(("ALIGN", (column, 0), (column, -1), "RIGHT"))
        if footer:
            style += [
                ("BACKGROUND", (0, -1), (-1, -1), color),
                ("TEXTCOLOR", (0, -1), (-1, -1), colors.white),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ]
        table.setStyle(TableStyle(style))
        return table

    def _empty(self, text: str) -> Paragraph:
        return Paragraph(escape(text), self.empty_style)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def summary_section(self) -> list:
        s = self.summary
        vehicle_label = "All vehicles"
        if s.vehicle_filter not in (None, ALL_VEHICLES):
            vehicle_label = self.fleet.vehicle_name(s.vehicle_filter)

        rows = [
            ["Total income", self.money(s.income.total)],
            ["   Settled", self.money(s.income.settled)],
            ["   Scheduled", self.money(s.income.scheduled)],
            ["Change vs previous period (income)", format_change(s.income_change)],
            ["Total expenses (transactions)", self.money(s.expense.total)],
            ["   Settled", self.money(s.expense.settled)],
            ["   Scheduled", self.money(s.expense.scheduled)],
            ["Change vs previous period (expenses)", format_change(s.expense_change)],
            ["Total expenses (fuelings)", self.money(s.fueling_total)],
            ["Total expenses", self.money(s.total_outflow)],
            ["Balance (income - transaction expenses)", self.money(s.balance)],
            ["Balance after fuel", self.money(s.net_after_fuel)],
            ["Fuelings", f"{s.fueling_count} ({format_liters(s.fueling_liters)})"],
            ["Average consumption", format_consumption(s.average_consumption)],
            ["Distance driven", format_km(s.km_driven)],
            ["Cost per km", f"{self.money(s.cost_per_km)}/km"],
        ]
        return [
            Paragraph("Detailed Financial Report", self.title_style),
            Paragraph(
                escape(
                    f"Period: {format_calendar_date(s.window.start)} to "
                    f"{format_calendar_date(s.window.end)} - {vehicle_label}"
                ),
                self.body_style,
            ),
            Spacer(1, 5 * mm),
            self._table(["Description", "Value"], rows, (110, 70), BLUE, right_align=(1,)),
        ]

    def _transaction_rows(self, transactions: List[Transaction]) -> List[List[str]]:
        rows = []
        for t in sorted(transactions, key=lambda t: t.date):
            rows.append(
                [
                    t.date,
                    truncate(t.description, 28),
                    truncate(self.fleet.category_name(t.category_id), 18),
                    truncate(self.fleet.vehicle_name(t.vehicle_id), 18),
                    STATUS_LABELS[t.status],
                    self.money(as_number(t.amount)),
                ]
            )
        return rows

    def transactions_section(
        self, title: str, transactions: List[Transaction], total: float, color, empty: str
    ) -> list:
        flowables = [Paragraph(escape(title), self.title_style), Spacer(1, 3 * mm)]
        if not transactions:
            flowables.append(self._empty(empty))
            return flowables
        flowables.append(
            self._table(
                ["Date", "Description", "Category", "Vehicle", "Status", "Amount"],
                self._transaction_rows(transactions),
                (22, 48, 32, 32, 20, 26),
                color,
                footer=["", "", "", "", "Total:", self.money(total)],
                right_align=(5,),
            )
        )
        return flowables

    def fuelings_section(self) -> list:
        s = self.summary
        flowables = [Paragraph("Fuelings in Period", self.title_style), Spacer(1, 3 * mm)]
        if not s.fuelings:
            flowables.append(self._empty("No fuelings recorded in this period."))
            return flowables

        rows = []
        for f in sorted(s.fuelings, key=lambda f: f.date):
            rows.append(
                [
                    f.date,
                    truncate(self.fleet.vehicle_name(f.vehicle_id), 22),
                    truncate(f.fuel_type, 12),
                    format_liters(as_number(f.liters)),
                    self.money(f.price_per_liter),
                    format_km(as_number(f.odometer)),
                    self.money(as_number(f.total_amount)),
                ]
            )
        flowables.append(
            self._table(
                ["Date", "Vehicle", "Fuel", "Liters", "Price/L", "Odometer", "Total"],
                rows,
                (22, 38, 22, 22, 24, 26, 26),
                AMBER,
                footer=["", "", "", "", "", "Total:", self.money(s.fueling_total)],
                right_align=(3, 4, 5, 6),
            )
        )
        return flowables

    def _category_table(self, rows: List[CategoryBreakdown], color) -> Table:
        data = [
            [
                truncate(r.name, 36),
                str(r.count),
                self.money(r.scheduled),
                self.money(r.settled),
                self.money(r.total),
            ]
            for r in rows
        ]
        return self._table(
            ["Category", "Count", "Scheduled", "Settled", "Total"],
            data,
            (70, 20, 30, 30, 30),
            color,
            right_align=(1, 2, 3, 4),
        )

    def categories_section(self) -> list:
        s = self.summary
        flowables = [Paragraph("Summary by Category", self.title_style)]

        flowables.append(Paragraph("Income by Category", self.heading_style))
        if s.income_by_category:
            flowables.append(self._category_table(s.income_by_category, GREEN))
        else:
            flowables.append(self._empty("No income by category in this period."))
        flowables.append(Spacer(1, 8 * mm))

        flowables.append(Paragraph("Expenses by Category", self.heading_style))
        if s.expense_by_category:
            flowables.append(self._category_table(s.expense_by_category, RED))
        else:
            flowables.append(self._empty("No expenses by category in this period."))
        return flowables

    def vehicles_section(self) -> list:
        s = self.summary
        flowables = [Paragraph("Summary by Vehicle", self.title_style), Spacer(1, 3 * mm)]
        if not s.by_vehicle:
            flowables.append(self._empty("No vehicle expenses in this period."))
            return flowables

        rows = [
            [
                truncate(r.name, 30),
                self.money(r.expenses),
                self.money(r.fuelings),
                self.money(r.total),
            ]
            for r in s.by_vehicle
        ]
        footer = [
            "Grand total:",
            self.money(sum(r.expenses for r in s.by_vehicle)),
            self.money(sum(r.fuelings for r in s.by_vehicle)),
            self.money(sum(r.total for r in s.by_vehicle)),
        ]
        flowables.append(
            self._table(
                ["Vehicle", "Settled expenses", "Fuelings", "Total"],
                rows,
                (60, 40, 40, 40),
                BLUE,
                footer=footer,
                right_align=(1, 2, 3),
            )
        )
        flowables.append(Spacer(1, 8 * mm))
        flowables.append(self.vehicle_chart())
        return flowables

    def vehicle_chart(self) -> Drawing:
        """Pie chart of each vehicle's share of total spend."""
        rows = self.summary.by_vehicle
        drawing = Drawing(CONTENT_WIDTH, 70 * mm)

        pie = Pie()
        pie.x = 10 * mm
        pie.y = 5 * mm
        pie.width = 60 * mm
        pie.height = 60 * mm
        pie.data = [r.total for r in rows]
        pie.slices.strokeWidth = 0.5
        pie.slices.strokeColor = colors.white
        for i in range(len(rows)):
            pie.slices[i].fillColor = CHART_COLORS[i % len(CHART_COLORS)]
        drawing.add(pie)

        legend = Legend()
        legend.x = 85 * mm
        legend.y = 62 * mm
        legend.boxAnchor = "nw"
        legend.alignment = "right"
        legend.fontName = "Helvetica"
        legend.fontSize = 8
        legend.colorNamePairs = [
            (CHART_COLORS[i % len(CHART_COLORS)], f"{truncate(r.name, 24)} ({self.money(r.total)})")
            for i, r in enumerate(rows)
        ]
        drawing.add(legend)
        return drawing

    def trend_section(self) -> list:
        points = self.summary.trailing
        flowables = [
            Paragraph(f"Monthly Trend (last {len(points)} months)", self.title_style),
            Spacer(1, 3 * mm),
        ]
        if not any(p.income or p.expense for p in points):
            flowables.append(self._empty("No income or expenses in this period."))
            return flowables

        drawing = Drawing(CONTENT_WIDTH, 80 * mm)
        chart = VerticalBarChart()
        chart.x = 15 * mm
        chart.y = 15 * mm
        chart.width = CONTENT_WIDTH - 25 * mm
        chart.height = 60 * mm
        chart.data = [
            tuple(p.income for p in points),
            tuple(p.expense for p in points),
        ]
        chart.categoryAxis.categoryNames = [p.label for p in points]
        chart.categoryAxis.labels.fontSize = 8
        chart.valueAxis.valueMin = 0
        chart.valueAxis.labels.fontSize = 8
        chart.bars[0].fillColor = GREEN
        chart.bars[1].fillColor = RED
        drawing.add(chart)

        legend = Legend()
        legend.x = 15 * mm
        legend.y = 6 * mm
        legend.boxAnchor = "nw"
        legend.columnMaximum = 1
        legend.fontName = "Helvetica"
        legend.fontSize = 8
        legend.colorNamePairs = [(GREEN, "Income"), (RED, "Expenses")]
        drawing.add(legend)

        rows = [
            [p.label, self.money(p.income), self.money(p.expense), self.money(p.net)]
            for p in points
        ]
        flowables.append(drawing)
        flowables.append(Spacer(1, 5 * mm))
        flowables.append(
            self._table(
                ["Month", "Income", "Expenses", "Net"],
                rows,
                (45, 45, 45, 45),
                BLUE,
                right_align=(1, 2, 3),
            )
        )
        return flowables

    def story(self) -> list:
        s = self.summary
        sections = [
            self.summary_section(),
            self.transactions_section(
                "Income in Period",
                s.income_transactions,
                s.income.total,
                GREEN,
                "No income recorded in this period.",
            ),
            self.transactions_section(
                "Expenses in Period (Transactions)",
                s.expense_transactions,
                s.expense.total,
                RED,
                "No expenses recorded in this period.",
            ),
            self.fuelings_section(),
            self.categories_section(),
            self.vehicles_section(),
            self.trend_section(),
        ]
        story = []
        for i, section in enumerate(sections):
            if i:
                story.append(PageBreak())
            story.extend(section)
        return story

    def build(self, output: Union[str, Path, BinaryIO]) -> None:
        """Write the PDF to a path or a binary stream."""
        target = str(output) if isinstance(output, (str, Path)) else output
        doc = SimpleDocTemplate(
            target,
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN + 12 * mm,
            bottomMargin=MARGIN + 14 * mm,
            title=f"{self.app_name} report {self.summary.window.label}",
            author=self.owner,
        )
        try:
            doc.build(
                self.story(),
                onFirstPage=self._decorate_page,
                onLaterPages=self._decorate_page,
            )
        except Exception as exc:
            raise ReportError(f"Could not build report: {exc}") from exc
        log.info(
            "Built report for %s (%s), %d pages",
            self.owner,
            self.summary.window.label,
            doc.page,
        )


def build_report(
    summary: FleetSummary,
    fleet: Fleet,
    output: Union[str, Path, BinaryIO],
    owner: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    locale: Optional[str] = None,
    app_name: str = "Fleet Ledger",
) -> None:
    """Compose the report for an already computed summary and write it to output."""
    ReportComposer(summary, fleet, owner, generated_at, locale, app_name).build(output)


def render_report(
    summary: FleetSummary,
    fleet: Fleet,
    owner: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    locale: Optional[str] = None,
    app_name: str = "Fleet Ledger",
) -> bytes:
    """Compose the report and return the PDF bytes."""
    buffer = BytesIO()
    build_report(summary, fleet, buffer, owner, generated_at, locale, app_name)
    return buffer.getvalue()

"""Utilities to export dairy reports as Excel workbooks or PDFs."""

from decimal import Decimal
from io import BytesIO
from typing import Mapping, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


__all__ = [
    "generate_financial_overview_workbook",
    "generate_financial_overview_pdf",
    "generate_outstanding_balances_workbook",
    "generate_outstanding_balances_pdf",
]


HEADER_FILL = PatternFill(start_color="305496", end_color="305496", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
TOTAL_FILL = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
CURRENCY_NUMBER_FORMAT = "#,##0.00"

PARTY_LABELS = {"buyer": "Buyer", "seller": "Seller"}


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _auto_size_columns(worksheet) -> None:
    """Adjust column widths to fit their content nicely."""

    for column_cells in worksheet.columns:
        column_letter = get_column_letter(column_cells[0].column)
        max_length = 0
        for cell in column_cells:
            if cell.value is None:
                continue
            max_length = max(max_length, len(str(cell.value)))
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, 45)


def _format_currency(value) -> str:
    return f"{_to_decimal(value):,.2f}"


def _style_header_row(worksheet) -> None:
    for cell in worksheet[worksheet.max_row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")


def _workbook_bytes(workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _period(report: Mapping) -> str:
    date_range = report.get("dateRange") or {}
    return f"Period: {date_range.get('startDate', '')} to {date_range.get('endDate', '')}".strip()


def _financial_rows(report: Mapping) -> list[tuple[str, str, Decimal]]:
    summary = report.get("summary") or {}
    rows = [
        ("Income", entry.get("category") or "Other Income", _to_decimal(entry.get("totalAmount")))
        for entry in report.get("incomeBreakdown") or []
    ]
    rows.append(("Income", "Total Income", _to_decimal(summary.get("totalIncome"))))
    rows.extend(
        ("Expenses", entry.get("category") or "other", _to_decimal(entry.get("totalAmount")))
        for entry in report.get("expenseBreakdown") or []
    )
    rows.append(("Expenses", "Total Expenses", _to_decimal(summary.get("totalExpense"))))
    rows.append(("Summary", "Net Profit", _to_decimal(summary.get("netProfit"))))
    return rows


def generate_financial_overview_workbook(report: Mapping) -> bytes:
    """Return an Excel workbook for the financial overview."""

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Financial Overview"

    worksheet["A1"] = "Financial Overview"
    worksheet["A1"].font = Font(size=14, bold=True)
    worksheet["A2"] = _period(report)
    worksheet["A2"].font = Font(italic=True)
    worksheet.append([])

    worksheet.append(["Section", "Category", "Amount"])
    _style_header_row(worksheet)
    first_data_row = worksheet.max_row + 1

    for section, category, amount in _financial_rows(report):
        worksheet.append([section, category, float(amount)])

    for row in worksheet.iter_rows(min_row=first_data_row, min_col=3, max_col=3):
        for cell in row:
            cell.number_format = CURRENCY_NUMBER_FORMAT
            cell.alignment = Alignment(horizontal="right")

    margin = (report.get("summary") or {}).get("profitMargin", "0")
    worksheet.append(["Summary", "Profit Margin (%)", margin])

    for row_index in (worksheet.max_row - 1, worksheet.max_row):
        for column in "ABC":
            worksheet[f"{column}{row_index}"].font = Font(bold=True)
            worksheet[f"{column}{row_index}"].fill = TOTAL_FILL

    _auto_size_columns(worksheet)
    return _workbook_bytes(workbook)


def generate_financial_overview_pdf(report: Mapping) -> bytes:
    """Return a PDF version of the financial overview."""

    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title="Financial Overview",
    )
    styles = getSampleStyleSheet()

    story = [
        Paragraph("Financial Overview", styles["Title"]),
        Spacer(1, 6 * mm),
        Paragraph(_period(report), styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    table_data: list[list[str]] = [["Section", "Category", "Amount"]]
    for section, category, amount in _financial_rows(report):
        table_data.append([section, category, _format_currency(amount)])
    margin = (report.get("summary") or {}).get("profitMargin", "0")
    table_data.append(["Summary", "Profit Margin (%)", str(margin)])

    table = Table(table_data, colWidths=[40 * mm, 90 * mm, 35 * mm], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#305496")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (2, 1), (2, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#CCCCCC")),
        ("BACKGROUND", (0, -2), (-1, -1), colors.HexColor("#D9E1F2")),
        ("FONTNAME", (0, -2), (-1, -1), "Helvetica-Bold"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
        ("TOPPADDING", (0, 0), (-1, 0), 6),
        ("TOPPADDING", (0, 1), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 1), (-1, -1), 4),
    ]))
    story.append(table)

    document.build(story)
    pdf = buffer.getvalue()
    buffer.close()
    return pdf


def _balance_totals(balances: Sequence[Mapping]) -> dict[str, Decimal]:
    totals = {"buyer": Decimal("0"), "seller": Decimal("0")}
    for row in balances:
        totals[row.get("type", "buyer")] += _to_decimal(row.get("outstandingAmount"))
    return totals


def generate_outstanding_balances_workbook(balances: Sequence[Mapping]) -> bytes:
    """Return an Excel workbook listing what the dairy owes and is owed."""

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Outstanding Balances"

    worksheet["A1"] = "Outstanding Balances"
    worksheet["A1"].font = Font(size=14, bold=True)
    worksheet.append([])

    worksheet.append(["Type", "Name", "Mobile", "City", "Milk Total", "Paid", "Outstanding"])
    _style_header_row(worksheet)

    for row in balances:
        worksheet.append([
            PARTY_LABELS.get(row.get("type"), row.get("type")),
            row.get("fullName", ""),
            row.get("mobileNumber", ""),
            row.get("city", ""),
            float(_to_decimal(row.get("transactionTotal"))),
            float(_to_decimal(row.get("paidTotal"))),
            float(_to_decimal(row.get("outstandingAmount"))),
        ])
        for cell in worksheet[worksheet.max_row][4:]:
            cell.number_format = CURRENCY_NUMBER_FORMAT
            cell.alignment = Alignment(horizontal="right")

    worksheet.append([])
    totals = _balance_totals(balances)
    for party_type, label in (("buyer", "Owed to buyers"), ("seller", "Due from sellers")):
        worksheet.append(["", label, "", "", "", "", float(totals[party_type])])
        total_row = worksheet[worksheet.max_row]
        total_row[1].font = Font(bold=True)
        total_row[1].fill = TOTAL_FILL
        total_row[6].font = Font(bold=True)
        total_row[6].fill = TOTAL_FILL
        total_row[6].number_format = CURRENCY_NUMBER_FORMAT

    _auto_size_columns(worksheet)
    return _workbook_bytes(workbook)


def generate_outstanding_balances_pdf(balances: Sequence[Mapping]) -> bytes:
    """Return a PDF listing what the dairy owes and is owed."""

    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="Outstanding Balances",
    )
    styles = getSampleStyleSheet()

    story = [
        Paragraph("Outstanding Balances", styles["Title"]),
        Spacer(1, 6 * mm),
    ]

    table_data: list[list[str]] = [
        ["Type", "Name", "Mobile", "City", "Milk Total", "Paid", "Outstanding"],
    ]
    for row in balances:
        table_data.append([
            PARTY_LABELS.get(row.get("type"), str(row.get("type"))),
            row.get("fullName", ""),
            row.get("mobileNumber", ""),
            row.get("city", ""),
            _format_currency(row.get("transactionTotal")),
            _format_currency(row.get("paidTotal")),
            _format_currency(row.get("outstandingAmount")),
        ])

    totals = _balance_totals(balances)
    table_data.append(["", "Owed to buyers", "", "", "", "", _format_currency(totals["buyer"])])
    table_data.append(["", "Due from sellers", "", "", "", "", _format_currency(totals["seller"])])

    table = Table(
        table_data,
        colWidths=[20 * mm, 70 * mm, 35 * mm, 40 * mm, 30 * mm, 30 * mm, 30 * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#305496")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (4, 1), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#CCCCCC")),
        ("BACKGROUND", (0, -2), (-1, -1), colors.HexColor("#F2F2F2")),
        ("FONTNAME", (0, -2), (-1, -1), "Helvetica-Bold"),
        ("TOPPADDING", (0, 1), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 1), (-1, -1), 4),
    ]))
    story.append(table)

    document.build(story)
    pdf = buffer.getvalue()
    buffer.close()
    return pdf

"""
Standings exports (PDF / Excel)
"""
import io
import re
from xml.sax.saxutils import escape
from typing import Any, Dict, List, Optional

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from scraper.config import server_config
from .views import DISTANCE_REPORTS, build_section, report_entries

EXPORT_TYPES = ["full", "overall", "sprint", "long-distance", "junior", "master"] + list(DISTANCE_REPORTS)

TIER_LABELS = {"overall": "Overall", "junior": "Junior", "master": "Master"}

MEN_COLOR = colors.HexColor("#003087")
WOMEN_COLOR = colors.HexColor("#e83e8c")
STRIPE_COLOR = colors.HexColor("#f5f5f5")

DOCUMENT_TITLE = "US Speedskating AmCup"

SHEET_NAME_INVALID = re.compile(r"[\[\]:*?/\\]")
SHEET_NAME_MAX = 31


class ExportError(ValueError):
    """Raised for an unknown export type"""


# =====================================================
# Section selection
# =====================================================

def _tier_sections(
    standings: Dict[str, Any],
    combinations: Dict[str, Any],
    tier: str,
    combination_reports: List[str],
    distance_reports: List[str],
) -> List[Dict[str, Any]]:
    sections = []
    label = TIER_LABELS[tier]

    for report in combination_reports:
        report_label = "Sprint" if report == "sprint" else "Long Distance"
        by_gender = report_entries(standings, combinations, tier, report)
        for gender in ("men", "women"):
            if by_gender.get(gender):
                title = f"{label} - {report_label} ({gender.capitalize()})"
                sections.append(build_section(title, gender, by_gender[gender]))

    for report in distance_reports:
        by_gender = report_entries(standings, combinations, tier, report)
        for gender in ("men", "women"):
            if by_gender.get(gender):
                title = f"{label} - {DISTANCE_REPORTS[report]} ({gender.capitalize()})"
                sections.append(build_section(title, gender, by_gender[gender]))

    return sections


def export_sections(
    standings: Dict[str, Any],
    combinations: Dict[str, Any],
    export_type: str = "full",
) -> List[Dict[str, Any]]:
    """Ordered sections for an export type"""
    if export_type not in EXPORT_TYPES:
        raise ExportError(f"Unknown export type: {export_type}")

    all_distances = list(DISTANCE_REPORTS)
    combos = ["sprint", "long-distance"]

    if export_type == "full":
        plan = [(tier, combos, all_distances) for tier in ("overall", "junior", "master")]
    elif export_type == "overall":
        plan = [("overall", combos, [])]
    elif export_type == "sprint":
        plan = [("overall", ["sprint"], [])]
    elif export_type == "long-distance":
        plan = [("overall", ["long-distance"], [])]
    elif export_type in ("junior", "master"):
        plan = [(export_type, [], all_distances)]
    else:
        plan = [("overall", [], [export_type])]

    sections = []
    for tier, combination_reports, distance_reports in plan:
        sections.extend(_tier_sections(standings, combinations, tier, combination_reports, distance_reports))
    return sections


def _short_category(category: str) -> str:
    return category.replace("Master", "M").replace("Junior", "J")


def section_table(section: Dict[str, Any]) -> List[List[Any]]:
    """Header row + body rows"""
    header = ["Rank", "Name", "Cat"] + [c["label"] for c in section["columns"]] + ["Total"]
    body = [
        [row["rank"], row["name"], _short_category(row["category"])] + row["cells"] + [row["points"]]
        for row in section["rows"]
    ]
    return [header] + body


# =====================================================
# PDF
# =====================================================

def _column_widths(header: List[str], table_width: float) -> List[float]:
    fixed = {"Rank": 0.55 * inch, "Name": 2.2 * inch, "Cat": 0.8 * inch, "Total": 0.7 * inch}
    dynamic = [h for h in header if h not in fixed]
    remaining = table_width - sum(fixed[h] for h in header if h in fixed)
    dynamic_width = remaining / len(dynamic) if dynamic else 0
    return [fixed.get(h, dynamic_width) for h in header]


def build_pdf(
    standings: Dict[str, Any],
    combinations: Dict[str, Any],
    export_type: str = "full",
    subtitle: Optional[str] = None,
) -> bytes:
    """Standings PDF document"""
    sections = export_sections(standings, combinations, export_type)

    buffer = io.BytesIO()
    margin = 0.7 * inch
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=margin, rightMargin=margin,
        topMargin=margin, bottomMargin=margin,
        title=DOCUMENT_TITLE,
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("AmCupTitle", parent=styles["Title"], textColor=MEN_COLOR, alignment=TA_CENTER)
    subtitle_style = ParagraphStyle("AmCupSubtitle", parent=styles["Heading2"], textColor=MEN_COLOR, alignment=TA_CENTER)
    cell_style = ParagraphStyle("Cell", parent=styles["Normal"], fontSize=8, leading=9)

    elements = [
        Paragraph(DOCUMENT_TITLE, title_style),
        Paragraph(escape(subtitle or server_config.season_title), subtitle_style),
        Spacer(1, 24),
    ]

    if not sections:
        elements.append(Paragraph("No standings available for this selection.", styles["Normal"]))

    table_width = doc.width
    for section in sections:
        color = WOMEN_COLOR if section["gender"] == "women" else MEN_COLOR
        heading = ParagraphStyle(f"Heading-{section['gender']}", parent=styles["Heading3"], textColor=color)
        elements.append(Paragraph(escape(section["title"]), heading))

        rows = section_table(section)
        header = rows[0]
        rows[0] = [Paragraph(f"<font color='white'><b>{escape(str(h))}</b></font>", cell_style) for h in header]

        table = Table(rows, colWidths=_column_widths(header, table_width), repeatRows=1)
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), color),
            ("FONTSIZE", (0, 1), (-1, -1), 9),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ]
        for index in range(2, len(rows), 2):
            style.append(("BACKGROUND", (0, index), (-1, index), STRIPE_COLOR))
        table.setStyle(TableStyle(style))

        elements.append(table)
        elements.append(Spacer(1, 18))

    doc.build(elements)
    logger.info(f"PDF export ({export_type}): {len(sections)} sections")
    return buffer.getvalue()


# =====================================================
# Excel
# =====================================================

def _sheet_name(title: str, used: set) -> str:
    name = SHEET_NAME_INVALID.sub("-", title)[:SHEET_NAME_MAX]
    candidate, counter = name, 2
    while candidate in used:
        suffix = f" {counter}"
        candidate = name[:SHEET_NAME_MAX - len(suffix)] + suffix
        counter += 1
    used.add(candidate)
    return candidate


def build_workbook(
    standings: Dict[str, Any],
    combinations: Dict[str, Any],
    export_type: str = "full",
) -> bytes:
    """Standings workbook, one sheet per section"""
    sections = export_sections(standings, combinations, export_type)

    workbook = Workbook()
    first = workbook.active
    used: set = set()

    if not sections:
        first.title = "AmCup Standings"
        first.append(["No standings available for this selection."])

    for index, section in enumerate(sections):
        sheet = first if index == 0 else workbook.create_sheet()
        sheet.title = _sheet_name(section["title"], used)

        rows = section_table(section)
        for row in rows:
            sheet.append(row)

        fill_color = "E83E8C" if section["gender"] == "women" else "003087"
        for cell in sheet[1]:
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = PatternFill("solid", fgColor=fill_color)
        sheet.column_dimensions["B"].width = 28
        sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.info(f"Excel export ({export_type}): {len(sections)} sheets")
    return buffer.getvalue()

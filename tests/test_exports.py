"""
Unit tests for PDF / Excel exports
"""

import io

import pytest
from openpyxl import load_workbook

from app.exports import (
    EXPORT_TYPES,
    ExportError,
    build_pdf,
    build_workbook,
    export_sections,
    section_table,
)
from ranking import empty_standings


class TestExportSections:
    """Tests for export_sections"""

    def test_full_export_order(self, season):
        titles = [s["title"] for s in export_sections(season["standings"], season["combinations"], "full")]
        assert titles[:4] == [
            "Overall - Sprint (Men)",
            "Overall - Sprint (Women)",
            "Overall - Long Distance (Men)",
            "Overall - Long Distance (Women)",
        ]
        assert "Junior - 500m (Men)" in titles
        assert "Master - 3000m (Women)" in titles
        assert titles.index("Overall - Mass Start (Women)") < titles.index("Junior - 500m (Men)")

    def test_sprint_only(self, season):
        sections = export_sections(season["standings"], season["combinations"], "sprint")
        assert [s["title"] for s in sections] == ["Overall - Sprint (Men)", "Overall - Sprint (Women)"]

    def test_single_distance(self, season):
        sections = export_sections(season["standings"], season["combinations"], "5000m")
        assert [s["title"] for s in sections] == ["Overall - 5000m (Men)"]

    def test_tier_export(self, season):
        sections = export_sections(season["standings"], season["combinations"], "master")
        assert all(s["title"].startswith("Master - ") for s in sections)

    def test_empty_genders_omitted(self):
        standings = empty_standings()
        assert export_sections(standings, {}, "full") == []

    def test_unknown_type(self, season):
        with pytest.raises(ExportError):
            export_sections(season["standings"], season["combinations"], "relay")

    def test_all_types_accepted(self, season):
        for export_type in EXPORT_TYPES:
            export_sections(season["standings"], season["combinations"], export_type)

    def test_section_table(self, season):
        section = export_sections(season["standings"], season["combinations"], "sprint")[0]
        rows = section_table(section)
        assert rows[0] == ["Rank", "Name", "Cat", "500m #1", "500m #2", "1000m #1", "Total"]
        assert rows[1] == [1, "Alice Able", "MA1", 60, 60, 54, 174]


class TestBuildPdf:
    """Tests for build_pdf"""

    def test_pdf_bytes(self, season):
        content = build_pdf(season["standings"], season["combinations"], "full")
        assert content.startswith(b"%PDF")

    def test_empty_pdf(self):
        content = build_pdf(empty_standings(), {}, "overall")
        assert content.startswith(b"%PDF")

    def test_markup_in_names(self, result_factory):
        from ranking import calculate_combination_standings, process_race_data

        standings = process_race_data([result_factory("A & <B>", 1)], "AmCup #1")
        content = build_pdf(standings, calculate_combination_standings(standings), "sprint")
        assert content.startswith(b"%PDF")


class TestBuildWorkbook:
    """Tests for build_workbook"""

    def test_sheets(self, season):
        content = build_workbook(season["standings"], season["combinations"], "overall")
        workbook = load_workbook(io.BytesIO(content))
        assert workbook.sheetnames == [
            "Overall - Sprint (Men)",
            "Overall - Sprint (Women)",
            "Overall - Long Distance (Men)",
            "Overall - Long Distance (Women)",
        ]

        sheet = workbook["Overall - Sprint (Men)"]
        assert [c.value for c in sheet[1]] == ["Rank", "Name", "Cat", "500m #1", "500m #2", "1000m #1", "Total"]
        assert [c.value for c in sheet[2]] == [1, "Alice Able", "MA1", 60, 60, 54, 174]
        assert sheet.freeze_panes == "A2"

    def test_empty_workbook(self):
        content = build_workbook(empty_standings(), {}, "full")
        workbook = load_workbook(io.BytesIO(content))
        assert workbook.sheetnames == ["AmCup Standings"]

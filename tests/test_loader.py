"""
Loader Tests

Covers folder validation, delimited-table flattening, lossy decoding,
workbook sheets and their used ranges, cell rendering, and id
assignment.
"""

import datetime

import pytest
from openpyxl import Workbook

from tabular_rag.core.errors import ParseError, PathNotDirectoryError, PathNotFoundError
from tabular_rag.ingestion.loader import (
    count_sources,
    flatten_row,
    load_documents,
)

from conftest import write_file


def write_workbook(path, sheets):
    """sheets: list of (title, rows); rows may be empty."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


class TestFlattenRow:

    def test_exact_content(self):
        result = flatten_row(
            "test.csv", 1, ["Name", "Age", "City"], ["John Doe", "30", "New York"]
        )
        assert result == "From test.csv, Row 1: Name: John Doe, Age: 30, City: New York"

    def test_blank_values_are_dropped(self):
        result = flatten_row("t.csv", 4, ["A", "B", "C"], ["  x ", "   ", ""])
        assert result == "From t.csv, Row 4: A: x"

    def test_all_blank_row_is_empty(self):
        assert flatten_row("t.csv", 1, ["A", "B"], [" ", "\t"]) == ""


class TestDelimitedFiles:

    def test_single_row_document(self, tmp_path):
        write_file(tmp_path, "test.csv", "Name,Age,City\nJohn Doe,30,New York\n")

        docs = load_documents(str(tmp_path))

        assert len(docs) == 1
        doc = docs[0]
        assert doc.id == "0"
        assert doc.content == "From test.csv, Row 1: Name: John Doe, Age: 30, City: New York"
        assert doc.source_file == "test.csv"
        assert doc.row_number == 1

    def test_whitespace_rows_excluded_but_counted(self, tmp_path):
        write_file(
            tmp_path,
            "rows.csv",
            "A,B\n1,2\n , \n,\n3,4\n",
        )

        docs = load_documents(str(tmp_path))

        assert [d.row_number for d in docs] == [1, 4]
        assert docs[1].content == "From rows.csv, Row 4: A: 3, B: 4"

    def test_ragged_rows(self, tmp_path):
        write_file(
            tmp_path,
            "ragged.csv",
            "Name,Age,City\nJane\nBob,41,Oslo,extra,fields\n",
        )

        docs = load_documents(str(tmp_path))

        assert docs[0].content == "From ragged.csv, Row 1: Name: Jane"
        assert docs[1].content == "From ragged.csv, Row 2: Name: Bob, Age: 41, City: Oslo"

    def test_invalid_encoding_does_not_abort(self, tmp_path):
        write_file(tmp_path, "latin.csv", b"Name,City\nJos\xe9,Paris\nAna,Lima\n")

        docs = load_documents(str(tmp_path))

        assert len(docs) == 2
        assert "Name: Jos\ufffd" in docs[0].content
        assert docs[1].content == "From latin.csv, Row 2: Name: Ana, City: Lima"

    def test_byte_order_mark_is_not_part_of_header(self, tmp_path):
        write_file(tmp_path, "bom.csv", "\ufeffName\nAnn\n".encode("utf-8"))

        docs = load_documents(str(tmp_path))

        assert docs[0].content == "From bom.csv, Row 1: Name: Ann"

    def test_empty_and_header_only_files_yield_nothing(self, tmp_path):
        write_file(tmp_path, "empty.csv", "")
        write_file(tmp_path, "header.csv", "A,B,C\n")

        assert load_documents(str(tmp_path)) == []

    def test_quoted_fields(self, tmp_path):
        write_file(tmp_path, "q.csv", 'Quote,Who\n"Hello, world",Ann\n')

        docs = load_documents(str(tmp_path))

        assert docs[0].content == "From q.csv, Row 1: Quote: Hello, world, Who: Ann"

    def test_oversized_field_is_kept(self, tmp_path):
        notes = "x" * 200_000
        write_file(tmp_path, "long.csv", f"Id,Notes\n1,\"{notes}\"\n")

        docs = load_documents(str(tmp_path))

        assert len(docs) == 1
        assert docs[0].content.endswith(f"Notes: {notes}")


class TestFolderHandling:

    def test_missing_folder(self, tmp_path):
        with pytest.raises(PathNotFoundError):
            load_documents(str(tmp_path / "nope"))

    def test_path_is_a_file(self, tmp_path):
        path = write_file(tmp_path, "a.csv", "A\n1\n")
        with pytest.raises(PathNotDirectoryError):
            load_documents(str(path))

    def test_unsupported_entries_skipped(self, tmp_path):
        write_file(tmp_path, "notes.txt", "A\n1\n")
        write_file(tmp_path, "data.json", "{}")
        (tmp_path / "nested.csv").mkdir()
        write_file(tmp_path / "nested.csv", "inner.csv", "A\n1\n")
        write_file(tmp_path, "real.CSV", "A\n1\n")

        docs = load_documents(str(tmp_path))

        assert [d.source_file for d in docs] == ["real.CSV"]

    def test_ids_are_contiguous_across_files(self, tmp_path):
        write_file(tmp_path, "a.csv", "X\n1\n\n2\n")
        write_file(tmp_path, "b.csv", "Y\n3\n ,\n4\n5\n")

        docs = load_documents(str(tmp_path))

        assert [d.id for d in docs] == [str(i) for i in range(len(docs))]
        assert [d.source_file for d in docs] == ["a.csv"] * 2 + ["b.csv"] * 3

    def test_repeat_runs_are_identical(self, tmp_path):
        write_file(tmp_path, "a.csv", "X\n1\n2\n")
        write_file(tmp_path, "b.csv", "Y\n3\n")

        assert load_documents(str(tmp_path)) == load_documents(str(tmp_path))

    def test_corrupt_workbook_aborts_whole_load(self, tmp_path):
        write_file(tmp_path, "a.csv", "X\n1\n")
        write_file(tmp_path, "broken.xlsx", b"this is not a workbook")

        with pytest.raises(ParseError) as excinfo:
            load_documents(str(tmp_path))
        assert excinfo.value.filename == "broken.xlsx"
        assert "broken.xlsx" in str(excinfo.value)


class TestWorkbooks:

    @pytest.fixture
    def book_folder(self, tmp_path):
        write_workbook(
            tmp_path / "book.xlsx",
            [
                (
                    "People",
                    [
                        ["Name", "Age"],
                        ["Ann", 41],
                        ["   ", "  "],
                        ["Bob", None],
                    ],
                ),
                ("Blank", []),
                ("Cities", [["City"], ["Oslo"]]),
            ],
        )
        return tmp_path

    def test_sheet_rows(self, book_folder):
        docs = load_documents(str(book_folder))

        assert [d.content for d in docs] == [
            "From book.xlsx [Sheet: People], Row 2: Name: Ann, Age: 41",
            "From book.xlsx [Sheet: People], Row 4: Name: Bob",
            "From book.xlsx [Sheet: Cities], Row 2: City: Oslo",
        ]
        assert [d.source_file for d in docs] == [
            "book.xlsx (People)",
            "book.xlsx (People)",
            "book.xlsx (Cities)",
        ]
        assert [d.id for d in docs] == ["0", "1", "2"]

    def test_each_sheet_is_a_source(self, book_folder):
        write_file(book_folder, "book.csv", "Name\nCid\n")

        docs = load_documents(str(book_folder))

        assert count_sources(docs) == 3
        assert len(docs) == 4

    def test_header_taken_from_first_used_row(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.title = "S"
        ws["B3"] = "Name"
        ws["C3"] = "Team"
        ws["B4"] = "Ann"
        ws["C4"] = "Ops"
        ws["B6"] = "Bob"
        wb.save(tmp_path / "b.xlsx")

        docs = load_documents(str(tmp_path))

        assert [(d.content, d.row_number) for d in docs] == [
            ("From b.xlsx [Sheet: S], Row 2: Name: Ann, Team: Ops", 2),
            ("From b.xlsx [Sheet: S], Row 4: Name: Bob", 4),
        ]

    def test_cells_render_as_displayed(self, tmp_path):
        write_workbook(
            tmp_path / "typed.xlsx",
            [
                (
                    "T",
                    [
                        ["When", "Active", "Score", "Note"],
                        [datetime.date(2024, 1, 2), True, 3.5, "NA"],
                        [datetime.datetime(2024, 1, 2, 12, 0), False, 7.0, None],
                    ],
                ),
            ],
        )

        docs = load_documents(str(tmp_path))

        assert [d.content for d in docs] == [
            "From typed.xlsx [Sheet: T], Row 2: When: 2024-01-02, Active: true, Score: 3.5, Note: NA",
            "From typed.xlsx [Sheet: T], Row 3: When: 2024-01-02T12:00:00, Active: false, Score: 7",
        ]

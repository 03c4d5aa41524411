"""
Ingestion Data Models

A NormalizedDocument is one non-empty tabular row flattened into a single
text string, tagged with where it came from.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ConfigDict


class NormalizedDocument(BaseModel):
    """
    A single row of a delimited-table file or spreadsheet sheet.

    `source_file` is the filename, with the sheet name appended in
    parentheses for workbook rows so each sheet is its own source.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Sequential identifier, unique within one ingestion run.",
    )

    content: str = Field(
        ...,
        min_length=1,
        description="Flattened row text including provenance prefix.",
    )

    source_file: str = Field(
        ...,
        min_length=1,
        description="Filename, or 'filename (sheet)' for workbook rows.",
    )

    row_number: int = Field(
        ...,
        ge=1,
        description="1-indexed data row position, header excluded.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @property
    def citation(self) -> str:
        return f"{self.source_file}, Row {self.row_number}"

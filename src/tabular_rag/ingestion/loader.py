"""
Tabular Document Loader

This module turns a folder of spreadsheet-style exports into
NormalizedDocument records, one per non-empty row.

Responsibilities
----------------
- Validate the folder and enumerate its entries (non-recursive)
- Classify files by extension; unsupported files are skipped silently
- Flatten each row into "Header: value" pairs with a provenance prefix
- Assign ids from one counter shared across every file and sheet

Decoding Policy
---------------
Delimited files are decoded as UTF-8 with invalid byte sequences replaced
by U+FFFD. Malformed encodings degrade content but never abort ingestion.
"""

from __future__ import annotations

import csv
import datetime
import itertools
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from .models import NormalizedDocument
from ..core.errors import ParseError, PathNotDirectoryError, PathNotFoundError

logger = logging.getLogger("tabular_rag.ingest")


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

DELIMITED_EXTENSIONS = frozenset({".csv"})
WORKBOOK_EXTENSIONS = frozenset({".xlsx", ".xls", ".xlsm", ".xlsb"})

DELIMITED = "delimited"
WORKBOOK = "workbook"

# Named fallback for undecodable bytes in delimited files
CSV_ENCODING = "utf-8-sig"
CSV_DECODE_ERRORS = "replace"

# python-calamine reads all four workbook variants
WORKBOOK_ENGINE = "calamine"

# Only truly empty cells are missing; literal "NA" or "null" text is kept
WORKBOOK_NA_VALUES = [""]

# Fields are unbounded; the C long cap keeps this valid on every platform
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


# ---------------------------------------------------------------------
# Row Flattening
# ---------------------------------------------------------------------

def flatten_pairs(headers: Sequence[str], values: Sequence[str]) -> str:
    """
    Join the non-blank values of a row as "Header: value" pairs.

    Values past the end of a short row are treated as absent; values past
    the last header are ignored. Returns "" when no pair survives.
    """
    parts = []
    for position, header in enumerate(headers):
        if position >= len(values):
            break
        value = values[position].strip()
        if value:
            parts.append(f"{header}: {value}")
    return ", ".join(parts)


def flatten_row(
    filename: str,
    row_number: int,
    headers: Sequence[str],
    values: Sequence[str],
) -> str:
    """Flatten a delimited-table row, e.g. "From a.csv, Row 1: Name: Ann"."""
    pairs = flatten_pairs(headers, values)
    if not pairs:
        return ""
    return f"From {filename}, Row {row_number}: {pairs}"


def flatten_sheet_row(
    filename: str,
    sheet_name: str,
    row_number: int,
    headers: Sequence[str],
    values: Sequence[str],
) -> str:
    """Flatten a workbook row, tagging it with its sheet."""
    pairs = flatten_pairs(headers, values)
    if not pairs:
        return ""
    return f"From {filename} [Sheet: {sheet_name}], Row {row_number}: {pairs}"


# ---------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------

def classify(path: Path) -> Optional[str]:
    """Return DELIMITED, WORKBOOK, or None for unsupported files."""
    suffix = path.suffix.lower()
    if suffix in DELIMITED_EXTENSIONS:
        return DELIMITED
    if suffix in WORKBOOK_EXTENSIONS:
        return WORKBOOK
    return None


# ---------------------------------------------------------------------
# Delimited Tables
# ---------------------------------------------------------------------

def _non_blank_records(reader: Iterable[List[str]]) -> Iterator[List[str]]:
    # Blank lines are not records and do not advance the row counter
    for record in reader:
        if record:
            yield record


def parse_delimited_file(
    path: Path,
    ids: Iterator[int],
) -> List[NormalizedDocument]:
    """
    Parse one delimited-table file.

    The first record is the header row. Rows may be shorter or longer than
    the header. A file with no header yields no documents.

    Raises
    ------
    ParseError
        If the file cannot be opened or the reader rejects its structure.
    """
    filename = path.name
    documents: List[NormalizedDocument] = []

    try:
        with path.open(
            "r",
            encoding=CSV_ENCODING,
            errors=CSV_DECODE_ERRORS,
            newline="",
        ) as handle:
            records = _non_blank_records(csv.reader(handle))

            headers = next(records, [])
            if not headers:
                return []

            for row_number, record in enumerate(records, start=1):
                content = flatten_row(filename, row_number, headers, record)
                if not content:
                    continue

                documents.append(
                    NormalizedDocument(
                        id=str(next(ids)),
                        content=content,
                        source_file=filename,
                        row_number=row_number,
                    )
                )
    except (OSError, csv.Error) as exc:
        raise ParseError(filename, str(exc)) from exc

    return documents


# ---------------------------------------------------------------------
# Workbooks
# ---------------------------------------------------------------------

def _cell_text(cell: Any) -> str:
    """Render one workbook cell the way it reads in the spreadsheet."""
    if cell is None:
        return ""
    if isinstance(cell, (bool, np.bool_)):
        return "true" if cell else "false"
    if isinstance(cell, str):
        return cell
    if pd.isna(cell):
        return ""
    if isinstance(cell, datetime.datetime):
        if cell.time() == datetime.time(0):
            return cell.date().isoformat()
        return cell.isoformat()
    if isinstance(cell, (datetime.date, datetime.time)):
        return cell.isoformat()
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def _used_range(frame: pd.DataFrame) -> pd.DataFrame:
    # Leading blank rows and columns sit outside the sheet's used range
    occupied = frame.notna()
    rows = occupied.any(axis=1)
    if not rows.any():
        return frame.iloc[0:0]
    columns = occupied.any(axis=0)
    return frame.iloc[int(rows.to_numpy().argmax()):, int(columns.to_numpy().argmax()):]


def parse_workbook_file(
    path: Path,
    ids: Iterator[int],
) -> List[NormalizedDocument]:
    """
    Parse every sheet of a workbook.

    Each sheet's header is the first row of its used range, so blank rows
    or columns above and left of the table are ignored. The first data row
    is Row 2, counted from that header. Sheets with no cells are skipped.

    Raises
    ------
    ParseError
        If the workbook cannot be opened or decoded.
    """
    filename = path.name

    try:
        sheets = pd.read_excel(
            path,
            sheet_name=None,
            header=None,
            engine=WORKBOOK_ENGINE,
            keep_default_na=False,
            na_values=WORKBOOK_NA_VALUES,
        )
    except Exception as exc:
        raise ParseError(filename, f"{type(exc).__name__}: {exc}") from exc

    documents: List[NormalizedDocument] = []

    for sheet_name, frame in sheets.items():
        frame = _used_range(frame)
        if frame.empty:
            logger.debug("Skipping empty sheet %s in %s", sheet_name, filename)
            continue

        rows = frame.itertuples(index=False, name=None)
        headers = [_cell_text(cell) for cell in next(rows)]
        source_file = f"{filename} ({sheet_name})"

        for row_number, row in enumerate(rows, start=2):
            values = [_cell_text(cell) for cell in row]
            content = flatten_sheet_row(
                filename, str(sheet_name), row_number, headers, values
            )
            if not content:
                continue

            documents.append(
                NormalizedDocument(
                    id=str(next(ids)),
                    content=content,
                    source_file=source_file,
                    row_number=row_number,
                )
            )

    return documents


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def load_documents(folder_path: str) -> List[NormalizedDocument]:
    """
    Load every supported file in a folder into NormalizedDocuments.

    Entries are visited in filename order, so ids are reproducible for a
    given folder. Sub-directories are not descended into.

    Raises
    ------
    PathNotFoundError
        If `folder_path` does not exist.
    PathNotDirectoryError
        If `folder_path` is not a directory.
    ParseError
        If any supported file cannot be parsed. The whole load is aborted.
    """
    folder = Path(folder_path)

    if not folder.exists():
        raise PathNotFoundError(f"Directory does not exist: {folder_path}")
    if not folder.is_dir():
        raise PathNotDirectoryError(f"Path is not a directory: {folder_path}")

    ids = itertools.count()
    documents: List[NormalizedDocument] = []

    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        kind = classify(entry)
        if kind is None or not entry.is_file():
            logger.debug("Skipping unsupported entry %s", entry.name)
            continue

        if kind == DELIMITED:
            file_documents = parse_delimited_file(entry, ids)
        else:
            file_documents = parse_workbook_file(entry, ids)

        logger.debug("Loaded %d rows from %s", len(file_documents), entry.name)
        documents.extend(file_documents)

    logger.info(
        "Loaded %d documents from %d source(s) in %s",
        len(documents),
        count_sources(documents),
        folder_path,
    )
    return documents


def count_sources(documents: Iterable[NormalizedDocument]) -> int:
    """Number of distinct logical sources (each sheet counts separately)."""
    return len({doc.source_file for doc in documents})

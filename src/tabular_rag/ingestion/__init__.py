"""
Ingestion Package

Reads delimited-table and spreadsheet files and flattens their rows into
provenance-tagged text documents.
"""

from .models import NormalizedDocument
from .loader import load_documents, count_sources, flatten_row, flatten_sheet_row

__all__ = [
    "NormalizedDocument",
    "load_documents",
    "count_sources",
    "flatten_row",
    "flatten_sheet_row",
]

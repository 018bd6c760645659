"""
Word List Scanner
=================

Reconstructs a bilingual vocabulary list from a photographed page.
Turns unordered OCR text fragments into a title and ordered word pairs.

Main components:
- Row clustering of text observations
- Column detection and line serialization
- Numbered-line parsing into title and pairs
- OCR engine adapters (Tesseract, EasyOCR)
- Export to JSON, Markdown and CSV
"""

__version__ = "1.0.0"
__author__ = "Word List Scanner Team"

from .layout import (
    BoundingBox, TextObservation, Row, SPLIT_MARKER, ROW_CLUSTER_THRESHOLD,
    cluster_rows, serialize_row, build_lines,
)
from .parser import WordPair, ParseResult, parse_lines
from .draft import WordListDraft, DraftPair
from .assembler import ScanAssembler, ScanResult
from .io import load_image, load_observations, save_json, load_json, ensure_dir
from .export import WordListExporter, MarkdownExporter, CsvExporter

__all__ = [
    # Layout
    "BoundingBox", "TextObservation", "Row", "SPLIT_MARKER", "ROW_CLUSTER_THRESHOLD",
    "cluster_rows", "serialize_row", "build_lines",
    # Parsing
    "WordPair", "ParseResult", "parse_lines",
    # Draft
    "WordListDraft", "DraftPair",
    # Assembly
    "ScanAssembler", "ScanResult",
    # IO
    "load_image", "load_observations", "save_json", "load_json", "ensure_dir",
    # Export
    "WordListExporter", "MarkdownExporter", "CsvExporter",
]

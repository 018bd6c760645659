"""
Export module for scanned word lists.

Provides:
- JSON export
- Markdown export (title heading + two-column table)
- CSV export (foreign, native)
"""

import csv
import logging
from pathlib import Path
from typing import Dict, Any, List, Union

from .draft import WordListDraft
from .io import save_json
from .parser import ParseResult

logger = logging.getLogger(__name__)


SUPPORTED_FORMATS = ["json", "markdown", "csv"]


def _as_result(word_list: Union[ParseResult, WordListDraft]) -> ParseResult:
    if isinstance(word_list, WordListDraft):
        return word_list.to_result()
    return word_list


# ============================================================================
# Markdown Exporter
# ============================================================================

class MarkdownExporter:
    """Export a word list to Markdown."""

    def __init__(
        self,
        foreign_header: str = "Foreign",
        native_header: str = "Native"
    ):
        self.foreign_header = foreign_header
        self.native_header = native_header

    def export(self, word_list: Any, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.to_markdown(word_list))

        logger.info(f"Exported Markdown to: {output_path}")
        return output_path

    def to_markdown(self, word_list: Any) -> str:
        result = _as_result(word_list)
        lines = []

        if result.title:
            lines.append(f"# {result.title}")
            lines.append("")

        if result.pairs:
            lines.append(f"| # | {self.foreign_header} | {self.native_header} |")
            lines.append("|---|---|---|")
            for i, pair in enumerate(result.pairs, start=1):
                lines.append(f"| {i} | {self._escape(pair.foreign)} | {self._escape(pair.native)} |")
            lines.append("")

        return "\n".join(lines)

    def _escape(self, text: str) -> str:
        return text.replace('|', '\\|')


# ============================================================================
# CSV Exporter
# ============================================================================

class CsvExporter:
    """Export word pairs to CSV, one pair per row."""

    def export(self, word_list: Any, output_path: Union[str, Path]) -> Path:
        result = _as_result(word_list)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(["foreign", "native"])
            for pair in result.pairs:
                writer.writerow([pair.foreign, pair.native])

        logger.info(f"Exported CSV to: {output_path}")
        return output_path


# ============================================================================
# Word List Exporter
# ============================================================================

class WordListExporter:
    """Convenience class for exporting to multiple formats."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        base_name: str = "wordlist",
        foreign_header: str = "Foreign",
        native_header: str = "Native"
    ):
        self.output_dir = Path(output_dir)
        self.base_name = base_name

        self.markdown_exporter = MarkdownExporter(foreign_header, native_header)
        self.csv_exporter = CsvExporter()

    def export(
        self,
        word_list: Union[ParseResult, WordListDraft],
        formats: List[str] = None
    ) -> Dict[str, Path]:
        """
        Export a word list to multiple formats.

        Args:
            word_list: Parse result or edited draft
            formats: List of formats ('json', 'markdown', 'csv', 'all')

        Returns:
            Dictionary mapping format to output path
        """
        if formats is None:
            formats = ["json"]

        if "all" in formats:
            formats = SUPPORTED_FORMATS

        self.output_dir.mkdir(parents=True, exist_ok=True)

        results = {}

        if "json" in formats:
            path = self.output_dir / f"{self.base_name}.json"
            results["json"] = save_json(_as_result(word_list).to_dict(), path)

        if "markdown" in formats:
            path = self.output_dir / f"{self.base_name}.md"
            results["markdown"] = self.markdown_exporter.export(word_list, path)

        if "csv" in formats:
            path = self.output_dir / f"{self.base_name}.csv"
            results["csv"] = self.csv_exporter.export(word_list, path)

        return results

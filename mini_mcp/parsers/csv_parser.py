"""
Delimited text parser backed by pandas.
"""

import os
from typing import Any, Tuple

import pandas as pd

from mini_mcp.parsers.base_parser import DataParser
from mini_mcp.protocol.types import ParsedData
from mini_mcp.validators.schema_validator import infer_column_types

CANDIDATE_DELIMITERS = (",", ";", "\t", "|")


def detect_delimiter(first_line: str) -> str:
    """Pick the candidate delimiter that occurs most often in the header line."""
    best, best_count = ",", 0
    for delimiter in CANDIDATE_DELIMITERS:
        count = first_line.count(delimiter)
        if count > best_count:
            best, best_count = delimiter, count
    return best


class CSVParser(DataParser):
    """Parser for CSV, TSV and delimited .txt files.

    All values are read as text and trimmed. Empty cells become None.
    """

    @property
    def extensions(self) -> Tuple[str, ...]:
        return (".csv", ".tsv", ".txt")

    def _resolve_delimiter(self, file_path: str, delimiter: str | None) -> str:
        if delimiter:
            return delimiter
        if file_path.lower().endswith(".tsv"):
            return "\t"
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            first_line = f.readline()
        return detect_delimiter(first_line)

    def parse(self, file_path: str, **options: Any) -> ParsedData:
        delimiter = self._resolve_delimiter(file_path, options.get("delimiter"))
        has_headers = options.get("has_headers", True)

        if os.path.getsize(file_path) == 0:
            return ParsedData(columns=[], rows=[], column_types={})

        try:
            frame = pd.read_csv(
                file_path,
                sep=delimiter,
                header=0 if has_headers else None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding="utf-8",
            )
        except pd.errors.EmptyDataError:
            return ParsedData(columns=[], rows=[], column_types={})
        except pd.errors.ParserError as e:
            raise ValueError(f"Invalid delimited file {file_path}: {e}") from e

        if has_headers:
            columns = [str(column).strip() for column in frame.columns]
        else:
            columns = [f"column_{i + 1}" for i in range(len(frame.columns))]

        rows = [
            [_clean_cell(value) for value in record]
            for record in frame.itertuples(index=False, name=None)
        ]

        column_info = infer_column_types(columns, rows)
        return ParsedData(
            columns=columns,
            rows=rows,
            column_types={column.name: column.type for column in column_info},
        )


def _clean_cell(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

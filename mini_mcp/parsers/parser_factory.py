"""
Parser lookup by file extension.
"""

import os
from typing import List

from mini_mcp.parsers.base_parser import DataParser
from mini_mcp.parsers.csv_parser import CSVParser
from mini_mcp.parsers.json_parser import JSONParser
from mini_mcp.parsers.parquet_parser import ParquetParser

SUPPORTED_PARSERS: List[DataParser] = [CSVParser(), JSONParser(), ParquetParser()]


def get_parser(file_path: str) -> DataParser:
    """Return the parser registered for the file's extension.

    Raises:
        ValueError: If no parser handles the extension
    """
    for parser in SUPPORTED_PARSERS:
        if parser.can_parse(file_path):
            return parser
    extension = os.path.splitext(file_path)[1].lower() or "(none)"
    raise ValueError(
        f"No parser available for file extension '{extension}'. "
        f"Supported: {', '.join(supported_extensions())}"
    )


def supported_extensions() -> List[str]:
    return sorted({ext for parser in SUPPORTED_PARSERS for ext in parser.extensions})

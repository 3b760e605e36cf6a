"""
Base parser class for all file formats.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Tuple

from mini_mcp.protocol.types import ParsedData


class DataParser(ABC):
    """Base class for tabular file parsers."""

    @property
    @abstractmethod
    def extensions(self) -> Tuple[str, ...]:
        pass

    @abstractmethod
    def parse(self, file_path: str, **options: Any) -> ParsedData:
        pass

    def can_parse(self, file_path: str) -> bool:
        return os.path.splitext(file_path)[1].lower() in self.extensions

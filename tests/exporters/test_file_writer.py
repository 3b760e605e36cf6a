"""Test suite for writing exports to disk."""

from pathlib import Path

import pytest

from mini_mcp.config.schema import Config, SecurityConfig
from mini_mcp.exporters.file_writer import ExportWriteError, can_write_files, write_export


def make_config(data_dir: Path, read_only: bool) -> Config:
    return Config(security=SecurityConfig(allowed_paths=[str(data_dir)], read_only=read_only))


class TestWriteExport:
    """Tests for write_export."""

    def test_writes_file(self, data_dir: Path) -> None:
        """Test a successful write and the reported size."""
        target = data_dir / "out.csv"

        result = write_export("a,b\n1,2", str(target), 1, make_config(data_dir, False))

        assert target.read_text(encoding="utf-8") == "a,b\n1,2"
        assert result.output_path == str(target)
        assert result.row_count == 1
        assert result.byte_size == 7

    def test_byte_size_counts_utf8(self, data_dir: Path) -> None:
        """Test that the size is measured in encoded bytes."""
        result = write_export("é", str(data_dir / "u.txt"), 1, make_config(data_dir, False))

        assert result.byte_size == 2

    def test_read_only_blocks_write(self, data_dir: Path) -> None:
        """Test that nothing is written in read-only mode."""
        target = data_dir / "out.csv"

        with pytest.raises(ExportWriteError, match=r"File export disabled \(read_only: true\)"):
            write_export("x", str(target), 1, make_config(data_dir, True))

        assert not target.exists()

    def test_rejected_path(self, data_dir: Path, tmp_path: Path) -> None:
        """Test that output path rejections are prefixed."""
        with pytest.raises(ExportWriteError, match="Cannot write to path: .*not within allowed"):
            write_export("x", str(tmp_path / "out.csv"), 1, make_config(data_dir, False))

    def test_can_write_files(self, data_dir: Path) -> None:
        assert can_write_files(make_config(data_dir, False)) is True
        assert can_write_files(make_config(data_dir, True)) is False

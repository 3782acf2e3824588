"""Tests for the local filesystem implementation."""

from pathlib import Path

import pandas as pd

from supplier_matching.infrastructure import LocalFileSystem


class TestLocalFileSystemCsv:
    def test_write_then_read_csv_as_strings(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "out" / "matches.csv"

        fs.write_csv(pd.DataFrame({"candidate_id": ["p1", "p2"], "capacity": [10, None]}), path)

        out = fs.read_csv(path)
        assert out["candidate_id"].tolist() == ["p1", "p2"]
        assert out["capacity"].tolist() == ["10.0", ""]


class TestLocalFileSystemJson:
    def test_write_json_keeps_accents(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "nested" / "fallback.json"

        fs.write_json({"message": "Île-de-France"}, path)

        assert "Île-de-France" in path.read_text(encoding="utf-8")
        assert fs.read_json(path) == {"message": "Île-de-France"}

    def test_read_json_accepts_top_level_list(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "candidates.json"
        path.write_text('[{"candidate_id": "p1"}]', encoding="utf-8")

        assert fs.read_json(path) == [{"candidate_id": "p1"}]


class TestLocalFileSystemText:
    def test_text_roundtrip_and_exists(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "config" / "matching.toml"

        assert not fs.exists(path)
        fs.write_text("schema_version = 1\n", path)

        assert fs.exists(path)
        assert fs.read_text(path) == "schema_version = 1\n"

    def test_mkdir_is_idempotent(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "a" / "b"

        fs.mkdir(path)
        fs.mkdir(path)

        assert path.is_dir()

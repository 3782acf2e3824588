"""Local disk access for request, candidate and artefact files."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..protocols import FileSystem


@dataclass(frozen=True)
class LocalFileSystem(FileSystem):
    """Reads and writes under the real filesystem, creating parent folders on write.

    CSV cells come back as strings with blanks for missing values, matching
    what the artefact writers put in.
    """

    encoding: str = "utf-8"

    def _prepare(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def read_csv(self, path: Path) -> pd.DataFrame:
        return pd.read_csv(path, dtype=str, keep_default_na=False, encoding=self.encoding)

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        df.to_csv(self._prepare(path), index=False, encoding=self.encoding)

    def read_json(self, path: Path) -> object:
        return json.loads(self.read_text(path))

    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        self.write_text(json.dumps(data, ensure_ascii=False, indent=2), path)

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding=self.encoding)

    def write_text(self, content: str, path: Path) -> None:
        self._prepare(path).write_text(content, encoding=self.encoding)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def mkdir(self, path: Path, parents: bool = True) -> None:
        path.mkdir(parents=parents, exist_ok=True)

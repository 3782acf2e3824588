"""Storage seam between the matching application layer and the outside world.

Rank runs and market summaries read request and candidate JSON and write
CSV and JSON artefacts only through ``FileSystem``. Tests substitute an
in-memory version.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd


@runtime_checkable
class FileSystem(Protocol):
    """Where matching inputs come from and ranked artefacts go."""

    def read_csv(self, path: Path) -> pd.DataFrame:
        """Load a written artefact, every cell as a string."""
        ...

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        """Write a ranked or summary table without the index."""
        ...

    def read_json(self, path: Path) -> object:
        """Load a request, candidate pool or fallback payload."""
        ...

    def write_json(self, data: Mapping[str, object], path: Path) -> None: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, content: str, path: Path) -> None: ...

    def exists(self, path: Path) -> bool: ...

    def mkdir(self, path: Path, parents: bool = True) -> None:
        """Create an output folder; an existing folder is not an error."""
        ...

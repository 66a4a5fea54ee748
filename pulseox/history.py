"""Plain-text file holding the history of saved measurements."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union


class History:
    """The measurement history stored in one text file."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = Path(path)

    def load(self) -> str:
        """Return the history, one record per line; empty if there is none."""
        try:
            with self.path.open(encoding="utf-8") as stream:
                lines = stream.read().splitlines()
        except FileNotFoundError:
            return ""
        return "\n".join(lines)

    def save(self, text: str) -> None:
        """Replace the whole history with edited text."""
        with self.path.open("w", encoding="utf-8") as stream:
            stream.write(text)

    def append(self, record: str) -> None:
        """Add a formatted record at the end of the history."""
        with self.path.open("a", encoding="utf-8") as stream:
            stream.write(record)

    def clear(self) -> None:
        """Delete the history file; raises FileNotFoundError if there is none."""
        self.path.unlink()
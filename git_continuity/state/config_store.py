"""
Line-oriented configuration stores

The hosts file is a flat list of KEY="value" lines. Components that need it
take a store instead of touching the file directly, so tests can hand them a
MemoryConfigStore.
"""
from pathlib import Path
from typing import Iterable, Optional


class ConfigStore:
    """Interface: read and replace the full list of lines."""

    def read_lines(self) -> list[str]:
        raise NotImplementedError

    def write_lines(self, lines: Iterable[str]):
        raise NotImplementedError


class FileConfigStore(ConfigStore):
    """Lines persisted to a text file; every write replaces the file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read_lines(self) -> list[str]:
        if not self.path.is_file():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def write_lines(self, lines: Iterable[str]):
        lines = list(lines)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = "\n".join(lines) + "\n" if lines else ""
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(content, encoding="utf-8")
        tmp.replace(self.path)

    def __repr__(self):
        return f"FileConfigStore({str(self.path)!r})"


class MemoryConfigStore(ConfigStore):
    def __init__(self, lines: Optional[Iterable[str]] = None):
        self.lines = list(lines or [])

    def read_lines(self) -> list[str]:
        return list(self.lines)

    def write_lines(self, lines: Iterable[str]):
        self.lines = list(lines)

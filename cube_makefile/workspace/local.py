"""Local filesystem workspace implementation."""

from __future__ import annotations

from pathlib import Path

import structlog

from cube_makefile.workspace.base import Workspace

log = structlog.get_logger("cube_makefile.workspace")


class LocalWorkspace(Workspace):
    """Workspace backed by a local directory."""

    def __init__(self, root: str = ".") -> None:
        self.root = Path(root)

    def read_text(self, path: str) -> str:
        text = (self.root / path).read_text(encoding="utf-8", errors="replace")
        log.debug("read file", path=path, size=len(text))
        return text

    def write_text(self, path: str, text: str) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        # newline="" writes "\n" line endings on every platform
        with open(target, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        log.info("wrote file", path=path, size=len(text))

    def glob_files(self, pattern: str) -> list[str]:
        return sorted(
            hit.relative_to(self.root).as_posix()
            for hit in self.root.glob(pattern)
            if hit.is_file()
        )

    def exists(self, path: str) -> bool:
        return (self.root / path).exists()

    def list_entries(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(entry.name for entry in self.root.iterdir())

"""Workspace abstract interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Workspace(ABC):
    """File access rooted at a project directory. Paths are workspace-relative POSIX strings."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a file. Raises FileNotFoundError when it does not exist."""
        ...

    @abstractmethod
    def write_text(self, path: str, text: str) -> None:
        """Write a file, creating parent directories as needed."""
        ...

    @abstractmethod
    def glob_files(self, pattern: str) -> list[str]:
        """Files matching a glob pattern, sorted."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def list_entries(self) -> list[str]:
        """Names of the files and directories at the workspace root."""
        ...

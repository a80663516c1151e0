################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Storage capabilities used by ``ConfigStore``.

There's no process-wide default adapter. Whoever builds a ``ConfigStore`` picks one
and passes it in.
"""
import contextlib
import typing as t
from abc import ABC, abstractmethod
from pathlib import Path

import filelock


class StorageAdapter(ABC):
    """Reads and writes the config file. Implementations don't interpret content."""

    @abstractmethod
    def config_path(self) -> Path:
        """Location of the config file."""
        raise NotImplementedError()

    @abstractmethod
    def read(self, path: Path) -> t.Optional[str]:
        """Returns the file content, or ``None`` if the file doesn't exist."""
        raise NotImplementedError()

    @abstractmethod
    def write(self, path: Path, content: str):
        raise NotImplementedError()

    @abstractmethod
    def ensure_dir(self, path: Path):
        """Creates ``path`` and its parents if they're missing."""
        raise NotImplementedError()

    @abstractmethod
    def lock(self) -> t.ContextManager:
        """Guards a read-modify-write cycle of the config file."""
        raise NotImplementedError()


class FileSystemAdapter(StorageAdapter):
    """Keeps the config file on disk.

    Writes are serialized between processes with a lock file next to the config.
    """

    def __init__(self, path: Path, lock_file_name: str, lock_timeout: float = 3):
        self._path = path
        self._lock_file_name = lock_file_name
        self._lock_timeout = lock_timeout

    def config_path(self) -> Path:
        return self._path

    def read(self, path: Path) -> t.Optional[str]:
        if not path.exists():
            return None
        return path.read_text()

    def write(self, path: Path, content: str):
        self.ensure_dir(path.parent)
        path.write_text(content)

    def ensure_dir(self, path: Path):
        path.mkdir(parents=True, exist_ok=True)

    def lock(self) -> t.ContextManager:
        self.ensure_dir(self._path.parent)
        return filelock.FileLock(
            self._path.parent / self._lock_file_name, timeout=self._lock_timeout
        )


class InMemoryAdapter(StorageAdapter):
    """Keeps files in a dict. Nothing touches the disk."""

    def __init__(self, path: Path = Path("/envase/config.json")):
        self._path = path
        self.files: t.Dict[Path, str] = {}
        self.dirs: t.Set[Path] = set()

    def config_path(self) -> Path:
        return self._path

    def read(self, path: Path) -> t.Optional[str]:
        return self.files.get(path)

    def write(self, path: Path, content: str):
        self.ensure_dir(path.parent)
        self.files[path] = content

    def ensure_dir(self, path: Path):
        self.dirs.add(path)
        self.dirs.update(path.parents)

    def lock(self) -> t.ContextManager:
        return contextlib.nullcontext()

"""
Storage collaborator for game content.

Defines the narrow async contract the resolution engine depends on and a
file-system implementation that stores each collection as a ``.json`` file,
parsed with orjson.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol

import orjson

from .errors import MalformedSource, SourceUnavailable


class Storage(Protocol):
    """Async storage contract used by loaders and services."""

    async def read_collection(self, path: str) -> Optional[Any]:
        """Return parsed records at ``path`` or None when nothing is stored."""
        ...

    async def write_collection(self, path: str, records: Any) -> None:
        """Persist records at ``path``."""
        ...

    async def list_subfolders(self, path: str) -> List[str]:
        """Return the names of the folders directly below ``path``."""
        ...


class FileSystemStorage:
    """Storage backed by a directory tree of JSON files.

    A storage path such as ``games_files/demo/_core/items`` maps to
    ``<base_dir>/games_files/demo/_core/items.json``. Blocking file access runs
    in a worker thread so callers stay cooperative.
    """

    SUFFIX = ".json"

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"FileSystemStorage initialized at {self.base_dir}")

    def file_for(self, path: str) -> Path:
        """Return the JSON file backing a storage path."""
        return self.base_dir / f"{path}{self.SUFFIX}"

    def folder_for(self, path: str) -> Path:
        """Return the directory backing a storage path."""
        return self.base_dir / path

    # Blocking helpers

    def _read_sync(self, path: str) -> Optional[Any]:
        json_file = self.file_for(path)
        if not json_file.exists():
            return None
        try:
            with json_file.open("rb") as f:  # orjson works with bytes
                raw = f.read()
        except OSError as e:
            raise SourceUnavailable(path, str(e)) from e
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise MalformedSource(path, f"invalid JSON: {e}") from e

    def _write_sync(self, path: str, records: Any) -> None:
        json_file = self.file_for(path)
        json_file.parent.mkdir(parents=True, exist_ok=True)
        with json_file.open("wb") as f:
            f.write(orjson.dumps(records, option=orjson.OPT_INDENT_2))

    def _list_sync(self, path: str) -> List[str]:
        folder = self.folder_for(path)
        if not folder.is_dir():
            return []
        return sorted(d.name for d in folder.iterdir() if d.is_dir())

    # Async contract

    async def read_collection(self, path: str) -> Optional[Any]:
        return await asyncio.to_thread(self._read_sync, path)

    async def write_collection(self, path: str, records: Any) -> None:
        await asyncio.to_thread(self._write_sync, path, records)
        self.logger.debug(f"Wrote {self.file_for(path)}")

    async def list_subfolders(self, path: str) -> List[str]:
        return await asyncio.to_thread(self._list_sync, path)

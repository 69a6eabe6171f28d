"""Shared fixtures for layerforge tests."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import orjson
import pytest

from layerforge.content import FileSystemStorage


class MemoryStorage:
    """In-memory storage with optional per-path delays.

    Used where tests need to control the order in which concurrent reads
    complete.
    """

    def __init__(
        self,
        files: Optional[Dict[str, Any]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.files: Dict[str, Any] = dict(files or {})
        self.delays: Dict[str, float] = dict(delays or {})
        self.reads: List[str] = []
        self.writes: Dict[str, Any] = {}

    async def read_collection(self, path: str) -> Optional[Any]:
        self.reads.append(path)
        delay = self.delays.get(path)
        if delay:
            await asyncio.sleep(delay)
        value = self.files.get(path)
        if isinstance(value, Exception):
            raise value
        return value

    async def write_collection(self, path: str, records: Any) -> None:
        self.writes[path] = records
        self.files[path] = records

    async def list_subfolders(self, path: str) -> List[str]:
        prefix = f"{path}/"
        names = {
            key[len(prefix):].split("/")[0]
            for key in self.files
            if key.startswith(prefix) and "/" in key[len(prefix):]
        }
        return sorted(names)


def dump_json(path: Path, data: Any) -> None:
    """Write ``data`` as JSON, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a storage path (without .json) below tmp_path."""

    def _write(storage_path: str, data: Any) -> Path:
        target = tmp_path / f"{storage_path}.json"
        dump_json(target, data)
        return target

    return _write


@pytest.fixture
def storage(tmp_path: Path) -> FileSystemStorage:
    """File system storage rooted at tmp_path."""
    return FileSystemStorage(tmp_path)


@pytest.fixture
def demo_game(write_json: Callable[[str, Any], Path], tmp_path: Path) -> Path:
    """A small game tree with core data, one mod and one global plugin.

    Layout::

        games_files/demo/_core/{manifest,items,item_traits,item_templates,pool_definitions}
        games_files/demo/hardcore/{manifest,items}
        engine_files/plugins/extra_loot/plugin
    """
    write_json("games_files/demo/_core/manifest", {"plugins": ["extra_loot"]})
    write_json("games_files/demo/_core/items", [{"id": "sword", "dmg": 5}])
    write_json(
        "games_files/demo/_core/item_traits",
        [
            {"id": "rarity", "type": "chooseOne", "values": ["common", "rare"], "order": 2},
            {"id": "level", "type": "number", "description": "Required level", "order": 1},
            {"id": "tags", "type": "array"},
        ],
    )
    write_json(
        "games_files/demo/_core/item_templates",
        [
            {"id": "gold", "is_currency": True},
            {"id": "gem", "is_currency": True},
            {"id": "axe", "traits": {"level": 3}},
        ],
    )
    write_json(
        "games_files/demo/_core/pool_definitions",
        [
            {
                "id": "weapons",
                "source": "item_templates",
                "filter_fields": ["traits.level", "traits.rarity", "tags"],
            },
            {"id": "loot", "source": "item_templates", "filter_fields": ["traits.level", "slots"]},
        ],
    )
    write_json("games_files/demo/hardcore/manifest", {"plugins": []})
    write_json("games_files/demo/hardcore/items", [{"id": "sword", "name": "Iron Sword"}])
    write_json(
        "engine_files/plugins/extra_loot/plugin",
        {
            "name": "Extra loot",
            "description": "More items",
            "version": "1.0",
            "data": {"items": [{"id": "dagger", "dmg": 2}]},
        },
    )
    (tmp_path / "games_files/demo/empty_mod").mkdir(parents=True)
    return tmp_path

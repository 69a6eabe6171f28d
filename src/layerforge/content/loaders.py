"""
Layer loaders for game content.

Reads one collection file through the storage collaborator and turns every
failure into an empty layer, so a broken or missing file never stops the
editor from resolving the rest of the content.
"""

import logging
from typing import Any, List, cast

from .errors import MalformedSource, SourceUnavailable
from .models import Layer
from .storage import Storage


class CollectionFileLoader:
    """Loads and validates single collection layers."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug("CollectionFileLoader initialized")

    async def read_layer(self, path: str) -> Layer:
        """Read a collection file and return its records.

        Missing files yield an empty layer silently. Unreadable files are
        logged as warnings, malformed files as errors; both yield an empty
        layer.

        Args:
            path: Storage path of the collection

        Returns:
            List of record dicts (shallow copies of the parsed objects)
        """
        try:
            data = await self.storage.read_collection(path)
            if data is None:
                self.logger.debug(f"No data at {path}")
                return []
            return self._validate(path, data)
        except SourceUnavailable as e:
            self.logger.warning(f"Layer source unavailable, using empty layer: {e}")
        except MalformedSource as e:
            self.logger.error(f"Malformed layer source, using empty layer: {e}")
        except Exception as e:
            # Storage backends may fail in their own ways; never stop the load
            self.logger.error(f"Error reading layer {path}: {e}")
        return []

    def _validate(self, path: str, data: Any) -> Layer:
        """Check the parsed shape and copy records out of the parser result."""
        if not isinstance(data, list):
            raise MalformedSource(
                path, f"expected a list of records, got {type(data).__name__}"
            )

        records: Layer = []
        skipped = 0
        for obj in cast(List[Any], data):
            if not isinstance(obj, dict):
                skipped += 1
                continue
            records.append(dict(cast(dict[str, Any], obj)))

        if skipped:
            self.logger.warning(f"Skipped {skipped} non-object entries in {path}")
        return records

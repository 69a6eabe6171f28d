"""
Layered merge for game content.

Combines ordered record layers (plugin < core < mod) into the collection
the editor shows. Records sharing an id are deep merged: the higher layer
wins for scalars, nested objects merge recursively and lists concatenate
in precedence order.
"""

import copy
import logging
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional, cast

from .models import Collection, Entity, ID_KEY, ORDER_KEY

logger = logging.getLogger(__name__)


class LayerMerger:
    """Merges N ordered record layers into one collection, keyed by id.

    Every record in the result is a fresh deep copy, so editing a merged
    record can never leak into a source layer or into another record.
    """

    def __init__(self, merge_arrays_by_id: bool = False):
        """Initialize the merger.

        Args:
            merge_arrays_by_id: Merge list items that carry an ``id`` item by
                item instead of concatenating the lists.
        """
        self.merge_arrays_by_id = merge_arrays_by_id

    def merge(self, *layers: Optional[Iterable[Any]]) -> Collection:
        """Merge layers given lowest to highest precedence.

        Args:
            layers: Record lists; anything that is not a list is skipped

        Returns:
            Merged records in first-seen id order, or sorted by ``order``
            when any merged record carries a numeric order
        """
        merged: Dict[Any, Entity] = {}
        dropped = 0

        for layer in layers:
            if not isinstance(layer, list):
                if layer is not None:
                    logger.warning(
                        f"Skipping layer of type {type(layer).__name__}, expected a list"
                    )
                continue

            for obj in cast(List[Any], layer):
                if not isinstance(obj, dict) or obj.get(ID_KEY) is None:
                    dropped += 1
                    continue
                record = cast(Entity, obj)
                record_id = record[ID_KEY]
                existing = merged.get(record_id)
                if existing is None:
                    merged[record_id] = copy.deepcopy(record)
                else:
                    merged[record_id] = self.deep_merge(existing, record)

        if dropped:
            logger.debug(f"Dropped {dropped} records without an id")

        result = list(merged.values())
        if any(_is_number(r.get(ORDER_KEY)) for r in result):
            # sorted() is stable, so equal orders keep first-seen order
            result = sorted(result, key=_order_of)
        return result

    def deep_merge(self, base: Entity, override: Entity) -> Entity:
        """Deep merge ``override`` onto ``base`` without touching either.

        Args:
            base: Lower precedence record
            override: Higher precedence record

        Returns:
            New merged record
        """
        result: Entity = copy.deepcopy(base)
        for key, value in override.items():
            current = result.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                result[key] = self.deep_merge(
                    cast(Entity, current), cast(Entity, value)
                )
            elif isinstance(current, list) and isinstance(value, list):
                result[key] = self._merge_lists(
                    cast(List[Any], current), cast(List[Any], value)
                )
            else:
                result[key] = copy.deepcopy(value)
        return result

    def _merge_lists(self, lower: List[Any], higher: List[Any]) -> List[Any]:
        """Combine two list values; lower items always come first."""
        if not self.merge_arrays_by_id or not (
            _has_ids(lower) or _has_ids(higher)
        ):
            return lower + copy.deepcopy(higher)

        by_id: Dict[Any, Any] = {}
        without_ids: List[Any] = []
        for item in lower + higher:
            if isinstance(item, dict) and item.get(ID_KEY) is not None:
                item_id = item[ID_KEY]
                if item_id in by_id:
                    by_id[item_id] = self.deep_merge(by_id[item_id], cast(Entity, item))
                else:
                    by_id[item_id] = copy.deepcopy(item)
            else:
                without_ids.append(copy.deepcopy(item))
        return list(by_id.values()) + without_ids


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _order_of(record: Entity) -> float:
    value = record.get(ORDER_KEY)
    return float(cast(Real, value)) if _is_number(value) else 0.0


def _has_ids(items: List[Any]) -> bool:
    return any(isinstance(item, dict) and ID_KEY in item for item in items)


def merge_layers(
    *layers: Optional[Iterable[Any]], merge_arrays_by_id: bool = False
) -> Collection:
    """Merge record layers (lowest precedence first) into one collection."""
    return LayerMerger(merge_arrays_by_id=merge_arrays_by_id).merge(*layers)


def deep_merge(
    base: Entity, override: Entity, merge_arrays_by_id: bool = False
) -> Entity:
    """Deep merge two records, ``override`` winning on conflicts."""
    return LayerMerger(merge_arrays_by_id=merge_arrays_by_id).deep_merge(base, override)

"""Tests for layered merging of content records."""

from typing import Any, Dict, List

from layerforge.content import LayerMerger, deep_merge, merge_layers


class TestLayerMerge:
    """Test merging of ordered layers keyed by id."""

    def test_nested_objects_merge_and_lists_concatenate(self) -> None:
        """Test objects merge recursively while lists concatenate."""
        lower = [{"id": "x", "a": {"x": 1, "y": 2}, "arr": [1, 2]}]
        higher = [{"id": "x", "a": {"y": 3}, "arr": [3]}]

        result = merge_layers(lower, higher)

        assert result == [{"id": "x", "a": {"x": 1, "y": 3}, "arr": [1, 2, 3]}]

    def test_higher_layer_wins_for_scalars(self) -> None:
        """Test scalar conflicts are won by the higher layer."""
        result = merge_layers(
            [{"id": "sword", "dmg": 5, "name": "Sword"}],
            [{"id": "sword", "dmg": 7}],
        )
        assert result == [{"id": "sword", "dmg": 7, "name": "Sword"}]

    def test_type_change_replaces_value(self) -> None:
        """Test a value of a different kind replaces the lower one."""
        result = merge_layers(
            [{"id": "a", "value": {"nested": True}}],
            [{"id": "a", "value": [1]}],
        )
        assert result == [{"id": "a", "value": [1]}]

    def test_explicit_none_overrides(self) -> None:
        """Test a key present with None counts as defined."""
        result = merge_layers([{"id": "a", "name": "x"}], [{"id": "a", "name": None}])
        assert result == [{"id": "a", "name": None}]

    def test_records_without_id_are_dropped(self) -> None:
        """Test records missing an id never reach the result."""
        result = merge_layers([{"name": "orphan"}, {"id": None}, {"id": "ok"}])
        assert result == [{"id": "ok"}]

    def test_non_list_layers_are_skipped(self) -> None:
        """Test None and non-list layers behave like empty layers."""
        result = merge_layers(None, {"id": "bad"}, [{"id": "a"}])  # type: ignore[arg-type]
        assert result == [{"id": "a"}]

    def test_first_seen_order_without_order_field(self) -> None:
        """Test ids keep the order in which they were first seen."""
        result = merge_layers([{"id": "b"}, {"id": "a"}], [{"id": "c"}, {"id": "b", "x": 1}])
        assert [r["id"] for r in result] == ["b", "a", "c"]

    def test_sorted_by_order_when_present(self) -> None:
        """Test numeric order sorts the result, missing order counts as 0."""
        result = merge_layers(
            [{"id": "late", "order": 5}, {"id": "none"}, {"id": "early", "order": -1}]
        )
        assert [r["id"] for r in result] == ["early", "none", "late"]

    def test_boolean_order_is_not_numeric(self) -> None:
        """Test a boolean order does not trigger sorting."""
        result = merge_layers([{"id": "b", "order": True}, {"id": "a"}])
        assert [r["id"] for r in result] == ["b", "a"]

    def test_equal_orders_keep_first_seen_order(self) -> None:
        """Test sorting by order is stable."""
        result = merge_layers([{"id": "b", "order": 1}, {"id": "a", "order": 1}, {"id": "c", "order": 0}])
        assert [r["id"] for r in result] == ["c", "b", "a"]


class TestMergeProperties:
    """Test algebraic properties of the merge."""

    def test_associativity(self) -> None:
        """Test merge(merge(A,B),C) equals merge(A,B,C)."""
        a = [{"id": "x", "v": 1, "tags": ["a"]}, {"id": "y", "o": {"k": 1}}]
        b = [{"id": "x", "tags": ["b"]}, {"id": "z", "v": 2}]
        c = [{"id": "y", "o": {"j": 2}}, {"id": "x", "v": 3}]

        assert merge_layers(merge_layers(a, b), c) == merge_layers(a, b, c)

    def test_single_layer_identity(self) -> None:
        """Test merging a single layer with unique ids yields that layer."""
        layer = [{"id": "a", "n": {"x": [1, 2]}}, {"id": "b", "v": None}]
        assert merge_layers(layer) == layer

    def test_result_shares_no_structure_with_inputs(self) -> None:
        """Test mutating the result never changes a source layer."""
        core: List[Dict[str, Any]] = [{"id": "a", "nested": {"list": [1]}}]
        result = merge_layers(core)

        result[0]["nested"]["list"].append(2)
        result[0]["nested"]["new"] = True

        assert core == [{"id": "a", "nested": {"list": [1]}}]

    def test_same_nested_object_in_two_records(self) -> None:
        """Test records referencing one shared dict are independent after merge."""
        shared = {"k": 1}
        result = merge_layers([{"id": "a", "o": shared}, {"id": "b", "o": shared}])

        result[0]["o"]["k"] = 2

        assert result[1]["o"] == {"k": 1}
        assert shared == {"k": 1}


class TestMergeArraysById:
    """Test the optional id-aware list merge."""

    def test_list_items_with_ids_merge(self) -> None:
        """Test list items sharing an id are merged instead of duplicated."""
        merger = LayerMerger(merge_arrays_by_id=True)
        result = merger.merge(
            [{"id": "a", "slots": [{"id": "hand", "size": 1}, {"id": "head"}]}],
            [{"id": "a", "slots": [{"id": "hand", "size": 2}, {"id": "back"}]}],
        )
        assert result[0]["slots"] == [
            {"id": "hand", "size": 2},
            {"id": "head"},
            {"id": "back"},
        ]

    def test_plain_lists_still_concatenate(self) -> None:
        """Test lists of scalars are concatenated in id mode."""
        result = deep_merge({"tags": ["a"]}, {"tags": ["b"]}, merge_arrays_by_id=True)
        assert result == {"tags": ["a", "b"]}

    def test_deep_merge_does_not_touch_inputs(self) -> None:
        """Test deep_merge returns a new record."""
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}}
        result = deep_merge(base, override)

        assert result == {"a": {"x": 1, "y": 2}}
        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}}

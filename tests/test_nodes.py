"""Tests for node classification and node-structure helpers."""

from __future__ import annotations

import pytest

from lml.names import NameKind
from lml.nodes import (
    NodeKind,
    child_offset,
    children_of,
    classify,
    find_duplicate_keys,
    iter_keyed,
    node_key,
    split_node,
)

# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize("text", ["", "Hello", "#div", "*cpt", "!x", "[1, 2]"])
    def test_any_string_is_text(self, text: str) -> None:
        assert classify(text) == NodeKind.TEXT

    def test_element(self) -> None:
        assert classify(["#span", "Hello"]) == NodeKind.ELEMENT

    def test_component(self) -> None:
        assert classify(["*cpt", "Hello"]) == NodeKind.COMPONENT

    def test_fragment_of_lists(self) -> None:
        assert classify([["#span", "b"]]) == NodeKind.FRAGMENT

    def test_fragment_of_text(self) -> None:
        assert classify(["Hello", "World"]) == NodeKind.FRAGMENT

    def test_fragment_when_head_is_malformed_name(self) -> None:
        assert classify(["#div span", "x"]) == NodeKind.FRAGMENT

    def test_empty_list_is_fragment(self) -> None:
        assert classify([]) == NodeKind.FRAGMENT

    def test_fragment_when_head_is_not_a_string(self) -> None:
        assert classify([42, "x"]) == NodeKind.FRAGMENT

    def test_reserved_is_invalid(self) -> None:
        assert classify(["!x", "Hello"]) == NodeKind.INVALID
        assert classify(["@x"]) == NodeKind.INVALID

    @pytest.mark.parametrize("value", [None, 42, 1.5, True, {"a": 1}])
    def test_non_list_non_string_is_invalid(self, value: object) -> None:
        assert classify(value) == NodeKind.INVALID


# ---------------------------------------------------------------------------
# split_node / child_offset
# ---------------------------------------------------------------------------


class TestSplitNode:
    def test_with_attributes(self) -> None:
        parts = split_node(["#a", {"href": "/x"}, "link"])
        assert parts.descriptor.tag == "a"
        assert parts.attributes == {"href": "/x"}
        assert parts.children == ["link"]

    def test_without_attributes(self) -> None:
        parts = split_node(["#p", "one", ["#b", "two"]])
        assert parts.attributes is None
        assert parts.children == ["one", ["#b", "two"]]

    def test_second_position_list_is_a_child(self) -> None:
        parts = split_node(["#div", ["#span"]])
        assert parts.attributes is None
        assert parts.children == [["#span"]]

    def test_name_only(self) -> None:
        parts = split_node(["*cpt"])
        assert parts.descriptor.kind == NameKind.COMPONENT
        assert parts.attributes is None
        assert parts.children == []

    def test_not_a_node_raises(self) -> None:
        with pytest.raises(ValueError):
            split_node(["plain", "text"])

    def test_child_offset(self) -> None:
        assert child_offset(["#div"]) == 1
        assert child_offset(["#div", "x"]) == 1
        assert child_offset(["#div", {}]) == 2


class TestChildrenOf:
    def test_fragment_children_start_at_zero(self) -> None:
        frag = [["#a"], "b"]
        assert children_of(frag) == (frag, 0)

    def test_element_children_start_after_attributes(self) -> None:
        el = ["#div", {"id": "x"}, "y"]
        assert children_of(el) == (el, 2)

    def test_text_has_no_children(self) -> None:
        assert children_of("x") == (None, 0)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class TestKeys:
    def test_node_key(self) -> None:
        assert node_key(["#span!FN", "Bart"]) == "FN"
        assert node_key(["#span", "Bart"]) is None
        assert node_key("#span!FN") is None
        assert node_key(["!x!K"]) is None

    def test_iter_keyed_document_order(self) -> None:
        tree = ["#div!A", ["#p!B", ["#b!C"]], [["#i!D"]], ["#s!E"]]
        assert [k for k, _ in iter_keyed(tree)] == ["A", "B", "C", "D", "E"]

    def test_iter_keyed_skips_attribute_values(self) -> None:
        tree = ["*cpt!CPT", {"slot": ["#span!HIDDEN", "x"]}, ["#b!VISIBLE"]]
        assert [k for k, _ in iter_keyed(tree)] == ["CPT", "VISIBLE"]

    def test_find_duplicate_keys(self) -> None:
        tree = [["#a!X"], ["#b!Y"], ["#c!X"], ["#d!X"], ["#e!Y"]]
        assert find_duplicate_keys(tree) == ["X", "Y"]

    def test_no_duplicates(self) -> None:
        assert find_duplicate_keys(["#div!A", ["#p!B"]]) == []

"""Tests for the --debug tree dump."""

from __future__ import annotations

import io

from lml.debug import dump_tree, format_tree
from lml.update import apply_updates
from tests.conftest import simpsons


class TestFormatTree:
    def test_text(self) -> None:
        assert format_tree("Hello") == "Text('Hello')\n"

    def test_element_with_children(self) -> None:
        assert format_tree(simpsons()) == (
            "Element #div\n"
            "  Text('Hello')\n"
            "  Element #span.firstName!FN\n"
            "    Text('Bart')\n"
            "  Element #span.lastName!LN\n"
            "    Text('Simpson')\n"
        )

    def test_component_with_attributes(self) -> None:
        tree = ["*ns:cpt!CPT", {"footer": {"sections": ["First"]}, "n": 1}, "Hello"]
        assert format_tree(tree) == (
            "Component *ns:cpt!CPT\n"
            "  Attr footer={'sections': ['First']}\n"
            "  Attr n=1\n"
            "  Text('Hello')\n"
        )

    def test_fragment_and_invalid(self) -> None:
        tree = [["!x", "y"], 42, "t"]
        assert format_tree(tree) == (
            "Fragment\n"
            "  Invalid ['!x', 'y']\n"
            "  Invalid 42\n"
            "  Text('t')\n"
        )

    def test_update_oracle(self) -> None:
        result = apply_updates(
            simpsons(),
            [{"action": "insertBefore", "node": "FN", "content": ["#span.title!TITLE", "Mr"]}],
        )
        lines = format_tree(result).splitlines()
        assert [line.strip() for line in lines if line.startswith("  Element")] == [
            "Element #span.title!TITLE",
            "Element #span.firstName!FN",
            "Element #span.lastName!LN",
        ]


def test_dump_tree_writes_to_file() -> None:
    buf = io.StringIO()
    dump_tree(["#p", "x"], file=buf)
    assert buf.getvalue() == "Element #p\n  Text('x')\n"

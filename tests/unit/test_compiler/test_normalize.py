"""
文档树规范化单元测试
"""
import pytest

from draftless.core.errors import CompileException
from draftless.domain.models.document import ElementNode, MarkKind, NodeKind, TextNode
from draftless.lib.compiler import compile_document
from draftless.lib.compiler.normalize import normalize_mark, normalize_node, normalize_tree, parse_tree
from tests.factories import TestDataBuilder


@pytest.mark.unit
class TestNormalize:
    """规范化测试"""

    def test_text_without_kind_becomes_text_node(self):
        result = normalize_node({"text": "orphan"})
        assert result == {"kind": "text", "value": "orphan", "marks": []}

    def test_empty_node_is_dropped(self):
        assert normalize_node({}) is None
        tree = normalize_tree({"type": "doc", "content": [{}, {"type": "paragraph"}]})
        assert tree["children"] == [{"kind": "paragraph", "children": [], "attributes": {}}]

    def test_editor_keys_converted_to_canonical(self):
        tree = normalize_tree(TestDataBuilder.editor_doc())

        heading, paragraph = tree["children"]
        assert heading["kind"] == "heading"
        assert heading["attributes"] == {"level": 2}
        assert paragraph["children"][1]["marks"] == [{"kind": "deletion", "attributes": {}}]
        assert paragraph["children"][2]["marks"] == [{"kind": "insertion", "attributes": {}}]
        assert paragraph["children"][3] == {"kind": "text", "value": ".", "marks": []}

    def test_idempotent(self):
        once = normalize_tree(TestDataBuilder.editor_doc())
        twice = normalize_tree(once)
        assert once == twice

    def test_idempotent_on_wrapped_roots(self):
        once = normalize_tree([{"type": "paragraph", "content": [{"text": "a"}]}])
        assert once["kind"] == "doc"
        assert normalize_tree(once) == once

    def test_non_doc_root_wrapped(self):
        tree = normalize_tree({"kind": "paragraph", "children": []})
        assert tree["kind"] == "doc"
        assert tree["children"][0]["kind"] == "paragraph"

    def test_none_root_is_empty_doc(self):
        assert normalize_tree(None) == {"kind": "doc", "children": [], "attributes": {}}

    def test_string_marks_accepted(self):
        assert normalize_mark("deletion") == {"kind": "deletion", "attributes": {}}

    def test_comment_attributes_preserved(self):
        mark = normalize_mark({"type": "comment", "attrs": {"id": "c1", "text": "why?"}})
        assert mark == {"kind": "comment", "attributes": {"id": "c1", "text": "why?"}}

    def test_unknown_node_kind_raises(self):
        with pytest.raises(CompileException):
            normalize_tree({"type": "doc", "content": [{"type": "table", "content": []}]})

    def test_unknown_mark_kind_raises(self):
        with pytest.raises(CompileException):
            normalize_mark({"type": "sparkle"})

    def test_malformed_attributes_raise(self):
        with pytest.raises(CompileException):
            normalize_node({"type": "heading", "attrs": "level-2", "content": []})

    def test_children_without_kind_dropped_siblings_survive(self):
        assert normalize_node({"content": [{"text": "x"}]}) is None

        raw = {"type": "doc", "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "Keep me"}]},
            {"content": [{"type": "text", "text": "stray"}]},
        ]}
        tree = normalize_tree(raw)
        assert len(tree["children"]) == 1
        assert tree["children"][0]["children"][0]["value"] == "Keep me"
        assert compile_document(raw, "final") == "<p>Keep me</p>"

    def test_parse_tree_returns_tagged_union(self):
        tree = parse_tree(TestDataBuilder.hello_world_doc())

        assert isinstance(tree, ElementNode)
        assert tree.kind == NodeKind.DOC
        paragraph = tree.children[0]
        assert isinstance(paragraph, ElementNode)
        assert isinstance(paragraph.children[0], TextNode)
        assert paragraph.children[1].marks[0].kind == MarkKind.DELETION

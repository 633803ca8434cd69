"""
内容编译器单元测试
"""
import pytest

from draftless.core.constants import CompileConstants
from draftless.domain.models.document import CompileMode
from draftless.lib.compiler import compile_document, filter_tree, parse_tree
from tests.factories import TestDataBuilder as B


@pytest.mark.unit
class TestCompileDocument:
    """编译测试"""

    def test_hello_world_final(self, sample_tree):
        assert compile_document(sample_tree, CompileMode.FINAL) == "<p>Hello</p>"

    def test_hello_world_original(self, sample_tree):
        assert compile_document(sample_tree, CompileMode.ORIGINAL) == "<p>Hello world</p>"

    def test_hello_world_review(self, sample_tree):
        assert compile_document(sample_tree, CompileMode.REVIEW) == (
            '<p>Hello<span class="suggestion-del"> world</span></p>'
        )

    def test_insertion_converse_pattern(self):
        tree = B.doc(B.paragraph(B.text("Hello"), B.text(" there", "insertion")))

        assert compile_document(tree, "final") == "<p>Hello there</p>"
        assert compile_document(tree, "original") == "<p>Hello</p>"
        assert compile_document(tree, "review") == '<p>Hello<span class="suggestion-add"> there</span></p>'

    def test_comment_only_visible_in_review(self):
        tree = B.doc(B.paragraph(B.text("Note", B.comment("c7", 'say "more"'))))

        assert compile_document(tree, "final") == "<p>Note</p>"
        assert compile_document(tree, "original") == "<p>Note</p>"
        assert compile_document(tree, "review") == (
            '<p><span class="comment-mark" data-comment-id="c7" '
            'data-comment="say &#34;more&#34;">Note</span></p>'
        )

    def test_deletion_wins_when_both_edit_marks_present(self):
        tree = B.doc(B.paragraph(B.text("keep"), B.text("both", "insertion", "deletion")))

        assert compile_document(tree, "final") == "<p>keep</p>"
        assert compile_document(tree, "original") == "<p>keepboth</p>"
        assert compile_document(tree, "review") == '<p>keep<span class="suggestion-del">both</span></p>'

    def test_emptied_container_is_pruned(self):
        tree = B.doc(
            B.paragraph(B.text("gone", "deletion")),
            B.paragraph(B.text("stays")),
        )
        assert compile_document(tree, "final") == "<p>stays</p>"

    def test_blank_paragraph_dropped_atoms_kept(self):
        tree = B.doc(
            B.paragraph(),
            B.element("horizontalRule"),
            B.paragraph(B.text("a"), B.element("hardBreak"), B.text("b")),
        )
        assert compile_document(tree, "final") == "<hr><p>a<br>b</p>"

    def test_no_empty_wrappers_in_any_mode(self):
        tree = B.doc(B.paragraph(), B.element("blockquote", B.paragraph()), B.paragraph(B.text("x")))
        for mode in CompileMode:
            assert compile_document(tree, mode) == "<p>x</p>"

    def test_everything_filtered_gives_empty_fragment(self):
        tree = B.doc(B.paragraph(B.text("x", "deletion")))
        assert compile_document(tree, "final") == ""

    def test_formatting_marks_nest_first_outermost(self):
        tree = B.doc(B.paragraph(B.text("loud", "bold", "italic")))
        assert compile_document(tree, "final") == "<p><strong><em>loud</em></strong></p>"

    def test_text_is_escaped(self):
        tree = B.doc(B.paragraph(B.text("<script>&")))
        assert compile_document(tree, "final") == "<p>&lt;script&gt;&amp;</p>"

    def test_structure_mapping(self):
        tree = B.doc(
            B.element("heading", B.text("Title"), level=2),
            B.element("blockquote", B.paragraph(B.text("q"))),
            B.element("bulletList", B.element("listItem", B.paragraph(B.text("one")))),
            B.element("orderedList", B.element("listItem", B.paragraph(B.text("two"))), start=3),
            B.element("codeBlock", B.text("x = 1"), language="python"),
        )
        assert compile_document(tree, "final") == (
            "<h2>Title</h2>"
            "<blockquote><p>q</p></blockquote>"
            "<ul><li><p>one</p></li></ul>"
            '<ol start="3"><li><p>two</p></li></ol>'
            '<pre><code class="language-python">x = 1</code></pre>'
        )

    def test_editor_json_compiles(self):
        html = compile_document(B.editor_doc(), "final")
        assert html == "<h2>Chapter One</h2><p>The door was locked.</p>"

    @pytest.mark.parametrize("mode", list(CompileMode))
    def test_invalid_tree_yields_placeholder(self, mode):
        tree = {"type": "doc", "content": [{"type": "hologram"}]}
        assert compile_document(tree, mode) == CompileConstants.PLACEHOLDER_FRAGMENT

    def test_bad_heading_level_yields_placeholder(self):
        tree = B.doc(B.element("heading", B.text("x"), level=9))
        assert compile_document(tree, "final") == CompileConstants.PLACEHOLDER_FRAGMENT

    def test_filter_does_not_mutate_input(self, sample_tree):
        tree = parse_tree(sample_tree)
        before = tree.model_dump()

        filter_tree(tree, CompileMode.FINAL)

        assert tree.model_dump() == before

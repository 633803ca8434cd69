"""
HTML 序列化
"""
from typing import Callable, Dict, Tuple, Union

from markupsafe import escape

from ...core.constants import CompileConstants
from ...core.errors import CompileException
from ...domain.models.document import ElementNode, Mark, MarkKind, NodeKind, TextNode

_SIMPLE_TAGS: Dict[NodeKind, str] = {
    NodeKind.PARAGRAPH: "p",
    NodeKind.BLOCKQUOTE: "blockquote",
    NodeKind.BULLET_LIST: "ul",
    NodeKind.LIST_ITEM: "li",
}

_SIMPLE_MARK_TAGS: Dict[MarkKind, str] = {
    MarkKind.BOLD: "strong",
    MarkKind.ITALIC: "em",
    MarkKind.STRIKE: "s",
    MarkKind.CODE: "code",
    MarkKind.UNDERLINE: "u",
}


def _attr(value) -> str:
    return str(escape("" if value is None else str(value)))


def _mark_tags(mark: Mark) -> Tuple[str, str]:
    """返回标记的开始与结束标签"""
    if mark.kind in _SIMPLE_MARK_TAGS:
        tag = _SIMPLE_MARK_TAGS[mark.kind]
        return f"<{tag}>", f"</{tag}>"
    if mark.kind == MarkKind.INSERTION:
        return '<span class="suggestion-add">', "</span>"
    if mark.kind == MarkKind.DELETION:
        return '<span class="suggestion-del">', "</span>"
    if mark.kind == MarkKind.COMMENT:
        return (
            f'<span class="comment-mark" data-comment-id="{_attr(mark.comment_id)}" '
            f'data-comment="{_attr(mark.comment_text)}">',
            "</span>",
        )
    if mark.kind == MarkKind.LINK:
        href = mark.attributes.get("href")
        if not isinstance(href, str):
            raise CompileException("链接标记缺少 href", details={"mark": mark.kind.value})
        return f'<a href="{_attr(href)}">', "</a>"
    raise CompileException(f"无法序列化的标记: {mark.kind}", details={"mark": str(mark.kind)})


def serialize_text(node: TextNode) -> str:
    """序列化文本叶子，第一个标记位于最外层"""
    html = str(escape(node.value))
    for mark in reversed(node.marks):
        start, end = _mark_tags(mark)
        html = f"{start}{html}{end}"
    return html


def _heading_level(node: ElementNode) -> int:
    level = node.attributes.get("level", CompileConstants.DEFAULT_HEADING_LEVEL)
    if isinstance(level, bool) or not isinstance(level, int):
        raise CompileException("标题级别必须是整数", node_kind=node.kind.value, details={"level": repr(level)})
    if not 1 <= level <= CompileConstants.MAX_HEADING_LEVEL:
        raise CompileException("标题级别超出范围", node_kind=node.kind.value, details={"level": level})
    return level


def _serialize_children(node: ElementNode) -> str:
    return "".join(serialize_node(child) for child in node.children)


def _serialize_heading(node: ElementNode) -> str:
    level = _heading_level(node)
    return f"<h{level}>{_serialize_children(node)}</h{level}>"


def _serialize_ordered_list(node: ElementNode) -> str:
    start = node.attributes.get("start", 1)
    if isinstance(start, int) and not isinstance(start, bool) and start != 1:
        return f'<ol start="{start}">{_serialize_children(node)}</ol>'
    return f"<ol>{_serialize_children(node)}</ol>"


def _serialize_code_block(node: ElementNode) -> str:
    language = node.attributes.get("language")
    if language:
        return f'<pre><code class="language-{_attr(language)}">{_serialize_children(node)}</code></pre>'
    return f"<pre><code>{_serialize_children(node)}</code></pre>"


_SPECIAL: Dict[NodeKind, Callable[[ElementNode], str]] = {
    NodeKind.DOC: _serialize_children,
    NodeKind.HEADING: _serialize_heading,
    NodeKind.ORDERED_LIST: _serialize_ordered_list,
    NodeKind.CODE_BLOCK: _serialize_code_block,
    NodeKind.HARD_BREAK: lambda node: "<br>",
    NodeKind.HORIZONTAL_RULE: lambda node: "<hr>",
}


def serialize_node(node: Union[ElementNode, TextNode]) -> str:
    """序列化任意节点"""
    if isinstance(node, TextNode):
        return serialize_text(node)
    if node.kind in _SPECIAL:
        return _SPECIAL[node.kind](node)
    if node.kind in _SIMPLE_TAGS:
        tag = _SIMPLE_TAGS[node.kind]
        return f"<{tag}>{_serialize_children(node)}</{tag}>"
    raise CompileException(f"无法序列化的节点类型: {node.kind}", node_kind=str(node.kind))


def serialize_fragment(tree: ElementNode) -> str:
    """序列化为 HTML 片段（不含外壳），全部被过滤时为空字符串"""
    return serialize_node(tree)

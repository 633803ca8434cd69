"""
文档树与纯文本之间的转换
"""
from typing import List, Optional, Union

from ...core.constants import CompileConstants
from ...domain.models.document import (
    BLOCK_KINDS,
    CompileMode,
    ElementNode,
    NodeKind,
    TextNode,
)
from .filter import filter_tree


def _is_block(node: Union[ElementNode, TextNode]) -> bool:
    return isinstance(node, ElementNode) and node.kind in BLOCK_KINDS


def _flatten(node: Union[ElementNode, TextNode]) -> str:
    if isinstance(node, TextNode):
        return node.value
    if node.kind == NodeKind.HARD_BREAK:
        return "\n"
    if node.kind == NodeKind.HORIZONTAL_RULE:
        return ""

    parts: List[str] = []
    inline: List[str] = []
    for child in node.children:
        if _is_block(child):
            if inline:
                parts.append("".join(inline))
                inline = []
            parts.append(_flatten(child))
        else:
            inline.append(_flatten(child))
    if inline:
        parts.append("".join(inline))

    return CompileConstants.PARAGRAPH_BREAK.join(part for part in parts if part)


def extract_plain_text(tree: ElementNode, mode: Optional[CompileMode] = None) -> str:
    """扁平化为纯文本

    块级节点之间以段落分隔符连接，行内文本直接拼接，硬换行变为换行符。
    指定 mode 时先按该编译模式过滤。
    """
    if mode is not None:
        tree = filter_tree(tree, mode)
    return _flatten(tree)


def _paragraph(block: str) -> ElementNode:
    children: List[Union[ElementNode, TextNode]] = []
    for index, line in enumerate(block.split("\n")):
        if index:
            children.append(ElementNode(kind=NodeKind.HARD_BREAK))
        if line:
            children.append(TextNode(value=line))
    return ElementNode(kind=NodeKind.PARAGRAPH, children=children)


def tree_from_plain_text(text: str) -> ElementNode:
    """由纯文本构建文档树，是 extract_plain_text 的逆操作

    段落分隔符切分段落，段内的单个换行符还原为硬换行；空白段落被丢弃。
    """
    text = text.replace("\r\n", "\n")
    blocks = (block.strip("\n") for block in text.split(CompileConstants.PARAGRAPH_BREAK))
    return ElementNode(
        kind=NodeKind.DOC,
        children=[_paragraph(block) for block in blocks if block.strip()],
    )

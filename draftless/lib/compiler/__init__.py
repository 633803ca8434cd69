"""
内容编译器

规范化 -> 按标记策略过滤 -> 序列化为 HTML 片段。
"""
from typing import Any, Union

from ...core.constants import CompileConstants
from ...core.errors import CompileException
from ...core.logging import get_logger
from ...domain.models.document import CompileMode, ElementNode
from .filter import filter_tree
from .normalize import dump_tree, normalize_tree, parse_tree
from .policy import MarkAction, mark_action
from .serializer import serialize_fragment
from .text import extract_plain_text, tree_from_plain_text

logger = get_logger(__name__)


def compile_document(tree: Union[ElementNode, Any], mode: Union[CompileMode, str]) -> str:
    """编译单个文档为 HTML 片段

    结构无效的文档不会抛出异常，而是返回占位片段。
    """
    mode = CompileMode(mode)
    try:
        if not isinstance(tree, ElementNode):
            tree = parse_tree(tree)
        return serialize_fragment(filter_tree(tree, mode))
    except CompileException as e:
        logger.warning(f"文档编译失败，使用占位内容: {e.message}", extra={"extra_data": e.details})
        return CompileConstants.PLACEHOLDER_FRAGMENT


__all__ = [
    "MarkAction",
    "mark_action",
    "normalize_tree",
    "parse_tree",
    "dump_tree",
    "filter_tree",
    "serialize_fragment",
    "extract_plain_text",
    "tree_from_plain_text",
    "compile_document",
]

"""
按编译模式过滤文档树

自底向上应用标记策略：
- 文本叶子按标记动作保留、去标记或整体丢弃
- 子节点全部被过滤掉的容器随之丢弃
- 源文档中本来就为空的容器同样丢弃，不输出空包装元素
- 原子节点（换行、分隔线）保留
- 根节点永不丢弃
"""
from typing import Optional, Union

from ...domain.models.document import CompileMode, ElementNode, TextNode
from .policy import MarkAction, mark_action, resolve_edit_state


def filter_text(node: TextNode, mode: CompileMode) -> Optional[TextNode]:
    """过滤单个文本叶子，返回 None 表示丢弃"""
    effective = resolve_edit_state(node.mark_kinds())
    kept_marks = []
    for mark in node.marks:
        if mark.kind not in effective:
            continue
        action = mark_action(mark.kind, mode)
        if action == MarkAction.DROP:
            return None
        if action == MarkAction.KEEP:
            kept_marks.append(mark)
    return node.model_copy(update={"marks": kept_marks})


def filter_node(node: Union[ElementNode, TextNode], mode: CompileMode) -> Optional[Union[ElementNode, TextNode]]:
    """过滤任意节点，返回 None 表示丢弃"""
    if isinstance(node, TextNode):
        return filter_text(node, mode)

    if node.is_atom:
        return node

    children = []
    for child in node.children:
        filtered = filter_node(child, mode)
        if filtered is not None:
            children.append(filtered)

    if not children:
        return None
    return node.model_copy(update={"children": children})


def filter_tree(tree: ElementNode, mode: CompileMode) -> ElementNode:
    """过滤整棵文档树（不修改输入）"""
    mode = CompileMode(mode)
    filtered = filter_node(tree, mode)
    if filtered is None:
        return tree.model_copy(update={"children": []})
    return filtered

"""
文档树规范化

接受两种键风格：
- 规范形式: kind / value / children / marks / attributes
- 编辑器 JSON: type / text / content / marks / attrs

输出始终为规范形式的字典，且规范化是幂等的。
"""
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...core.errors import CompileException
from ...core.logging import get_logger
from ...domain.models.document import (
    ElementNode,
    MarkKind,
    MARK_ALIASES,
    NodeKind,
)

logger = get_logger(__name__)

_NODE_KINDS = {kind.value for kind in NodeKind}
_MARK_KINDS = {kind.value for kind in MarkKind}


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _normalize_attributes(raw: Any, where: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise CompileException(f"{where} 的属性必须是对象", details={"attributes": repr(raw)})
    return dict(raw)


def normalize_mark(raw: Any) -> Dict[str, Any]:
    """规范化单个标记"""
    if isinstance(raw, str):
        kind, attributes = raw, {}
    elif isinstance(raw, dict):
        kind = _first_present(raw, "kind", "type")
        attributes = _normalize_attributes(_first_present(raw, "attributes", "attrs"), "标记")
    else:
        raise CompileException("标记格式错误", details={"mark": repr(raw)})

    if not isinstance(kind, str):
        raise CompileException("标记缺少类型", details={"mark": repr(raw)})

    if kind in MARK_ALIASES:
        kind = MARK_ALIASES[kind].value
    if kind not in _MARK_KINDS:
        raise CompileException(f"未知的标记类型: {kind}", details={"mark": kind})

    return {"kind": kind, "attributes": attributes}


def normalize_node(raw: Any) -> Optional[Dict[str, Any]]:
    """规范化单个节点，缺少类型且不是文本的节点返回 None（连同其子节点一起丢弃）"""
    if not isinstance(raw, dict):
        raise CompileException("节点必须是对象", details={"node": repr(raw)[:200]})

    kind = _first_present(raw, "kind", "type")
    value = _first_present(raw, "value", "text")
    children = _first_present(raw, "children", "content")

    if kind is None:
        # 编辑器同步层可能省略文本叶子的 type
        if not isinstance(value, str):
            logger.debug(f"丢弃缺少类型的节点: {repr(raw)[:200]}")
            return None
        kind = NodeKind.TEXT.value

    if isinstance(kind, NodeKind):
        kind = kind.value
    if not isinstance(kind, str) or kind not in _NODE_KINDS:
        raise CompileException(f"未知的节点类型: {kind}", node_kind=str(kind))

    if kind == NodeKind.TEXT.value:
        if not isinstance(value, str):
            raise CompileException("文本节点缺少文本值", node_kind=kind)
        marks = _first_present(raw, "marks") or []
        if not isinstance(marks, list):
            raise CompileException("标记列表格式错误", node_kind=kind)
        return {
            "kind": kind,
            "value": value,
            "marks": [normalize_mark(mark) for mark in marks],
        }

    if children is None:
        children = []
    if not isinstance(children, list):
        raise CompileException("子节点列表格式错误", node_kind=kind)

    normalized_children = []
    for child in children:
        normalized = normalize_node(child)
        if normalized is not None:
            normalized_children.append(normalized)

    return {
        "kind": kind,
        "children": normalized_children,
        "attributes": _normalize_attributes(_first_present(raw, "attributes", "attrs"), kind),
    }


def normalize_tree(raw: Any) -> Dict[str, Any]:
    """规范化整棵文档树

    - 根为列表时包裹进 doc
    - 根不是 doc 时包裹进 doc
    - 空根得到空文档
    """
    if raw is None:
        return {"kind": NodeKind.DOC.value, "children": [], "attributes": {}}

    if isinstance(raw, list):
        raw = {"kind": NodeKind.DOC.value, "children": raw}

    root = normalize_node(raw)
    if root is None:
        return {"kind": NodeKind.DOC.value, "children": [], "attributes": {}}
    if root["kind"] != NodeKind.DOC.value:
        root = {"kind": NodeKind.DOC.value, "children": [root], "attributes": {}}
    return root


def parse_tree(raw: Any) -> ElementNode:
    """规范化并校验为类型化的文档树"""
    normalized = normalize_tree(raw)
    try:
        return ElementNode.model_validate(normalized)
    except ValidationError as e:
        logger.debug(f"文档树校验失败: {e}")
        raise CompileException("文档树结构无效", details={"errors": e.error_count()}) from e


def dump_tree(tree: ElementNode) -> Dict[str, Any]:
    """序列化为可存储的规范化字典"""
    return tree.model_dump(mode="json")

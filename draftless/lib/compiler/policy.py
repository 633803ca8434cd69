"""
标记策略表

(标记类型, 编译模式) -> 动作 的纯函数映射。
"""
from enum import Enum
from typing import Dict, Iterable, Tuple

from ...domain.models.document import CompileMode, MarkKind


class MarkAction(str, Enum):
    """过滤动作"""
    KEEP = "keep"            # 保留标记与文本
    STRIP = "strip"          # 去掉标记，保留文本
    DROP = "drop"            # 丢弃整个文本叶子


_POLICY: Dict[Tuple[MarkKind, CompileMode], MarkAction] = {
    (MarkKind.DELETION, CompileMode.FINAL): MarkAction.DROP,
    (MarkKind.DELETION, CompileMode.ORIGINAL): MarkAction.STRIP,
    (MarkKind.DELETION, CompileMode.REVIEW): MarkAction.KEEP,

    (MarkKind.INSERTION, CompileMode.FINAL): MarkAction.STRIP,
    (MarkKind.INSERTION, CompileMode.ORIGINAL): MarkAction.DROP,
    (MarkKind.INSERTION, CompileMode.REVIEW): MarkAction.KEEP,

    (MarkKind.COMMENT, CompileMode.FINAL): MarkAction.STRIP,
    (MarkKind.COMMENT, CompileMode.ORIGINAL): MarkAction.STRIP,
    (MarkKind.COMMENT, CompileMode.REVIEW): MarkAction.KEEP,
}


def mark_action(kind: MarkKind, mode: CompileMode) -> MarkAction:
    """查询单个标记在给定模式下的动作，格式标记始终保留"""
    return _POLICY.get((MarkKind(kind), CompileMode(mode)), MarkAction.KEEP)


def resolve_edit_state(kinds: Iterable[MarkKind]) -> Iterable[MarkKind]:
    """插入与删除同时出现时以删除为准"""
    kinds = set(kinds)
    if MarkKind.DELETION in kinds and MarkKind.INSERTION in kinds:
        kinds.discard(MarkKind.INSERTION)
    return kinds

"""
文档树模型

文档内容是一棵有序的类型化节点树：容器/原子节点为 ElementNode，
文本叶子为 TextNode，文本叶子上可以携带若干标记（Mark）。
节点按 ``kind`` 字段做标签联合（tagged union）区分。
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class NodeKind(str, Enum):
    """节点类型（取值与编辑器 JSON 中的 type 一致）"""
    DOC = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    CODE_BLOCK = "codeBlock"
    HARD_BREAK = "hardBreak"
    HORIZONTAL_RULE = "horizontalRule"
    TEXT = "text"


# 原子节点：没有子节点，过滤后始终保留
ATOM_KINDS = frozenset({NodeKind.HARD_BREAK, NodeKind.HORIZONTAL_RULE})

# 块级节点：纯文本扁平化时以段落分隔符连接
BLOCK_KINDS = frozenset({
    NodeKind.PARAGRAPH,
    NodeKind.HEADING,
    NodeKind.BLOCKQUOTE,
    NodeKind.BULLET_LIST,
    NodeKind.ORDERED_LIST,
    NodeKind.LIST_ITEM,
    NodeKind.CODE_BLOCK,
    NodeKind.HORIZONTAL_RULE,
})


class MarkKind(str, Enum):
    """标记类型"""
    # 修订/审阅状态
    INSERTION = "insertion"
    DELETION = "deletion"
    COMMENT = "comment"
    # 格式标记
    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    CODE = "code"
    UNDERLINE = "underline"
    LINK = "link"


EDIT_STATE_MARKS = frozenset({MarkKind.INSERTION, MarkKind.DELETION, MarkKind.COMMENT})

# 编辑器使用的标记名称 -> 规范名称
MARK_ALIASES: Dict[str, MarkKind] = {
    "suggestionAdd": MarkKind.INSERTION,
    "suggestionDel": MarkKind.DELETION,
}


class CompileMode(str, Enum):
    """编译模式：决定哪一种修订状态可见"""
    FINAL = "final"
    ORIGINAL = "original"
    REVIEW = "review"


class Mark(BaseModel):
    """文本叶子上的标记"""
    model_config = ConfigDict(frozen=True)

    kind: MarkKind
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @property
    def comment_id(self) -> Optional[str]:
        value = self.attributes.get("id")
        return None if value is None else str(value)

    @property
    def comment_text(self) -> str:
        value = self.attributes.get("text")
        return "" if value is None else str(value)


class TextNode(BaseModel):
    """文本叶子节点"""
    kind: Literal["text"] = "text"
    value: str
    marks: List[Mark] = Field(default_factory=list)

    def mark_kinds(self) -> set:
        return {mark.kind for mark in self.marks}


class ElementNode(BaseModel):
    """容器或原子节点"""
    kind: NodeKind
    children: List["Node"] = Field(default_factory=list)
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: NodeKind) -> NodeKind:
        if v == NodeKind.TEXT:
            raise ValueError("文本节点必须使用 TextNode")
        return v

    @property
    def is_atom(self) -> bool:
        return self.kind in ATOM_KINDS


def _node_tag(value: Any) -> str:
    """根据 kind 字段判定联合类型的分支"""
    if isinstance(value, dict):
        kind = value.get("kind")
    else:
        kind = getattr(value, "kind", None)
    if isinstance(kind, Enum):
        kind = kind.value
    return "text" if kind == NodeKind.TEXT.value else "element"


Node = Annotated[
    Union[
        Annotated[TextNode, Tag("text")],
        Annotated[ElementNode, Tag("element")],
    ],
    Discriminator(_node_tag),
]

ElementNode.model_rebuild()

# 文档树的根始终是 kind=doc 的 ElementNode
DocumentTree = ElementNode


def empty_document() -> ElementNode:
    """空文档"""
    return ElementNode(kind=NodeKind.DOC)

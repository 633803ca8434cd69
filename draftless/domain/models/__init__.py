"""
领域模型
"""
from .document import (
    NodeKind,
    MarkKind,
    CompileMode,
    Mark,
    TextNode,
    ElementNode,
    DocumentTree,
)
from .checkpoint import Checkpoint, CheckpointModel, CheckpointTreeNode, HistoryHead
from .project import FileType, ProjectFile, ProjectFileModel
from .codex import CodexEntity, CodexEntityModel, EntityType
from .weave import MergeStrategy
from .manuscript import DocumentRef, ExportArtifact, ExportFormat

__all__ = [
    "NodeKind",
    "MarkKind",
    "CompileMode",
    "Mark",
    "TextNode",
    "ElementNode",
    "DocumentTree",
    "Checkpoint",
    "CheckpointModel",
    "CheckpointTreeNode",
    "HistoryHead",
    "FileType",
    "ProjectFile",
    "ProjectFileModel",
    "CodexEntity",
    "CodexEntityModel",
    "EntityType",
    "MergeStrategy",
    "DocumentRef",
    "ExportArtifact",
    "ExportFormat",
]

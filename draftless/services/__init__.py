"""
服务层
"""
from .checkpoint import CheckpointService
from .codex import CodexService
from .document import DocumentService
from .manuscript import ManuscriptService
from .weave import WeaveService

__all__ = ["CheckpointService", "CodexService", "DocumentService", "ManuscriptService", "WeaveService"]

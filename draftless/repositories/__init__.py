"""
数据访问层
"""
from .checkpoint import CheckpointRepository
from .codex import CodexRepository
from .project_file import ProjectFileRepository

__all__ = ["CheckpointRepository", "CodexRepository", "ProjectFileRepository"]

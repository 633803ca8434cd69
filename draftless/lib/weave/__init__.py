"""
融合（Weave）提示词构建
"""
from .prompts import build_prompt, TEMPLATES

__all__ = ["build_prompt", "TEMPLATES"]

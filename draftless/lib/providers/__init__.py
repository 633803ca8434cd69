"""
文本生成服务提供者
"""
from .base import BaseProvider
from .openai import OpenAIProvider
from .deepseek import DeepSeekProvider

__all__ = ["BaseProvider", "OpenAIProvider", "DeepSeekProvider"]

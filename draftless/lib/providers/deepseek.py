import logging
from typing import Optional

from ...core.constants import WeaveConstants
from .openai import OpenAIProvider

# 初始化logger
logger = logging.getLogger(__name__)


class DeepSeekProvider(OpenAIProvider):
    """
    DeepSeek API 提供者
    基于OpenAI兼容接口
    """
    name = "deepseek"
    DEFAULT_MODEL = "deepseek-chat"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = "https://api.deepseek.com",
        model_id: Optional[str] = None,
        temperature: float = WeaveConstants.DEFAULT_TEMPERATURE,
        max_tokens: int = WeaveConstants.DEFAULT_MAX_TOKENS,
        timeout: float = WeaveConstants.DEFAULT_TIMEOUT,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            model_id=model_id or self.DEFAULT_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        logger.info(f"DeepSeek provider initialized with base_url: {self.base_url}")

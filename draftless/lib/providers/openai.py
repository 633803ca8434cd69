import time
from typing import Optional

from openai import AsyncOpenAI, APIError, APITimeoutError, RateLimitError

from ...core.constants import WeaveConstants
from ...core.errors import WeaveFailedException
from ...core.logging import StructuredLogger, get_logger
from .base import BaseProvider

# 初始化logger
logger = get_logger(__name__)
external_logger = StructuredLogger("providers")


class OpenAIProvider(BaseProvider):
    """
    Async Provider for OpenAI and compatible APIs using the openai library.
    单次非流式补全，用于融合（weave）请求。
    """
    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model_id: Optional[str] = None,
        temperature: float = WeaveConstants.DEFAULT_TEMPERATURE,
        max_tokens: int = WeaveConstants.DEFAULT_MAX_TOKENS,
        timeout: float = WeaveConstants.DEFAULT_TIMEOUT,
    ):
        if not api_key:
            raise ValueError("API key is required.")
        self.api_key = api_key
        self.base_url = base_url
        self.model_id = model_id or WeaveConstants.DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=timeout,
        )
        logger.info(f"AsyncOpenAI client initialized. Target URL: {self.client.base_url}")

    async def generate(
        self,
        prompt: str,
        model_id: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """执行一次对话补全并返回完整文本"""
        model = model_id or self.model_id
        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=max_tokens or self.max_tokens,
                stream=False,
            )
        except (APITimeoutError, RateLimitError, APIError) as api_error:
            external_logger.log_external_api_call(
                self.name, "chat.completions", time.time() - start_time, success=False, model=model
            )
            logger.error(f"API 错误: {api_error}")
            raise WeaveFailedException(self.name, f"API 错误: {api_error}") from api_error

        external_logger.log_external_api_call(
            self.name, "chat.completions", time.time() - start_time, success=True, model=model
        )

        if not response.choices:
            raise WeaveFailedException(self.name, "响应中没有候选结果")
        content = response.choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise WeaveFailedException(self.name, "响应内容为空")
        return content

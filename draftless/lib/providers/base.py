from abc import ABC, abstractmethod
from typing import Optional


class BaseProvider(ABC):
    """文本生成服务

    只有一个契约：给定提示词返回生成的文本。实现可能失败，
    不保证延迟或确定性。
    """

    name: str = "base"

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model_id: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        根据提示词生成文本。
        失败（网络、配额、响应格式错误）时抛出 WeaveFailedException。
        """
        pass

"""
融合服务 - 当前草稿与历史检查点的 AI 辅助合并

weave 只返回生成结果，从不写入任何状态；只有 accept 会修改文档内容。
"""
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import get_provider
from ..core.logging import StructuredLogger, get_logger, log_operation
from ..domain.models.project import ProjectFile
from ..domain.models.weave import MergeStrategy
from ..lib.compiler import extract_plain_text, tree_from_plain_text
from ..lib.providers.base import BaseProvider
from ..lib.weave import build_prompt
from .checkpoint import CheckpointService
from .document import DocumentService

logger = get_logger(__name__)
business_logger = StructuredLogger("services.weave")


class WeaveService:
    """融合服务"""

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        provider_factory: Callable[[], BaseProvider] = get_provider,
    ):
        self.session = session
        self._provider_factory = provider_factory

    def _documents(self) -> DocumentService:
        return DocumentService(self.session)

    def _checkpoints(self) -> CheckpointService:
        return CheckpointService(self.session)

    async def weave(self, text_a: str, text_b: str, strategy: MergeStrategy) -> str:
        """合并两段文本，结果原样返回

        缺少凭据时在发出任何网络请求前抛出 ServiceNotConfiguredException；
        生成失败抛出 WeaveFailedException。
        """
        strategy = MergeStrategy(strategy)
        provider = self._provider_factory()
        prompt = build_prompt(text_a, text_b, strategy)

        business_logger.log_business_event(
            "weave_requested", strategy=strategy.value,
            text_a_length=len(text_a), text_b_length=len(text_b),
        )
        with log_operation(business_logger, "weave", strategy=strategy.value):
            return await provider.generate(prompt)

    async def weave_with_checkpoint(
        self,
        document_id: str,
        checkpoint_id: str,
        strategy: MergeStrategy,
    ) -> str:
        """以文档当前文本为 A、检查点内容为 B 进行融合"""
        text_a = await self._documents().get_plain_text(document_id)
        checkpoint_tree = await self._checkpoints().restore(document_id, checkpoint_id)
        text_b = extract_plain_text(checkpoint_tree)
        return await self.weave(text_a, text_b, strategy)

    async def accept(self, document_id: str, text: str) -> ProjectFile:
        """把确认后的融合结果写入文档：每个非空行一个段落"""
        tree = tree_from_plain_text(text)
        document = await self._documents().replace_content(document_id, tree)
        business_logger.log_business_event("weave_accepted", "document", document_id)
        return document

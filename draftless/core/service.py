"""
通用服务基类 - 消除服务层重复代码
"""
from abc import ABC, abstractmethod
from typing import Optional, TypeVar, Generic

from .repository import BaseRepository
from .logging import get_logger
from .errors import ValidationException

T = TypeVar('T')
R = TypeVar('R', bound=BaseRepository)


class BaseService(Generic[T, R], ABC):
    """通用服务基类"""

    def __init__(self, repository: R):
        self.repository = repository
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def get_entity_name(self) -> str:
        """获取实体名称（用于错误消息）"""
        pass

    def _validate_id(self, entity_id: Optional[str], field: str = "id") -> str:
        """验证ID不为空"""
        if not entity_id or not str(entity_id).strip():
            raise ValidationException(f"{self.get_entity_name()}ID不能为空", field=field)
        return str(entity_id).strip()

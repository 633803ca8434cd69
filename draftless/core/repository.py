"""
Repository基类 - 提供统一的数据访问接口
"""
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, TypeVar, Generic, Type

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import StorageUnavailableException
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


@asynccontextmanager
async def storage_guard(operation: str):
    """将底层连接错误转换为 StorageUnavailableException"""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(f"持久层不可用 ({operation}): {e}")
        raise StorageUnavailableException(f"持久层不可用: {operation}", operation=operation) from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error(f"数据库连接失效 ({operation}): {e}")
            raise StorageUnavailableException(f"数据库连接失效: {operation}", operation=operation) from e
        raise


class BaseRepository(Generic[T], ABC):
    """Repository基类

    会话由调用方（服务层）管理：这里只 flush，不提交。
    """

    def __init__(self, model_class: Type[T], session: AsyncSession):
        if session is None:
            raise StorageUnavailableException("缺少数据库会话", operation="repository_init")
        self.model_class = model_class
        self._session = session
        self.logger = get_logger(self.__class__.__name__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    def _prepare_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """准备数据用于数据库操作"""
        prepared = {}
        for key, value in data.items():
            if isinstance(value, Enum):
                prepared[key] = value.value
            elif value is not None:
                prepared[key] = value
        return prepared

    # === 基础CRUD操作 ===

    async def create(self, data: Dict[str, Any]) -> T:
        """创建实体"""
        if 'id' not in data or not data['id']:
            data['id'] = str(uuid.uuid4())
        if 'created_at' not in data:
            data['created_at'] = datetime.now()

        entity = self.model_class(**self._prepare_data(data))
        async with storage_guard(f"create {self.get_table_name()}"):
            self._session.add(entity)
            await self._session.flush()
            await self._session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        """通过ID获取实体"""
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        async with storage_guard(f"get {self.get_table_name()}"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity_id: str, data: Dict[str, Any]) -> Optional[T]:
        """更新实体"""
        stmt = update(self.model_class).where(
            self.model_class.id == entity_id
        ).values(**self._prepare_data(data))
        async with storage_guard(f"update {self.get_table_name()}"):
            await self._session.execute(stmt)
            await self._session.flush()
        return await self.get_by_id(entity_id)

    async def delete(self, entity_id: str) -> bool:
        """删除实体"""
        stmt = delete(self.model_class).where(self.model_class.id == entity_id)
        async with storage_guard(f"delete {self.get_table_name()}"):
            result = await self._session.execute(stmt)
            await self._session.flush()
        return result.rowcount > 0

    async def find_by(self, **filters) -> List[T]:
        """根据条件查找实体"""
        stmt = select(self.model_class)
        for key, value in filters.items():
            if hasattr(self.model_class, key):
                if isinstance(value, list):
                    stmt = stmt.where(getattr(self.model_class, key).in_(value))
                else:
                    stmt = stmt.where(getattr(self.model_class, key) == value)

        async with storage_guard(f"find {self.get_table_name()}"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, **filters) -> int:
        """统计实体数量"""
        stmt = select(func.count(self.model_class.id))
        for key, value in filters.items():
            if hasattr(self.model_class, key):
                stmt = stmt.where(getattr(self.model_class, key) == value)

        async with storage_guard(f"count {self.get_table_name()}"):
            result = await self._session.execute(stmt)
        return result.scalar()

    async def commit(self) -> None:
        """提交当前事务"""
        async with storage_guard(f"commit {self.get_table_name()}"):
            await self._session.commit()

    async def rollback(self) -> None:
        """回滚当前事务"""
        await self._session.rollback()

    @abstractmethod
    def get_table_name(self) -> str:
        """获取表名"""
        pass

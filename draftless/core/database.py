"""
数据库连接模块 - 使用 SQLAlchemy ORM（异步）
"""
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from .config import get_settings
from .errors import StorageUnavailableException
from .logging import get_logger

logger = get_logger(__name__)

# SQLAlchemy Base
Base = declarative_base()


class BaseModel(Base):
    """数据库模型基类"""
    __abstract__ = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at = Column(DateTime, server_default=func.now())


class DatabaseManager:
    """数据库管理器 - 使用 SQLAlchemy

    引擎在 initialize() 之前不存在；此时任何会话请求都会得到
    StorageUnavailableException，而不是部分成功。
    """

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        self._database_url = database_url
        self._echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.async_session: Optional[async_sessionmaker] = None

    @property
    def is_ready(self) -> bool:
        """持久层是否已初始化"""
        return self.engine is not None and self.async_session is not None

    def initialize(self) -> None:
        """创建引擎和会话工厂"""
        if self.is_ready:
            return

        settings = get_settings()
        database_url = self._database_url or settings.get_database_url()
        echo = settings.DATABASE_ECHO if self._echo is None else self._echo
        logger.info(f"使用数据库: {database_url.split('@')[-1]}")

        engine_kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url:
                # 内存数据库必须在所有会话间共享同一个连接
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_pre_ping=True,  # 连接前检查连接是否有效
                pool_recycle=1800,   # 30分钟回收连接
            )

        self.engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """获取数据库会话，异常时回滚"""
        if not self.is_ready:
            raise StorageUnavailableException("持久层尚未初始化", operation="open_session")

        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """获取数据库会话（用于依赖注入）"""
        async with self.session_scope() as session:
            yield session

    async def create_tables(self) -> None:
        """创建数据库表"""
        if not self.is_ready:
            self.initialize()
        # 注册所有模型到 Base.metadata
        from ..domain.models import checkpoint, codex, project  # noqa: F401
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"创建数据库表失败: {e}")
            raise StorageUnavailableException(f"创建数据库表失败: {e}", operation="create_tables") from e

    async def drop_tables(self) -> None:
        """删除所有表（仅用于测试）"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """释放连接池"""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.async_session = None


# 全局数据库管理器实例
db_manager = DatabaseManager()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话（全局函数，用于FastAPI依赖注入）"""
    async for session in db_manager.get_session():
        yield session

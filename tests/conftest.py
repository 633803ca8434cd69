"""
pytest配置文件 - 全局fixtures和测试配置
"""
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator
from unittest.mock import Mock, AsyncMock

# 测试环境配置，必须在导入应用之前设置
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "draftless-test-logs"))
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from draftless.core.database import DatabaseManager
from draftless.main import app
from tests.factories import TestDataBuilder

# 测试数据库配置
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_db() -> AsyncGenerator[DatabaseManager, None]:
    """内存数据库（每个测试一份）"""
    manager = DatabaseManager(TEST_DATABASE_URL, echo=False)
    manager.initialize()
    await manager.create_tables()
    yield manager
    await manager.drop_tables()
    await manager.dispose()


@pytest_asyncio.fixture
async def async_session(test_db: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """创建异步数据库会话"""
    async with test_db.session_scope() as session:
        yield session


@pytest.fixture
def mock_db_session() -> Mock:
    """Mock数据库会话"""
    session = Mock(spec=AsyncSession)
    session.add = Mock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    return session


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """测试客户端（不触发生命周期，依赖通过 dependency_overrides 注入）"""
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def live_client() -> Generator[TestClient, None, None]:
    """带生命周期的测试客户端：启动时初始化内存数据库"""
    app.dependency_overrides.clear()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_tree() -> dict:
    """包含删除标记的示例文档"""
    return TestDataBuilder.hello_world_doc()


@pytest.fixture
def mock_logger():
    """Mock日志记录器"""
    return Mock()

"""
应用入口 - 创建并配置FastAPI应用
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import api_router
from .api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from .core.config import get_settings
from .core.constants import APIConstants
from .core.database import db_manager
from .core.errors import register_exception_handlers
from .core.logging import setup_logging, get_logger
from .domain.schemas.base import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 设置日志系统
    setup_logging()
    logger = get_logger("main")
    logger.info("应用启动中...")

    db_manager.initialize()
    await db_manager.create_tables()
    logger.info("应用启动完成")

    yield

    # 关闭时的清理工作
    logger.info("应用关闭中...")
    await db_manager.dispose()


def create_app() -> FastAPI:
    """创建FastAPI应用"""
    settings = get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
        debug=settings.DEBUG
    )

    # 添加中间件
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    # 配置CORS（本地优先应用，前端与后端通常不同源）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time", "Content-Disposition"],
        max_age=APIConstants.CORS_MAX_AGE,
    )

    # 注册错误处理器
    register_exception_handlers(app)

    # 包含API路由
    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {
            "message": f"{settings.APP_NAME} API 正在运行!",
            "docs_url": "/docs"
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(version=__version__, storage_ready=db_manager.is_ready)

    return app


app = create_app()

"""
配置模块 - 提供应用配置和环境变量处理
"""
from functools import lru_cache
from typing import Optional
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import WeaveConstants

# 设置日志记录器
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """应用配置"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # 允许额外字段，避免验证错误
    )

    # 应用设置
    APP_NAME: str = "Draftless"
    APP_DESCRIPTION: str = "本地优先的写作工作室 - 草稿版本与编译引擎"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # 数据库配置
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/draftless.db"
    DATABASE_ECHO: bool = False

    # LLM配置
    LLM_PROVIDER: str = "openai"  # 可选值: "openai", "deepseek", "ollama"
    LLM_MODEL_NAME: Optional[str] = None  # 为空时使用各提供商的默认模型
    OLLAMA_MODEL_NAME: str = "llama3.1"
    LLM_TEMPERATURE: float = WeaveConstants.DEFAULT_TEMPERATURE
    LLM_MAX_TOKENS: int = WeaveConstants.DEFAULT_MAX_TOKENS
    LLM_TIMEOUT: float = WeaveConstants.DEFAULT_TIMEOUT

    # API密钥
    OPENAI_API_KEY: Optional[str] = None
    DEEPSEEK_API_KEY: Optional[str] = None

    # 第三方服务配置
    OPENAI_BASE_URL: Optional[str] = None
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com"
    OLLAMA_BASE_URL: str = "http://localhost:11434"

    def get_database_url(self) -> str:
        """获取数据库连接URL"""
        return self.DATABASE_URL


@lru_cache()
def get_settings() -> Settings:
    """获取应用配置单例"""
    settings = Settings()
    logger.info(f"加载配置: 环境={settings.ENVIRONMENT}, LLM提供商={settings.LLM_PROVIDER}")
    return settings


def get_provider(settings: Optional[Settings] = None):
    """
    根据配置获取文本生成Provider

    缺少凭据时在任何网络调用之前抛出 ServiceNotConfiguredException。
    """
    from .errors import ServiceNotConfiguredException

    settings = settings or get_settings()
    provider_type = settings.LLM_PROVIDER.lower()
    common = {
        "temperature": settings.LLM_TEMPERATURE,
        "max_tokens": settings.LLM_MAX_TOKENS,
        "timeout": settings.LLM_TIMEOUT,
    }

    if provider_type == "openai":
        if not settings.OPENAI_API_KEY:
            raise ServiceNotConfiguredException(provider_type, config_key="OPENAI_API_KEY")
        from ..lib.providers.openai import OpenAIProvider
        return OpenAIProvider(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model_id=settings.LLM_MODEL_NAME,
            **common,
        )
    elif provider_type == "deepseek":
        if not settings.DEEPSEEK_API_KEY:
            raise ServiceNotConfiguredException(provider_type, config_key="DEEPSEEK_API_KEY")
        from ..lib.providers.deepseek import DeepSeekProvider
        return DeepSeekProvider(
            api_key=settings.DEEPSEEK_API_KEY,
            base_url=settings.DEEPSEEK_BASE_URL,
            model_id=settings.LLM_MODEL_NAME,
            **common,
        )
    elif provider_type == "ollama":
        # Ollama 提供 OpenAI 兼容接口，本地无需真实密钥
        from ..lib.providers.openai import OpenAIProvider
        return OpenAIProvider(
            api_key="ollama-local",
            base_url=f"{settings.OLLAMA_BASE_URL.rstrip('/')}/v1",
            model_id=settings.LLM_MODEL_NAME or settings.OLLAMA_MODEL_NAME,
            **common,
        )
    else:
        raise ServiceNotConfiguredException(provider_type, message=f"不支持的LLM提供商类型: {provider_type}")

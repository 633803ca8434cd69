"""
异常模块 - 重新导出所有异常类以便于导入
"""

from .errors import (
    # 基础异常
    BaseAppException,
    BusinessException,
    ValidationException,
    NotFoundException,
    ServiceException,
    ExternalServiceException,

    # 业务特定异常
    StorageUnavailableException,
    CheckpointNotFoundException,
    DocumentNotFoundException,
    CodexEntityNotFoundException,
    CompileException,
    ServiceNotConfiguredException,
    WeaveFailedException,
)

# 简短别名，与错误分类名称保持一致
StorageUnavailable = StorageUnavailableException
NotFound = NotFoundException
CompileError = CompileException
ServiceNotConfigured = ServiceNotConfiguredException
WeaveFailed = WeaveFailedException

__all__ = [
    # 基础异常
    "BaseAppException",
    "BusinessException",
    "ValidationException",
    "NotFoundException",
    "ServiceException",
    "ExternalServiceException",

    # 业务特定异常
    "StorageUnavailableException",
    "CheckpointNotFoundException",
    "DocumentNotFoundException",
    "CodexEntityNotFoundException",
    "CompileException",
    "ServiceNotConfiguredException",
    "WeaveFailedException",

    # 别名
    "StorageUnavailable",
    "NotFound",
    "CompileError",
    "ServiceNotConfigured",
    "WeaveFailed",
]

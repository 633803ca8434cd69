"""
错误处理模块 - 定义自定义异常和错误处理器
"""
from datetime import datetime
from typing import Dict, Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .constants import APIConstants


class BaseAppException(Exception):
    """应用基础异常类"""
    def __init__(
        self,
        message: str,
        status_code: int = APIConstants.HTTP_INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class BusinessException(BaseAppException):
    """业务逻辑异常"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, APIConstants.HTTP_BAD_REQUEST, details)


class ValidationException(BusinessException):
    """数据验证异常"""
    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        if field:
            details = details or {}
            details["field"] = field
        super().__init__(message, details)


class NotFoundException(BaseAppException):
    """资源未找到异常"""
    def __init__(self, message: str = "资源不存在", resource_type: Optional[str] = None, resource_id: Optional[str] = None):
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, APIConstants.HTTP_NOT_FOUND, details)


class ServiceException(BaseAppException):
    """服务异常"""
    def __init__(self, message: str = "服务异常", details: Optional[Dict[str, Any]] = None,
                 status_code: int = APIConstants.HTTP_INTERNAL_ERROR):
        super().__init__(message, status_code, details)


class ExternalServiceException(ServiceException):
    """外部服务异常"""
    def __init__(self, service_name: str, message: str = "外部服务异常", details: Optional[Dict[str, Any]] = None,
                 status_code: int = APIConstants.HTTP_BAD_GATEWAY):
        details = details or {}
        details["service_name"] = service_name
        super().__init__(message, details, status_code)


# 业务特定异常

class StorageUnavailableException(ServiceException):
    """持久层不可用（未初始化或无法连接），整个操作必须中止"""
    def __init__(self, message: str = "存储不可用", operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details, APIConstants.HTTP_SERVICE_UNAVAILABLE)


class CheckpointNotFoundException(NotFoundException):
    """检查点未找到异常"""
    def __init__(self, checkpoint_id: str):
        super().__init__(f"检查点 {checkpoint_id} 不存在", "checkpoint", checkpoint_id)


class DocumentNotFoundException(NotFoundException):
    """文档未找到异常"""
    def __init__(self, document_id: str):
        super().__init__(f"文档 {document_id} 不存在", "document", document_id)


class CodexEntityNotFoundException(NotFoundException):
    """设定条目未找到异常"""
    def __init__(self, entity_id: str):
        super().__init__(f"设定条目 {entity_id} 不存在", "codex_entity", entity_id)


class CompileException(ServiceException):
    """文档编译异常（按文档在本地恢复，不会中止整部书稿的编译）"""
    def __init__(self, message: str = "文档编译失败", node_kind: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        if node_kind:
            details["node_kind"] = node_kind
        super().__init__(message, details)


class ServiceNotConfiguredException(ExternalServiceException):
    """文本生成服务未配置（缺少凭据），在任何网络调用前抛出"""
    def __init__(self, service_name: str, message: Optional[str] = None, config_key: Optional[str] = None):
        details = {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(
            service_name,
            message or f"AI服务 {service_name} 未配置，请在设置中添加API密钥",
            details,
            APIConstants.HTTP_SERVICE_UNAVAILABLE,
        )


class WeaveFailedException(ExternalServiceException):
    """融合失败（网络、配额或响应格式错误），不会修改任何文档状态"""
    def __init__(self, service_name: str, message: str = "融合生成失败", details: Optional[Dict[str, Any]] = None):
        super().__init__(service_name, message, details)


# 异常处理器

def _error_body(request: Request, code: int, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body = {
        "success": False,
        "code": code,
        "message": message,
        "timestamp": datetime.now().isoformat(),
        "path": str(request.url.path)
    }
    if details is not None:
        body["details"] = details
    return body


async def base_exception_handler(request: Request, exc: BaseAppException):
    """基础异常处理器"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.message, exc.details)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """验证异常处理器"""
    return JSONResponse(
        status_code=APIConstants.HTTP_BAD_REQUEST,
        content=_error_body(
            request,
            APIConstants.HTTP_BAD_REQUEST,
            "请求参数验证失败",
            {"validation_errors": [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
                for err in exc.errors()
            ]}
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP异常处理器"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.detail)
    )


def register_exception_handlers(app):
    """注册异常处理器"""
    app.add_exception_handler(BaseAppException, base_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

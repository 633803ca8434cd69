"""
融合API路由
"""
from fastapi import APIRouter, Depends

from ...domain.models.project import ProjectFile
from ...domain.schemas.base import ApiResponse
from ...domain.schemas.weave import CheckpointWeaveRequest, WeaveAccept, WeaveRequest, WeaveResult
from ...services.weave import WeaveService
from ..deps import api_response, get_weave_service

router = APIRouter(prefix="/api", tags=["weave"])


@router.post("/weave", response_model=ApiResponse[WeaveResult])
async def weave_texts(
    weave_request: WeaveRequest,
    weave_service: WeaveService = Depends(get_weave_service),
):
    """融合两段文本；结果不会写入任何文档"""
    text = await weave_service.weave(weave_request.text_a, weave_request.text_b, weave_request.strategy)
    return api_response(WeaveResult(strategy=weave_request.strategy, text=text))


@router.post("/documents/{document_id}/weave", response_model=ApiResponse[WeaveResult])
async def weave_with_checkpoint(
    document_id: str,
    weave_request: CheckpointWeaveRequest,
    weave_service: WeaveService = Depends(get_weave_service),
):
    """以文档当前内容与检查点进行融合；结果需调用 accept 才会写入"""
    text = await weave_service.weave_with_checkpoint(
        document_id, weave_request.checkpoint_id, weave_request.strategy
    )
    return api_response(WeaveResult(strategy=weave_request.strategy, text=text))


@router.post("/documents/{document_id}/weave/accept", response_model=ApiResponse[ProjectFile])
async def accept_weave(
    document_id: str,
    weave_accept: WeaveAccept,
    weave_service: WeaveService = Depends(get_weave_service),
):
    """确认融合结果并写入文档"""
    document = await weave_service.accept(document_id, weave_accept.text)
    return api_response(document, message="融合结果已写入文档")

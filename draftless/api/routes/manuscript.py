"""
书稿导出API路由
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...domain.schemas.base import ApiResponse
from ...domain.schemas.compile import AssembleRequest, CompileResult, ManuscriptRequest
from ...services.manuscript import ManuscriptService
from ..deps import api_response, get_manuscript_service

router = APIRouter(prefix="/api", tags=["manuscript"])


@router.post("/projects/{project_id}/manuscript")
async def export_manuscript(
    project_id: str,
    manuscript_request: ManuscriptRequest,
    manuscript_service: ManuscriptService = Depends(get_manuscript_service),
):
    """编译项目全部章节并以文件形式下载"""
    artifact = await manuscript_service.assemble_project(
        project_id, manuscript_request.mode, manuscript_request.format
    )
    return Response(
        content=artifact.content.encode("utf-8"),
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(artifact.filename)}",
        },
    )


@router.post("/manuscripts/assemble", response_model=ApiResponse[CompileResult])
async def assemble_manuscript(
    assemble_request: AssembleRequest,
    manuscript_service: ManuscriptService = Depends(get_manuscript_service),
):
    """按给定顺序编译一组文档为 HTML 文档"""
    html = await manuscript_service.assemble(assemble_request.documents, assemble_request.mode)
    return api_response(CompileResult(mode=assemble_request.mode, html=html))

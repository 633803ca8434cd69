"""
设定集API路由
"""
from typing import List

from fastapi import APIRouter, Depends, status

from ...core.constants import APIConstants
from ...domain.models.codex import CodexEntity
from ...domain.schemas.base import ApiResponse
from ...domain.schemas.codex import (
    CodexEntityCreate,
    CodexEntityDeleted,
    CodexEntityUpdate,
    CodexScanRequest,
    CodexScanResult,
)
from ...services.codex import CodexService
from ..deps import api_response, get_codex_service

router = APIRouter(prefix="/api/projects/{project_id}/codex", tags=["codex"])


@router.get("", response_model=ApiResponse[List[CodexEntity]])
async def list_entities(
    project_id: str,
    codex_service: CodexService = Depends(get_codex_service),
):
    """列出项目的设定条目"""
    return api_response(await codex_service.get_all(project_id))


@router.post("", response_model=ApiResponse[CodexEntity], status_code=status.HTTP_201_CREATED)
async def add_entity(
    project_id: str,
    entity_create: CodexEntityCreate,
    codex_service: CodexService = Depends(get_codex_service),
):
    """新增设定条目"""
    entity = await codex_service.add(
        project_id,
        name=entity_create.name,
        entity_type=entity_create.entity_type,
        description=entity_create.description,
        color=entity_create.color,
    )
    return api_response(entity, code=APIConstants.HTTP_CREATED, message="设定条目已创建")


@router.post("/scan", response_model=ApiResponse[CodexScanResult])
async def scan_text(
    project_id: str,
    scan_request: CodexScanRequest,
    codex_service: CodexService = Depends(get_codex_service),
):
    """
    查找文本中提及的设定条目

    名称匹配不区分大小写；给出 document_id 时扫描该文档的纯文本。
    """
    if scan_request.document_id is not None:
        matches = await codex_service.scan_document(project_id, scan_request.document_id)
    else:
        matches = await codex_service.scan(project_id, scan_request.text)
    return api_response(CodexScanResult(matches=matches))


@router.get("/{entity_id}", response_model=ApiResponse[CodexEntity])
async def get_entity(
    project_id: str,
    entity_id: str,
    codex_service: CodexService = Depends(get_codex_service),
):
    return api_response(await codex_service.get(project_id, entity_id))


@router.patch("/{entity_id}", response_model=ApiResponse[CodexEntity])
async def update_entity(
    project_id: str,
    entity_id: str,
    entity_update: CodexEntityUpdate,
    codex_service: CodexService = Depends(get_codex_service),
):
    """部分更新设定条目"""
    entity = await codex_service.update(project_id, entity_id, **entity_update.model_dump(exclude_none=True))
    return api_response(entity, message="设定条目已更新")


@router.delete("/{entity_id}", response_model=ApiResponse[CodexEntityDeleted])
async def delete_entity(
    project_id: str,
    entity_id: str,
    codex_service: CodexService = Depends(get_codex_service),
):
    """删除设定条目（不存在时 deleted=false）"""
    deleted = await codex_service.delete(project_id, entity_id)
    return api_response(CodexEntityDeleted(deleted=deleted))

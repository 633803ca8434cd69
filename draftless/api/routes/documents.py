"""
文档API路由
"""
from typing import List

from fastapi import APIRouter, Depends, status

from ...core.constants import APIConstants
from ...domain.models.project import ProjectFile
from ...domain.schemas.base import ApiResponse
from ...domain.schemas.compile import CompileRequest, CompileResult, PlainTextResult
from ...domain.schemas.document import (
    DocumentContentUpdate,
    DocumentCreate,
    DocumentDeleted,
    DocumentReorder,
    DocumentUpdate,
)
from ...lib.compiler import compile_document
from ...services.document import DocumentService
from ..deps import api_response, get_document_service

router = APIRouter(prefix="/api", tags=["documents"])


@router.post("/projects/{project_id}/documents", response_model=ApiResponse[ProjectFile],
             status_code=status.HTTP_201_CREATED)
async def create_document(
    project_id: str,
    document_create: DocumentCreate,
    document_service: DocumentService = Depends(get_document_service),
):
    """创建章节、笔记或文件夹"""
    document = await document_service.create_file(
        project_id=project_id,
        title=document_create.title,
        file_type=document_create.file_type,
        order=document_create.order,
        content=document_create.content,
    )
    return api_response(document, code=APIConstants.HTTP_CREATED, message="文档已创建")


@router.get("/projects/{project_id}/documents", response_model=ApiResponse[List[ProjectFile]])
async def list_documents(
    project_id: str,
    document_service: DocumentService = Depends(get_document_service),
):
    """列出项目文件（按 order 排序）"""
    return api_response(await document_service.list_files(project_id))


@router.put("/projects/{project_id}/documents/order", response_model=ApiResponse[List[ProjectFile]])
async def reorder_documents(
    project_id: str,
    reorder: DocumentReorder,
    document_service: DocumentService = Depends(get_document_service),
):
    """按给定顺序重排项目文件"""
    files = await document_service.reorder_files(project_id, reorder.file_ids)
    return api_response(files, message="顺序已更新")


@router.get("/documents/{document_id}", response_model=ApiResponse[ProjectFile])
async def get_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
):
    """获取文档（含内容）"""
    return api_response(await document_service.get_file(document_id))


@router.patch("/documents/{document_id}", response_model=ApiResponse[ProjectFile])
async def update_document(
    document_id: str,
    document_update: DocumentUpdate,
    document_service: DocumentService = Depends(get_document_service),
):
    """重命名或移动项目文件"""
    document = await document_service.update_file(
        document_id, title=document_update.title, order=document_update.order
    )
    return api_response(document, message="文档已更新")


@router.delete("/documents/{document_id}", response_model=ApiResponse[DocumentDeleted])
async def delete_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
):
    """删除项目文件及其检查点历史（不存在时 deleted=false）"""
    deleted = await document_service.delete_file(document_id)
    return api_response(DocumentDeleted(deleted=deleted))


@router.put("/documents/{document_id}/content", response_model=ApiResponse[ProjectFile])
async def replace_document_content(
    document_id: str,
    content_update: DocumentContentUpdate,
    document_service: DocumentService = Depends(get_document_service),
):
    """替换文档内容"""
    return api_response(await document_service.replace_content(document_id, content_update.content))


@router.get("/documents/{document_id}/text", response_model=ApiResponse[PlainTextResult])
async def get_document_text(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
):
    """获取文档纯文本"""
    text = await document_service.get_plain_text(document_id)
    return api_response(PlainTextResult(document_id=document_id, text=text))


@router.post("/documents/{document_id}/compile", response_model=ApiResponse[CompileResult])
async def compile_document_route(
    document_id: str,
    compile_request: CompileRequest,
    document_service: DocumentService = Depends(get_document_service),
):
    """
    按编译模式编译文档

    请求中带 content 时编译该内容，否则编译文档当前内容。
    """
    content = compile_request.content
    if content is None:
        content = await document_service.get_content(document_id)
    html = compile_document(content, compile_request.mode)
    return api_response(CompileResult(mode=compile_request.mode, html=html))

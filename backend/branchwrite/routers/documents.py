"""
Documents Router / 文档路由

提供书籍内文档的创建、列表、正文读写与删除端点。
"""

from typing import List

from fastapi import APIRouter, Depends

from branchwrite.dependencies import get_store
from branchwrite.schemas.book import DocumentConfig, DocumentCreate
from branchwrite.schemas.project import ContentUpdate
from branchwrite.store import BranchWriteStore
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/books/{book_id}/documents", tags=["documents"])


@router.get("", response_model=List[DocumentConfig])
async def list_documents(book_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    列出书籍的文档

    Args:
        book_id: 书籍ID

    Returns:
        文档列表，保持书籍中记录的顺序
    """
    return await store.list_documents(book_id)


@router.post("", response_model=DocumentConfig)
async def create_document(book_id: str, payload: DocumentCreate, store: BranchWriteStore = Depends(get_store)):
    """
    在书籍末尾创建新文档

    Args:
        book_id: 书籍ID
        payload: 文档创建请求

    Returns:
        新文档元数据
    """
    document = await store.create_document(book_id, payload.title, payload.doc_type)
    logger.info(f"Created document {document.id} in book {book_id} via API")
    return document


@router.get("/{document_id}/content")
async def load_document(book_id: str, document_id: str, store: BranchWriteStore = Depends(get_store)):
    content = await store.load_document(book_id, document_id)
    return {"document_id": document_id, "content": content}


@router.put("/{document_id}/content")
async def save_document(
    book_id: str,
    document_id: str,
    payload: ContentUpdate,
    store: BranchWriteStore = Depends(get_store),
):
    """
    保存文档正文并刷新字数统计

    Args:
        book_id: 书籍ID
        document_id: 文档ID
        payload: 新正文

    Returns:
        保存结果；metadata 为空表示文档缺少元数据文件
    """
    document = await store.save_document(book_id, document_id, payload.content)
    return {
        "success": True,
        "metadata": document.model_dump(mode="json") if document else None,
    }


@router.delete("/{document_id}")
async def delete_document(book_id: str, document_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    删除文档并从书籍中移除

    Args:
        book_id: 书籍ID
        document_id: 文档ID

    Returns:
        删除结果
    """
    await store.delete_document(book_id, document_id)
    return {"success": True, "message": f"Document {document_id} deleted"}

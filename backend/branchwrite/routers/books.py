"""
Books Router / 书籍路由

提供书籍的 CRUD 端点以及当前文档指针的设置。
"""

from typing import List

from fastapi import APIRouter, Depends

from branchwrite.dependencies import get_store
from branchwrite.exceptions import ValidationError
from branchwrite.schemas.book import BookConfig, BookCreate, BookData, CurrentDocumentUpdate
from branchwrite.store import BranchWriteStore
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=List[BookConfig])
async def list_books(store: BranchWriteStore = Depends(get_store)):
    """
    列出所有书籍

    Returns:
        书籍配置列表，按最后修改时间倒序
    """
    return await store.list_books()


@router.post("", response_model=BookData)
async def create_book(payload: BookCreate, store: BranchWriteStore = Depends(get_store)):
    """
    创建新书籍

    Args:
        payload: 书籍创建请求

    Returns:
        新书籍数据（无文档）
    """
    book = await store.create_book(payload.name, payload.description, payload.author, payload.genre)
    logger.info(f"Created book {book.config.id} via API")
    return book


@router.get("/{book_id}", response_model=BookData)
async def get_book(book_id: str, store: BranchWriteStore = Depends(get_store)):
    return await store.load_book(book_id)


@router.put("/{book_id}", response_model=BookData)
async def save_book(book_id: str, book: BookData, store: BranchWriteStore = Depends(get_store)):
    if book.config.id != book_id:
        raise ValidationError(f"Book id mismatch: {book.config.id} != {book_id}")
    await store.save_book(book)
    return book


@router.delete("/{book_id}")
async def delete_book(book_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    删除书籍及其全部文档（不存在时同样返回成功）

    Args:
        book_id: 书籍ID

    Returns:
        删除结果
    """
    await store.delete_book(book_id)
    return {"success": True, "message": f"Book {book_id} deleted"}


@router.put("/{book_id}/current-document", response_model=BookData)
async def set_current_document(
    book_id: str,
    payload: CurrentDocumentUpdate,
    store: BranchWriteStore = Depends(get_store),
):
    """
    设置（或清除）当前文档

    Args:
        book_id: 书籍ID
        payload: 文档ID，为空表示清除

    Returns:
        更新后的书籍数据
    """
    return await store.set_current_document(book_id, payload.document_id)

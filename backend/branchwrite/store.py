# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  存储门面 - 进程内唯一的存储句柄，所有操作都在同一把锁下串行执行
  Store facade - the per-process storage handle; every operation runs serialized under one lock.

设计原则 / Design Principles:
  每个操作都是 加载 -> 修改 -> 保存，不在调用之间缓存实体。
  Every operation is load -> mutate -> save; no entity is cached between calls.
"""

from pathlib import Path
from typing import Dict, List, Optional

from branchwrite.config import config_section
from branchwrite.schemas.book import BookConfig, BookData, DocumentConfig
from branchwrite.schemas.project import (
    CommitInfo,
    DiffResult,
    ProjectConfig,
    ProjectData,
    ProjectStats,
)
from branchwrite.services import versioning
from branchwrite.services.export import ExportWriter
from branchwrite.storage import BookStorage, DocumentStorage, ProjectStorage
from branchwrite.storage.file_lock import StoreLock

_storage_cfg = config_section("storage")
LOCK_TIMEOUT = float(_storage_cfg.get("lock_timeout", 30))


class BranchWriteStore:
    """
    存储门面

    Store facade owning the project, book and document storages, the export
    writer and the lock that serializes them.

    Attributes:
        projects (ProjectStorage): 项目存储 / Project storage
        books (BookStorage): 书籍存储 / Book storage
        documents (DocumentStorage): 文档存储 / Document storage
        exporter (ExportWriter): 导出器 / Export writer
        lock (StoreLock): 存储锁 / Store lock
    """

    def __init__(self, data_dir: Optional[str] = None, lock_timeout: Optional[float] = LOCK_TIMEOUT):
        self.projects = ProjectStorage(data_dir)
        self.books = BookStorage(data_dir)
        self.documents = DocumentStorage(data_dir)
        self.exporter = ExportWriter(self.projects)
        self.lock = StoreLock(timeout=lock_timeout)

    @property
    def data_dir(self) -> Path:
        return self.projects.data_dir

    # ----- projects -----

    async def create_project(self, name: str, description: str = "", author: str = "") -> ProjectData:
        async with self.lock.hold("create_project"):
            return await self.projects.create_project(name, description, author)

    async def save_project(self, project: ProjectData) -> None:
        async with self.lock.hold("save_project"):
            await self.projects.save_project(project)

    async def load_project(self, project_id: str) -> ProjectData:
        async with self.lock.hold("load_project"):
            return await self.projects.load_project(project_id)

    async def list_projects(self) -> List[ProjectConfig]:
        async with self.lock.hold("list_projects"):
            return await self.projects.list_projects()

    async def delete_project(self, project_id: str) -> None:
        async with self.lock.hold("delete_project"):
            await self.projects.delete_project(project_id)

    async def export_project(self, project_id: str, destination: str) -> Path:
        async with self.lock.hold("export_project"):
            return await self.exporter.export_project(project_id, destination)

    async def get_project_stats(self, project_id: str) -> ProjectStats:
        async with self.lock.hold("get_project_stats"):
            return await self.projects.get_project_stats(project_id)

    async def update_project_content(self, project_id: str, content: str) -> ProjectData:
        async with self.lock.hold("update_project_content"):
            return await self.projects.update_content(project_id, content)

    async def create_commit(
        self,
        project_id: str,
        message: Optional[str] = None,
        is_auto_commit: bool = False,
    ) -> CommitInfo:
        async with self.lock.hold("create_commit"):
            return await self.projects.create_commit(project_id, message, is_auto_commit)

    async def checkout_commit(self, project_id: str, commit_id: str) -> str:
        async with self.lock.hold("checkout_commit"):
            return await self.projects.checkout(project_id, commit_id)

    async def rollback_project(self, project_id: str, commit_id: str) -> ProjectData:
        async with self.lock.hold("rollback_project"):
            return await self.projects.rollback(project_id, commit_id)

    async def diff_commits(self, project_id: str, from_commit: str, to_commit: str) -> DiffResult:
        async with self.lock.hold("diff_commits"):
            return await self.projects.diff_commits(project_id, from_commit, to_commit)

    async def prune_snapshots(self, project_id: str) -> List[str]:
        async with self.lock.hold("prune_snapshots"):
            return await self.projects.prune_snapshots(project_id)

    async def get_version_status(self, project_id: str) -> Dict[str, bool]:
        """
        版本状态

        Whether the body has unsaved changes and whether enough words were
        added to warrant an auto commit.
        """
        async with self.lock.hold("get_version_status"):
            project = await self.projects.load_project(project_id)
        return {
            "has_unsaved_changes": versioning.has_unsaved_changes(project),
            "should_auto_commit": versioning.should_auto_commit(project),
        }

    # ----- books -----

    async def create_book(
        self,
        name: str,
        description: str = "",
        author: str = "",
        genre: str = "",
    ) -> BookData:
        async with self.lock.hold("create_book"):
            return await self.books.create_book(name, description, author, genre)

    async def save_book(self, book: BookData) -> None:
        async with self.lock.hold("save_book"):
            await self.books.save_book(book)

    async def load_book(self, book_id: str) -> BookData:
        async with self.lock.hold("load_book"):
            return await self.books.load_book(book_id)

    async def list_books(self) -> List[BookConfig]:
        async with self.lock.hold("list_books"):
            return await self.books.list_books()

    async def delete_book(self, book_id: str) -> None:
        async with self.lock.hold("delete_book"):
            await self.books.delete_book(book_id)

    async def set_current_document(self, book_id: str, document_id: Optional[str]) -> BookData:
        async with self.lock.hold("set_current_document"):
            return await self.books.set_current_document(book_id, document_id)

    # ----- documents -----

    async def create_document(self, book_id: str, title: str, doc_type: str = "chapter") -> DocumentConfig:
        async with self.lock.hold("create_document"):
            return await self.documents.create_document(book_id, title, doc_type)

    async def load_document(self, book_id: str, document_id: str) -> str:
        async with self.lock.hold("load_document"):
            return await self.documents.load_content(book_id, document_id)

    async def save_document(self, book_id: str, document_id: str, content: str) -> Optional[DocumentConfig]:
        async with self.lock.hold("save_document"):
            return await self.documents.save_content(book_id, document_id, content)

    async def list_documents(self, book_id: str) -> List[DocumentConfig]:
        async with self.lock.hold("list_documents"):
            return await self.documents.list_documents(book_id)

    async def delete_document(self, book_id: str, document_id: str) -> None:
        async with self.lock.hold("delete_document"):
            await self.documents.delete_document(book_id, document_id)

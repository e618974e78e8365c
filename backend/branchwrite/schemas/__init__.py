"""
Pydantic Data Models / Pydantic 数据模型
Define data structures for storage files and the HTTP boundary / 定义存储文件与接口使用的数据结构
"""

from .project import (
    CommitCreate,
    CommitInfo,
    ContentUpdate,
    DiffChange,
    DiffResult,
    DocumentMetadata,
    ExportRequest,
    ProjectConfig,
    ProjectCreate,
    ProjectData,
    ProjectSettings,
    ProjectStats,
)
from .book import (
    BookConfig,
    BookCreate,
    BookData,
    BookSettings,
    CurrentDocumentUpdate,
    DocumentConfig,
    DocumentCreate,
)

__all__ = [
    "CommitCreate",
    "CommitInfo",
    "ContentUpdate",
    "DiffChange",
    "DiffResult",
    "DocumentMetadata",
    "ExportRequest",
    "ProjectConfig",
    "ProjectCreate",
    "ProjectData",
    "ProjectSettings",
    "ProjectStats",
    "BookConfig",
    "BookCreate",
    "BookData",
    "BookSettings",
    "CurrentDocumentUpdate",
    "DocumentConfig",
    "DocumentCreate",
]

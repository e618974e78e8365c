"""
Storage Module / 存储模块
File-based storage operations for projects, books and documents
基于文件的存储操作（项目、书籍、文档）
"""

from .projects import ProjectStorage
from .books import BookStorage
from .documents import DocumentStorage

__all__ = [
    "ProjectStorage",
    "BookStorage",
    "DocumentStorage",
]

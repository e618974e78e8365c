# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  应用级异常层次 - 定义存储层异常的完整继承树
  Application-level Exception Hierarchy - Storage error definitions.
"""


class BranchWriteError(Exception):
    """
    BranchWrite 业务错误的基类

    Base exception for all BranchWrite business errors.

    边界层（HTTP 路由）把所有子类转换成可读的错误字符串。
    The boundary layer converts every subclass into a readable message string.
    """


class StorageError(BranchWriteError):
    """
    存储操作失败异常

    Raised when a storage operation fails and no more specific kind applies
    (e.g. the store lock could not be acquired in time).
    """


class EntityNotFoundError(StorageError):
    """
    实体不存在

    Raised when a project, book or document id has no backing directory.

    Attributes:
        kind: 实体类型 / Entity kind ("project", "book", "document", "commit")
        entity_id: 请求的 id / Requested id
    """

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")


class StorageIOError(StorageError):
    """
    文件系统读写失败

    Raised when directory or file creation, read or write fails at the OS level,
    including a required artifact that is missing from an existing entity.
    """


class StorageParseError(StorageError):
    """
    JSON 解析失败

    Raised when a structured file exists but does not deserialize to its
    expected shape.

    抛出时机：
    - JSON 语法错误 / Invalid JSON syntax
    - 字段缺失或类型不符 / Missing fields or wrong types
    """


class ValidationError(BranchWriteError):
    """
    数据验证失败异常

    Raised when input validation fails beyond Pydantic checks.

    抛出时机：
    - 不安全的实体 id / Unsafe entity id (path traversal)
    - 导出目标不可用 / Unusable export destination

    Note: Pydantic ValidationError 由框架自动处理，不需要手动抛出此异常。
    """

# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  路径安全工具 - 在实体 id 成为路径片段之前进行校验
  Path Safety Utilities - Validate entity ids before they become path segments.
"""

import re
from pathlib import Path

from branchwrite.exceptions import ValidationError

# Ids are generated as UUID4 strings; imported commit ids may carry a timestamp
# prefix. Allow word characters, hyphens and dots (not leading).
# id 由 UUID4 生成；允许单词字符、连字符、点（不在开头）
_SAFE_ID_RE = re.compile(r"^[\w][\w\-\.]*$", re.UNICODE)


def validate_entity_id(raw: str, kind: str = "entity", max_length: int = 128) -> str:
    """
    校验实体 id 可安全用作目录名

    Validate that an id can be used as a single directory or file name.

    Unlike a sanitizer this never rewrites the id: the id is the directory
    name, so a rewritten id would silently address a different entity.

    Args:
        raw: 原始 id / Raw id
        kind: 实体类型（用于错误信息）/ Entity kind for the error message
        max_length: 最大长度 / Maximum length

    Returns:
        原样返回的 id / The id, unchanged

    Raises:
        ValidationError: id 为空、过长或包含路径字符 / Empty, too long or path-like id

    Example:
        >>> validate_entity_id("3f2b9c1e-7d1a-4c55-9a7e-0c6f4c1d2e3f")
        '3f2b9c1e-7d1a-4c55-9a7e-0c6f4c1d2e3f'
        >>> validate_entity_id("../etc")
        # Raises ValidationError
    """
    if not raw or not isinstance(raw, str):
        raise ValidationError(f"{kind} id must be a non-empty string")
    if len(raw) > max_length:
        raise ValidationError(f"{kind} id is too long: {raw[:16]}...")
    if not _SAFE_ID_RE.match(raw):
        raise ValidationError(f"Invalid {kind} id: {raw!r}")
    return raw


def validate_path_within(child: Path, parent: Path) -> Path:
    """
    验证child路径在parent目录内

    Validate that *child* resolves to a path inside *parent*.

    Args:
        child: 子路径 / Child path
        parent: 父路径 / Parent path

    Returns:
        解析后的子路径 / Resolved child path

    Raises:
        ValidationError: 如果子路径逃逸出父目录 / If the child escapes the parent directory
    """
    resolved_parent = parent.resolve()
    resolved_child = child.resolve()

    if resolved_child != resolved_parent and resolved_parent not in resolved_child.parents:
        raise ValidationError(f"Path escapes data directory: {child}")

    return resolved_child

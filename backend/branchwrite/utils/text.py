# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  文本统计工具 - 字数、字符数、行数与内容哈希
  Text statistics utilities - word, character and line counts plus content hashing.
"""

import hashlib


def normalize_newlines(text: str | None) -> str:
    """
    规范化换行符（\\r\\n 和 \\r 转换为 \\n）

    Normalize \\\\r\\\\n and \\\\r to \\\\n. Accepts *None* safely.
    """
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


def count_words(text: str | None) -> int:
    """
    统计以空白分隔的非空词数

    Count whitespace-delimited, non-empty tokens.

    Example:
        >>> count_words("hello   world\\n\\nfoo")
        3
    """
    return len((text or "").split())


def count_characters(text: str | None) -> int:
    """
    原始长度：UTF-8 编码后的字节数

    Raw length of the text as stored: the number of UTF-8 bytes, so "é"
    counts 2 and "章" counts 3.
    """
    return len((text or "").encode("utf-8"))


def count_lines(text: str | None) -> int:
    """
    统计行数（空文本也算一行）

    Count lines; an empty text is one (empty) line.
    """
    return (text or "").count("\n") + 1


def content_hash(text: str | None) -> str:
    """SHA-256 hex digest of the UTF-8 encoded text."""
    return hashlib.sha256((text or "").encode("utf-8")).hexdigest()

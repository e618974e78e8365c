# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  依赖注入工厂 - FastAPI Depends() 工厂函数，提供进程内唯一的存储门面
  Dependency Injection - FastAPI Depends() factory for the per-process store facade.

设计原则 / Design Principles:
  所有Router通过 Depends(get_store) 获取存储，测试中用 dependency_overrides 替换。
  Routers obtain the store through Depends(get_store); tests replace it via dependency_overrides.
"""

from functools import lru_cache

from branchwrite.config import settings
from branchwrite.store import BranchWriteStore


@lru_cache(maxsize=1)
def get_store() -> BranchWriteStore:
    """
    获取或创建BranchWriteStore的单例实例

    Get or create singleton BranchWriteStore instance.

    Returns:
        BranchWriteStore实例 / BranchWriteStore instance
    """
    return BranchWriteStore(settings.data_dir)

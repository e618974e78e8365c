# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  存储锁 - 由存储实例持有的互斥锁，串行化所有存储操作
  Store Lock - Mutual-exclusion guard owned by the store instance; serializes every store operation.

实现方式 / Implementation:
  使用asyncio.Lock实现进程内的互斥。适用于单进程应用。
  不提供跨进程锁：两个进程指向同一存储根目录时可能互相破坏数据。

  Uses asyncio.Lock for in-process exclusion suitable for single-process apps.
  There is no cross-process locking: two processes sharing one storage root
  can corrupt each other's state.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Optional

from branchwrite.exceptions import StorageError
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)


class StoreLock:
    """
    存储锁 - 整个存储只有一把锁

    Store Lock - one lock guards the whole store.

    Operations never run concurrently, which rules out read/modify/write
    races between e.g. a document create and a book save. The lock is not
    reentrant: code already holding it must call the unlocked storage
    classes directly.

    Attributes:
        _lock (asyncio.Lock): 底层锁 / Underlying lock
        _timeout (Optional[float]): 默认获取超时 / Default acquisition timeout
    """

    def __init__(self, timeout: Optional[float] = 30.0):
        self._lock = asyncio.Lock()
        self._timeout = timeout
        self._acquisitions = 0
        self._timeouts = 0

    @asynccontextmanager
    async def hold(self, operation: str = "", timeout: Optional[float] = None):
        """
        获取存储锁（上下文管理器）

        Acquire the store lock as a context manager.

        Args:
            operation: 操作名（用于日志）/ Operation name for logging
            timeout: 超时时间（秒），None 使用默认值 / Timeout in seconds, None for the default

        Raises:
            StorageError: 如果在超时内无法获取锁 / If the lock cannot be acquired in time

        Example:
            >>> async with store_lock.hold("save_project"):
            ...     await projects.save(project)
        """
        wait = self._timeout if timeout is None else timeout
        if wait is None:
            await self._lock.acquire()
        else:
            # wait_for can time out after the acquire has already succeeded;
            # the shielded task tells us whether we ended up owning the lock.
            acquire = asyncio.ensure_future(self._lock.acquire())
            try:
                await asyncio.wait_for(asyncio.shield(acquire), timeout=wait)
            except asyncio.TimeoutError as e:
                self._abandon(acquire)
                self._timeouts += 1
                logger.error("Store lock timeout after %ss (%s)", wait, operation or "unnamed")
                raise StorageError(f"Storage is busy, could not run {operation or 'operation'}") from e
            except asyncio.CancelledError:
                self._abandon(acquire)
                raise

        self._acquisitions += 1
        try:
            yield
        finally:
            self._lock.release()

    def _abandon(self, acquire: "asyncio.Future[bool]") -> None:
        """Give up a pending acquire, releasing the lock if it was obtained anyway."""
        if acquire.done() and not acquire.cancelled() and acquire.exception() is None:
            self._lock.release()
        else:
            acquire.cancel()

    def locked(self) -> bool:
        return self._lock.locked()

    def get_stats(self) -> Dict[str, int]:
        """
        获取锁统计信息

        Get lock statistics.

        Returns:
            包含以下统计信息的字典 / Dictionary with statistics:
            - acquisitions: 成功获取次数 / Successful acquisitions
            - timeouts: 超时次数 / Timed-out attempts
            - locked: 当前是否被持有 / 1 while held
        """
        return {
            "acquisitions": self._acquisitions,
            "timeouts": self._timeouts,
            "locked": int(self._lock.locked()),
        }

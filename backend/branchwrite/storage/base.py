# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  存储基类 - 异步文件读写、单文件原子写入与按工件的加载策略
  Base storage - async file I/O, per-file atomic writes and per-artifact load policy.

加载策略 / Load policy:
  每个实体目录由若干工件组成，每个工件要么是必需的（缺失或损坏即失败），
  要么是可选的（缺失时使用默认值）。损坏的可选 JSON 工件依然报错，
  以免随后的保存覆盖无法读取的历史。

  Every entity directory is a set of artifacts. REQUIRED artifacts escalate
  missing/unreadable files (StorageIOError) and malformed content
  (StorageParseError). OPTIONAL artifacts degrade to a default when absent;
  a present-but-malformed optional JSON artifact still raises
  StorageParseError so a later save cannot overwrite unreadable history.
"""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Generic, List, Optional, Type, TypeVar

import aiofiles
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from branchwrite.exceptions import (
    EntityNotFoundError,
    StorageIOError,
    StorageParseError,
)
from branchwrite.utils.logger import get_logger
from branchwrite.utils.path_safety import validate_entity_id, validate_path_within
from branchwrite.utils.paths import get_app_data_dir

logger = get_logger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class ArtifactPolicy(str, Enum):
    """How a missing artifact is treated on load."""

    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class Artifact:
    """One file (or directory) inside an entity directory."""

    name: str
    filename: str
    policy: ArtifactPolicy


@dataclass
class ArtifactResult(Generic[T]):
    """Outcome of one load step: the value and whether it came from disk."""

    value: T
    found: bool


class BaseStorage:
    """
    文件存储基类

    Base class for file-backed entity collections.

    Subclasses set ``collection`` ("projects" or "books"); every entity lives
    in ``<data_dir>/<collection>/<entity_id>/``.

    Attributes:
        data_dir (Path): 存储根目录 / Storage root
        encoding (str): 文本编码 / Text encoding for every file
    """

    collection: str = ""
    entity_kind: str = "entity"

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = get_app_data_dir(data_dir)
        self.encoding = "utf-8"

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def collection_dir(self) -> Path:
        return self.data_dir / self.collection

    def get_entity_path(self, entity_id: str) -> Path:
        """Return ``<collection_dir>/<entity_id>`` after validating the id."""
        validate_entity_id(entity_id, self.entity_kind)
        path = self.collection_dir / entity_id
        validate_path_within(path, self.collection_dir)
        return path

    def require_entity_dir(self, entity_id: str) -> Path:
        """Return the entity directory or raise EntityNotFoundError."""
        entity_dir = self.get_entity_path(entity_id)
        if not entity_dir.is_dir():
            raise EntityNotFoundError(self.entity_kind, entity_id)
        return entity_dir

    def ensure_dir(self, path: Path) -> Path:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create directory {path}: {e}") from e
        return path

    # ------------------------------------------------------------------
    # Raw file I/O
    # ------------------------------------------------------------------

    async def read_text(self, file_path: Path) -> str:
        """Read a UTF-8 text file."""
        try:
            async with aiofiles.open(file_path, "r", encoding=self.encoding, newline="") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Failed to read {file_path}: {e}") from e

    async def write_text(self, file_path: Path, content: str) -> None:
        """Write a text file atomically."""
        await self._atomic_write(file_path, content)

    async def read_json(self, file_path: Path) -> Any:
        """Read and decode a JSON file."""
        raw = await self.read_text(file_path)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageParseError(f"Failed to parse {file_path}: {e}") from e

    async def write_json(self, file_path: Path, data: Any) -> None:
        """Write pretty-printed JSON atomically."""
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        await self._atomic_write(file_path, payload)

    async def _atomic_write(self, file_path: Path, payload: str) -> None:
        """
        单文件原子写入

        Write to a temp file in the same directory, then ``os.replace`` it
        over the target so readers never see a half-written file. Atomicity
        is per file only; multi-file saves are not transactional.
        """
        parent = self.ensure_dir(Path(file_path).parent)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(parent), suffix=".tmp")
            os.close(fd)
        except OSError as e:
            raise StorageIOError(f"Failed to write {file_path}: {e}") from e

        try:
            async with aiofiles.open(tmp_path, "w", encoding=self.encoding, newline="") as f:
                await f.write(payload)
            os.replace(tmp_path, str(file_path))
        except OSError as e:
            self._discard(Path(tmp_path))
            raise StorageIOError(f"Failed to write {file_path}: {e}") from e
        except BaseException:
            self._discard(Path(tmp_path))
            raise

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", path, e)

    def remove_tree(self, path: Path) -> bool:
        """Recursively delete a directory; returns False if it did not exist."""
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StorageIOError(f"Failed to delete {path}: {e}") from e
        return True

    # ------------------------------------------------------------------
    # Policy-driven artifact loading
    # ------------------------------------------------------------------

    async def load_json_artifact(
        self,
        entity_dir: Path,
        artifact: Artifact,
        shape: Any,
        default: Any = None,
    ) -> ArtifactResult:
        """
        按策略加载 JSON 工件

        Load a JSON artifact and validate it against ``shape`` (a model class
        or any type understood by pydantic's TypeAdapter).

        Args:
            entity_dir: 实体目录 / Entity directory
            artifact: 工件描述 / Artifact descriptor
            shape: 目标类型 / Target type
            default: 可选工件缺失时的默认值 / Default for a missing optional artifact

        Returns:
            ArtifactResult

        Raises:
            StorageIOError: 必需工件缺失或不可读 / Required artifact missing or unreadable
            StorageParseError: 工件内容不合法 / Artifact content malformed
        """
        path = entity_dir / artifact.filename
        if not path.is_file():
            if artifact.policy is ArtifactPolicy.REQUIRED:
                raise StorageIOError(f"Missing required {artifact.name}: {path}")
            logger.debug("Optional %s absent at %s, using default", artifact.name, path)
            return ArtifactResult(value=default, found=False)

        data = await self.read_json(path)
        try:
            value = TypeAdapter(shape).validate_python(data)
        except PydanticValidationError as e:
            raise StorageParseError(f"Invalid {artifact.name} in {path}: {e}") from e
        return ArtifactResult(value=value, found=True)

    async def load_text_artifact(
        self,
        entity_dir: Path,
        artifact: Artifact,
        default: str = "",
    ) -> ArtifactResult:
        """Load a text artifact under the same policy rules."""
        path = entity_dir / artifact.filename
        if not path.is_file():
            if artifact.policy is ArtifactPolicy.REQUIRED:
                raise StorageIOError(f"Missing required {artifact.name}: {path}")
            return ArtifactResult(value=default, found=False)
        return ArtifactResult(value=await self.read_text(path), found=True)

    async def list_entity_configs(self, config_artifact: Artifact, model: Type[M]) -> List[M]:
        """
        扫描集合目录下的配置文件

        Scan immediate subdirectories for ``config_artifact`` and parse each.

        A config that cannot be read or parsed is skipped with a warning, so a
        single damaged entity never blocks listing the others. Result is
        sorted by ``last_modified`` descending; ties keep scan order
        (directory name order).
        """
        root = self.collection_dir
        if not root.is_dir():
            return []

        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise StorageIOError(f"Failed to read {root}: {e}") from e

        configs: List[M] = []
        for entry in entries:
            if not entry.is_dir():
                continue
            config_path = entry / config_artifact.filename
            if not config_path.is_file():
                continue
            try:
                data = await self.read_json(config_path)
                configs.append(model.model_validate(data))
            except (StorageIOError, StorageParseError, PydanticValidationError) as e:
                logger.warning("Skipping %s %s: %s", self.entity_kind, entry.name, e)

        configs.sort(key=lambda c: _as_utc(c.last_modified), reverse=True)
        return configs


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so mixed files still sort."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

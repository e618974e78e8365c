"""
Project Data Models / 项目数据模型
Legacy single-document projects with commit history.
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_FONT_FAMILY = "'JetBrains Mono', 'Fira Code', 'Monaco', 'Consolas', monospace"


def utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class ProjectSettings(BaseModel):
    """Project editor and versioning settings / 项目设置"""

    auto_save_interval: int = Field(default=5, ge=0, description="Auto-save interval (minutes)")
    auto_commit_threshold: int = Field(default=50, ge=0, description="Words added before an auto commit")
    backup_enabled: bool = Field(default=True, description="Backup policy switch")
    backup_interval: int = Field(default=24, ge=0, description="Backup interval (hours)")
    editor_theme: str = Field(default="focus-writing", description="Editor theme")
    font_size: int = Field(default=14, ge=0, description="Editor font size")
    line_height: int = Field(default=24, ge=0, description="Editor line height")
    font_family: str = Field(default=DEFAULT_FONT_FAMILY, description="Editor font family")


class ProjectConfig(BaseModel):
    """Project identity and settings / 项目配置 (config.json)"""

    id: str = Field(..., description="Project ID (directory name)")
    name: str = Field(..., description="Project name")
    description: str = Field(default="", description="Project description")
    created_at: datetime = Field(default_factory=utc_now, description="Created timestamp")
    last_modified: datetime = Field(default_factory=utc_now, description="Last content change")
    version: str = Field(default="1.0.0", description="Project format version")
    author: str = Field(default="", description="Author")
    settings: ProjectSettings = Field(default_factory=ProjectSettings)


class DocumentMetadata(BaseModel):
    """Main document statistics / 文档元数据 (metadata.json)"""

    id: str = Field(..., description="Document ID")
    title: str = Field(..., description="Document title")
    created_at: datetime = Field(default_factory=utc_now)
    last_modified: datetime = Field(default_factory=utc_now)
    word_count: int = Field(default=0, ge=0)
    character_count: int = Field(default=0, ge=0)
    line_count: int = Field(default=1, ge=0)
    tags: List[str] = Field(default_factory=list)


class CommitInfo(BaseModel):
    """One entry of commits.json / 版本提交信息"""

    id: str = Field(..., description="Commit ID (snapshot file name)")
    timestamp: datetime = Field(default_factory=utc_now)
    message: str = Field(default="", description="Commit message")
    is_auto_commit: bool = Field(default=False)
    document_hash: str = Field(default="", description="Hash of the snapshot body")
    word_count: int = Field(default=0, ge=0)
    character_count: int = Field(default=0, ge=0)


class ProjectData(BaseModel):
    """Full project entity as exchanged with callers / 项目数据"""

    config: ProjectConfig
    document_content: str = Field(default="", description="Main document body")
    document_metadata: DocumentMetadata
    commits: List[CommitInfo] = Field(default_factory=list, description="Newest first")
    commit_data: Dict[str, str] = Field(
        default_factory=dict,
        description="commit_id -> snapshot text",
    )


class ProjectStats(BaseModel):
    """Derived project counters / 项目统计"""

    total_commits: int = 0
    auto_commits: int = 0
    manual_commits: int = 0
    current_word_count: int = 0
    current_character_count: int = 0
    current_line_count: int = 0


class ProjectCreate(BaseModel):
    """Create project request."""

    name: str = Field(..., min_length=1, description="Project name")
    description: str = Field(default="", description="Project description")
    author: str = Field(default="", description="Author")


class ContentUpdate(BaseModel):
    """Replace a document body."""

    content: str = Field(default="", description="New document body")


class CommitCreate(BaseModel):
    """Create commit request."""

    message: Optional[str] = Field(default=None, description="Commit message")
    is_auto_commit: bool = Field(default=False)


class ExportRequest(BaseModel):
    """Export request."""

    destination: str = Field(..., min_length=1, description="Target directory")


class DiffChange(BaseModel):
    """One line of a line diff."""

    type: Literal["added", "removed", "unchanged"]
    value: str
    line_number: int


class DiffResult(BaseModel):
    """Line diff between two snapshots / 版本差异"""

    old_text: str
    new_text: str
    changes: List[DiffChange] = Field(default_factory=list)

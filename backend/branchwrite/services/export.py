# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  项目导出 - 把当前正文、项目信息和完整版本历史写成可读的 Markdown 包
  Project export - render the current body, an info sheet and the full commit history as Markdown.

导出目录 / Bundle layout:
    <destination>/
        document.md
        project_info.md
        version_history/<commit_id>.md   (only when commits exist)
"""

from pathlib import Path

from branchwrite.exceptions import StorageIOError, ValidationError
from branchwrite.schemas.project import CommitInfo, ProjectConfig, ProjectData
from branchwrite.storage.projects import ProjectStorage
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
HISTORY_DIRNAME = "version_history"


def render_project_info(config: ProjectConfig) -> str:
    """
    渲染项目信息页

    Render project_info.md: name heading, description, author and timestamps.
    """
    return (
        f"# {config.name}\n\n"
        f"{config.description}\n\n"
        f"**作者 / Author**: {config.author}\n"
        f"**创建时间 / Created**: {config.created_at.strftime(TIMESTAMP_FORMAT)}\n"
        f"**最后修改 / Last Modified**: {config.last_modified.strftime(TIMESTAMP_FORMAT)}\n\n"
    )


def render_commit(commit: CommitInfo, content: str) -> str:
    """
    渲染单个版本页

    Render one version_history page: message, time, auto/manual label, word
    count, then the full snapshot body after a rule.
    """
    kind = "自动保存 / Auto" if commit.is_auto_commit else "手动保存 / Manual"
    return (
        f"# 版本 / Version: {commit.message}\n\n"
        f"**时间 / Time**: {commit.timestamp.strftime(TIMESTAMP_FORMAT)}\n"
        f"**类型 / Type**: {kind}\n"
        f"**字数 / Words**: {commit.word_count}\n\n"
        f"---\n\n"
        f"{content}"
    )


class ExportWriter:
    """
    项目导出器

    Project exporter. Reuses the storage's atomic text writes so an export
    file is never observed half written.
    """

    def __init__(self, project_storage: ProjectStorage):
        self.project_storage = project_storage

    async def export_project(self, project_id: str, destination: str) -> Path:
        """
        导出项目到目标目录

        Export a freshly loaded project to ``destination``.

        Args:
            project_id: 项目ID / Project id
            destination: 目标目录（不存在则创建）/ Target directory, created if missing

        Returns:
            导出目录 / Export directory

        Raises:
            EntityNotFoundError: 项目不存在 / Unknown project
            ValidationError: 目标路径是文件 / Destination is an existing file
        """
        project = await self.project_storage.load_project(project_id)
        return await self.write_bundle(project, Path(destination).expanduser())

    async def write_bundle(self, project: ProjectData, export_dir: Path) -> Path:
        if export_dir.exists() and not export_dir.is_dir():
            raise ValidationError(f"Export destination is not a directory: {export_dir}")
        try:
            export_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create export directory {export_dir}: {e}") from e

        storage = self.project_storage
        await storage.write_text(export_dir / "document.md", project.document_content)
        await storage.write_text(export_dir / "project_info.md", render_project_info(project.config))

        written = 0
        if project.commits:
            history_dir = storage.ensure_dir(export_dir / HISTORY_DIRNAME)
            for commit in project.commits:
                content = project.commit_data.get(commit.id)
                if content is None:
                    logger.debug("Commit %s has no snapshot, skipped in export", commit.id)
                    continue
                await storage.write_text(history_dir / f"{commit.id}.md", render_commit(commit, content))
                written += 1

        logger.info(
            "Exported project %s to %s (%d versions)",
            project.config.id,
            export_dir,
            written,
        )
        return export_dir

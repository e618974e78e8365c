"""
Project Storage
File-based CRUD and versioning for single-document projects.

Layout::

    <root>/projects/<project_id>/
        config.json                ProjectConfig
        document.md                main document body
        metadata.json              DocumentMetadata
        commits.json               [CommitInfo], newest first
        commit_data/<commit_id>.md snapshot per commit
"""

import uuid
from pathlib import Path
from typing import Dict, List, Optional

from branchwrite.exceptions import StorageIOError, ValidationError
from branchwrite.schemas.project import (
    CommitInfo,
    DiffResult,
    DocumentMetadata,
    ProjectConfig,
    ProjectData,
    ProjectSettings,
    ProjectStats,
    utc_now,
)
from branchwrite.services import versioning
from branchwrite.services.stats import derive_project_stats
from branchwrite.storage.base import Artifact, ArtifactPolicy, BaseStorage
from branchwrite.utils.logger import get_logger
from branchwrite.utils.path_safety import validate_entity_id

logger = get_logger(__name__)

PROJECT_ARTIFACTS: Dict[str, Artifact] = {
    "config": Artifact("project config", "config.json", ArtifactPolicy.REQUIRED),
    "document": Artifact("document body", "document.md", ArtifactPolicy.OPTIONAL),
    "metadata": Artifact("document metadata", "metadata.json", ArtifactPolicy.REQUIRED),
    "commits": Artifact("commit list", "commits.json", ArtifactPolicy.OPTIONAL),
    "commit_data": Artifact("commit snapshots", "commit_data", ArtifactPolicy.OPTIONAL),
}


class ProjectStorage(BaseStorage):
    """File-based project storage."""

    collection = "projects"
    entity_kind = "project"

    def get_project_path(self, project_id: str) -> Path:
        return self.get_entity_path(project_id)

    def _snapshot_dir(self, project_dir: Path) -> Path:
        return project_dir / PROJECT_ARTIFACTS["commit_data"].filename

    async def create_project(self, name: str, description: str = "", author: str = "") -> ProjectData:
        """Create, persist and return a new empty project."""
        project_id = str(uuid.uuid4())
        now = utc_now()

        project = ProjectData(
            config=ProjectConfig(
                id=project_id,
                name=name,
                description=description,
                created_at=now,
                last_modified=now,
                author=author,
                settings=ProjectSettings(),
            ),
            document_content="",
            document_metadata=DocumentMetadata(
                id=str(uuid.uuid4()),
                title=f"{name} - 主文档",
                created_at=now,
                last_modified=now,
                word_count=0,
                character_count=0,
                line_count=1,
            ),
        )

        self.ensure_dir(self.get_project_path(project_id))
        await self.save_project(project)
        logger.info("Created project %s (%s)", project_id, name)
        return project

    async def save_project(self, project: ProjectData) -> None:
        """
        Write config, body, metadata, commit list and snapshots, in that order.

        Each file is replaced atomically but the set is not: a crash between
        writes can leave e.g. a fresh config next to stale metadata. True
        atomicity would need a staging directory plus rename, which this
        store does not do.
        """
        project_dir = self.ensure_dir(self.get_project_path(project.config.id))
        for commit_id in project.commit_data:
            validate_entity_id(commit_id, "commit")

        await self.write_json(
            project_dir / PROJECT_ARTIFACTS["config"].filename,
            project.config.model_dump(mode="json"),
        )
        await self.write_text(
            project_dir / PROJECT_ARTIFACTS["document"].filename,
            project.document_content,
        )
        await self.write_json(
            project_dir / PROJECT_ARTIFACTS["metadata"].filename,
            project.document_metadata.model_dump(mode="json"),
        )
        await self.write_json(
            project_dir / PROJECT_ARTIFACTS["commits"].filename,
            [commit.model_dump(mode="json") for commit in project.commits],
        )

        snapshot_dir = self.ensure_dir(self._snapshot_dir(project_dir))
        for commit_id, content in project.commit_data.items():
            await self.write_text(snapshot_dir / f"{commit_id}.md", content)

    async def load_project(self, project_id: str) -> ProjectData:
        """Load a project; optional artifacts that are absent fall back to defaults."""
        project_dir = self.require_entity_dir(project_id)

        config = await self.load_json_artifact(project_dir, PROJECT_ARTIFACTS["config"], ProjectConfig)
        document = await self.load_text_artifact(project_dir, PROJECT_ARTIFACTS["document"])
        metadata = await self.load_json_artifact(project_dir, PROJECT_ARTIFACTS["metadata"], DocumentMetadata)
        commits = await self.load_json_artifact(
            project_dir, PROJECT_ARTIFACTS["commits"], List[CommitInfo], default=[]
        )
        commit_data = await self._load_snapshots(project_dir)

        return ProjectData(
            config=config.value,
            document_content=document.value,
            document_metadata=metadata.value,
            commits=commits.value,
            commit_data=commit_data,
        )

    async def _load_snapshots(self, project_dir: Path) -> Dict[str, str]:
        """
        Read every ``*.md`` under commit_data/, orphans included.

        A file whose name is not a valid commit id (e.g. "old copy.md") is
        left on disk untouched and kept out of ``commit_data``.
        """
        snapshot_dir = self._snapshot_dir(project_dir)
        if not snapshot_dir.is_dir():
            return {}

        snapshots: Dict[str, str] = {}
        for path in sorted(snapshot_dir.glob("*.md")):
            try:
                validate_entity_id(path.stem, "commit")
            except ValidationError:
                logger.warning("Ignoring snapshot with invalid name: %s", path.name)
                continue
            try:
                snapshots[path.stem] = await self.read_text(path)
            except StorageIOError as e:
                logger.warning("Unreadable snapshot %s, treating as empty: %s", path.name, e)
                snapshots[path.stem] = ""
        return snapshots

    async def list_projects(self) -> List[ProjectConfig]:
        """List project configs, most recently modified first."""
        return await self.list_entity_configs(PROJECT_ARTIFACTS["config"], ProjectConfig)

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project directory; missing projects are a no-op."""
        deleted = self.remove_tree(self.get_project_path(project_id))
        if deleted:
            logger.info("Deleted project %s", project_id)
        return deleted

    async def get_project_stats(self, project_id: str) -> ProjectStats:
        return derive_project_stats(await self.load_project(project_id))

    async def update_content(self, project_id: str, content: str) -> ProjectData:
        """Replace the main document body and refresh its statistics."""
        project = await self.load_project(project_id)
        versioning.apply_content(project, content)
        await self.save_project(project)
        return project

    async def create_commit(
        self,
        project_id: str,
        message: Optional[str] = None,
        is_auto_commit: bool = False,
    ) -> CommitInfo:
        """Snapshot the current body as a new commit."""
        project = await self.load_project(project_id)
        commit = versioning.record_commit(project, message, is_auto_commit)
        await self.save_project(project)
        logger.info(
            "Committed %s on project %s (%s)",
            commit.id,
            project_id,
            "auto" if is_auto_commit else "manual",
        )
        return commit

    async def checkout(self, project_id: str, commit_id: str) -> str:
        """Return the snapshot of a commit without changing the project."""
        project = await self.load_project(project_id)
        return versioning.snapshot_for(project, commit_id)

    async def rollback(self, project_id: str, commit_id: str) -> ProjectData:
        """Restore a snapshot as the current body and record the rollback."""
        project = await self.load_project(project_id)
        versioning.rollback(project, commit_id)
        await self.save_project(project)
        logger.info("Rolled back project %s to %s", project_id, commit_id)
        return project

    async def diff_commits(self, project_id: str, from_commit: str, to_commit: str) -> DiffResult:
        project = await self.load_project(project_id)
        return versioning.diff_commits(project, from_commit, to_commit)

    async def prune_snapshots(self, project_id: str) -> List[str]:
        """
        Delete snapshot files that no commit references.

        Orphans are kept by every other operation; this is the only place
        they are removed, and only when a caller asks for it.
        """
        project = await self.load_project(project_id)
        referenced = {commit.id for commit in project.commits}
        orphans = sorted(set(project.commit_data) - referenced)

        snapshot_dir = self._snapshot_dir(self.get_project_path(project_id))
        for commit_id in orphans:
            try:
                (snapshot_dir / f"{commit_id}.md").unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageIOError(f"Failed to delete snapshot {commit_id}: {e}") from e

        if orphans:
            logger.info("Pruned %d orphaned snapshots from project %s", len(orphans), project_id)
        return orphans

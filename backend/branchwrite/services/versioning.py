"""
Version helpers for single-document projects.

Pure functions over ``ProjectData``: they mutate or inspect the in-memory
entity and never touch the disk. ``ProjectStorage`` wraps them in
load-mutate-save operations.
"""

import difflib
import uuid
from typing import List, Optional

from branchwrite.exceptions import EntityNotFoundError
from branchwrite.schemas.project import (
    CommitInfo,
    DiffChange,
    DiffResult,
    ProjectData,
    utc_now,
)
from branchwrite.utils.text import (
    content_hash,
    count_characters,
    count_lines,
    count_words,
    normalize_newlines,
)

AUTO_COMMIT_MESSAGE = "Auto commit"
MANUAL_COMMIT_MESSAGE = "Manual commit"


def apply_content(project: ProjectData, content: str) -> ProjectData:
    """Replace the body and refresh metadata counts and modification times."""
    now = utc_now()
    meta = project.document_metadata
    project.document_content = content
    meta.word_count = count_words(content)
    meta.character_count = count_characters(content)
    meta.line_count = count_lines(content)
    meta.last_modified = now
    project.config.last_modified = now
    return project


def record_commit(
    project: ProjectData,
    message: Optional[str] = None,
    is_auto_commit: bool = False,
) -> CommitInfo:
    """Snapshot the current body; the new commit goes to the front of the list."""
    if not message:
        message = AUTO_COMMIT_MESSAGE if is_auto_commit else MANUAL_COMMIT_MESSAGE

    commit = CommitInfo(
        id=str(uuid.uuid4()),
        timestamp=utc_now(),
        message=message,
        is_auto_commit=is_auto_commit,
        document_hash=content_hash(project.document_content),
        word_count=project.document_metadata.word_count,
        character_count=project.document_metadata.character_count,
    )
    project.commits.insert(0, commit)
    project.commit_data[commit.id] = project.document_content
    return commit


def find_commit(project: ProjectData, commit_id: str) -> CommitInfo:
    for commit in project.commits:
        if commit.id == commit_id:
            return commit
    raise EntityNotFoundError("commit", commit_id)


def snapshot_for(project: ProjectData, commit_id: str) -> str:
    """Return the snapshot text of a listed commit."""
    find_commit(project, commit_id)
    if commit_id not in project.commit_data:
        raise EntityNotFoundError("snapshot", commit_id)
    return project.commit_data[commit_id]


def rollback(project: ProjectData, commit_id: str) -> CommitInfo:
    """Restore a snapshot as the body and record the rollback as a manual commit."""
    target = find_commit(project, commit_id)
    apply_content(project, snapshot_for(project, commit_id))
    return record_commit(project, f"Rollback to {target.message}", is_auto_commit=False)


def diff_texts(old_text: str, new_text: str) -> DiffResult:
    """
    Line diff between two texts.

    Unchanged and removed lines carry their line number in ``old_text``;
    added lines carry their line number in ``new_text``.
    """
    old_lines = normalize_newlines(old_text).split("\n")
    new_lines = normalize_newlines(new_text).split("\n")
    changes: List[DiffChange] = []

    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset, line in enumerate(old_lines[i1:i2]):
                changes.append(DiffChange(type="unchanged", value=line, line_number=i1 + offset + 1))
            continue
        if tag in ("replace", "delete"):
            for offset, line in enumerate(old_lines[i1:i2]):
                changes.append(DiffChange(type="removed", value=line, line_number=i1 + offset + 1))
        if tag in ("replace", "insert"):
            for offset, line in enumerate(new_lines[j1:j2]):
                changes.append(DiffChange(type="added", value=line, line_number=j1 + offset + 1))

    return DiffResult(old_text=old_text, new_text=new_text, changes=changes)


def diff_commits(project: ProjectData, from_commit: str, to_commit: str) -> DiffResult:
    return diff_texts(snapshot_for(project, from_commit), snapshot_for(project, to_commit))


def has_unsaved_changes(project: ProjectData) -> bool:
    """True when the body differs from the newest snapshot."""
    if not project.commits:
        return len(project.document_content) > 0
    latest = project.commits[0]
    return project.commit_data.get(latest.id, "") != project.document_content


def should_auto_commit(project: ProjectData) -> bool:
    """
    True when enough words were added since the newest commit.

    A threshold of 0 disables auto commits.
    """
    threshold = project.config.settings.auto_commit_threshold
    if threshold <= 0 or not has_unsaved_changes(project):
        return False
    baseline = project.commits[0].word_count if project.commits else 0
    return project.document_metadata.word_count - baseline >= threshold

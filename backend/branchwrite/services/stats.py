"""
Project statistics derivation.
"""

from branchwrite.schemas.project import ProjectData, ProjectStats


def derive_project_stats(project: ProjectData) -> ProjectStats:
    """Count commits by kind; current counts come from the document metadata."""
    auto_commits = sum(1 for commit in project.commits if commit.is_auto_commit)
    meta = project.document_metadata
    return ProjectStats(
        total_commits=len(project.commits),
        auto_commits=auto_commits,
        manual_commits=len(project.commits) - auto_commits,
        current_word_count=meta.word_count,
        current_character_count=meta.character_count,
        current_line_count=meta.line_count,
    )

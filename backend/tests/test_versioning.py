"""Pure version helpers: diffs, unsaved changes and auto-commit decisions."""
import pytest

from branchwrite.exceptions import EntityNotFoundError
from branchwrite.schemas.project import DocumentMetadata, ProjectConfig, ProjectData, ProjectSettings
from branchwrite.services import versioning
from branchwrite.services.stats import derive_project_stats


def make_project(threshold=50):
    return ProjectData(
        config=ProjectConfig(id="p1", name="Test", settings=ProjectSettings(auto_commit_threshold=threshold)),
        document_metadata=DocumentMetadata(id="d1", title="Test - 主文档"),
    )


class TestDiffTexts:
    def test_identical(self):
        result = versioning.diff_texts("a\nb", "a\nb")
        assert [c.type for c in result.changes] == ["unchanged", "unchanged"]

    def test_line_numbers(self):
        result = versioning.diff_texts("a\nb\nc", "a\nx\nc\nd")
        assert [(c.type, c.value, c.line_number) for c in result.changes] == [
            ("unchanged", "a", 1),
            ("removed", "b", 2),
            ("added", "x", 2),
            ("unchanged", "c", 3),
            ("added", "d", 4),
        ]

    def test_crlf_is_normalized(self):
        result = versioning.diff_texts("a\r\nb", "a\nb")
        assert all(c.type == "unchanged" for c in result.changes)
        assert result.old_text == "a\r\nb"


class TestCommits:
    def test_default_messages(self):
        project = make_project()
        assert versioning.record_commit(project).message == versioning.MANUAL_COMMIT_MESSAGE
        assert versioning.record_commit(project, is_auto_commit=True).message == versioning.AUTO_COMMIT_MESSAGE

    def test_counts_copied_from_metadata(self):
        project = make_project()
        versioning.apply_content(project, "one two three")
        commit = versioning.record_commit(project, "three words")
        assert commit.word_count == 3
        assert commit.character_count == 13
        assert project.commit_data[commit.id] == "one two three"

    def test_unknown_snapshot(self):
        project = make_project()
        commit = versioning.record_commit(project, "lost")
        del project.commit_data[commit.id]
        with pytest.raises(EntityNotFoundError):
            versioning.snapshot_for(project, commit.id)


class TestUnsavedChanges:
    def test_empty_project(self):
        assert versioning.has_unsaved_changes(make_project()) is False

    def test_content_without_commit(self):
        project = make_project()
        versioning.apply_content(project, "draft")
        assert versioning.has_unsaved_changes(project) is True

    def test_after_commit(self):
        project = make_project()
        versioning.apply_content(project, "draft")
        versioning.record_commit(project)
        assert versioning.has_unsaved_changes(project) is False
        versioning.apply_content(project, "draft 2")
        assert versioning.has_unsaved_changes(project) is True


class TestShouldAutoCommit:
    def test_threshold_reached(self):
        project = make_project(threshold=3)
        versioning.apply_content(project, "one")
        versioning.record_commit(project)
        versioning.apply_content(project, "one two three four")
        assert versioning.should_auto_commit(project) is True

    def test_below_threshold(self):
        project = make_project(threshold=3)
        versioning.apply_content(project, "one")
        versioning.record_commit(project)
        versioning.apply_content(project, "one two")
        assert versioning.should_auto_commit(project) is False

    def test_zero_disables(self):
        project = make_project(threshold=0)
        versioning.apply_content(project, "lots of words " * 20)
        assert versioning.should_auto_commit(project) is False


def test_stats_counts_commit_kinds():
    project = make_project()
    versioning.apply_content(project, "a b\nc")
    for index in range(5):
        versioning.record_commit(project, is_auto_commit=index % 2 == 0)

    stats = derive_project_stats(project)
    assert (stats.total_commits, stats.auto_commits, stats.manual_commits) == (5, 3, 2)
    assert stats.current_line_count == 2

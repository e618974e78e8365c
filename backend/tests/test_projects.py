"""Project storage: CRUD, listing, versioning and snapshot pruning."""
import json
from datetime import datetime, timedelta, timezone

import pytest

from branchwrite.exceptions import EntityNotFoundError, StorageIOError, StorageParseError
from branchwrite.storage.projects import ProjectStorage


@pytest.fixture
def projects(data_dir):
    return ProjectStorage(data_dir=str(data_dir))


@pytest.mark.asyncio
async def test_create_project_layout(projects, data_dir):
    project = await projects.create_project("Novel", "A story", "Ann")
    project_dir = data_dir / "projects" / project.config.id

    for name in ("config.json", "document.md", "metadata.json", "commits.json"):
        assert (project_dir / name).is_file(), name
    assert (project_dir / "commit_data").is_dir()

    assert project.document_content == ""
    assert project.commits == []
    assert project.document_metadata.title == "Novel - 主文档"
    assert project.document_metadata.line_count == 1
    assert project.config.settings.auto_commit_threshold == 50

    config = json.loads((project_dir / "config.json").read_text(encoding="utf-8"))
    assert config["name"] == "Novel"
    assert config["settings"]["editor_theme"] == "focus-writing"


@pytest.mark.asyncio
async def test_save_load_round_trip(projects):
    project = await projects.create_project("Round trip")
    project.document_content = "第一章\n\nIt was a dark night."
    project.commit_data["keep-me"] = "orphan snapshot"
    await projects.save_project(project)

    loaded = await projects.load_project(project.config.id)
    assert loaded == project


@pytest.mark.asyncio
async def test_load_missing_project(projects):
    with pytest.raises(EntityNotFoundError):
        await projects.load_project("does-not-exist")


@pytest.mark.asyncio
async def test_load_without_optional_artifacts(projects, data_dir):
    project = await projects.create_project("Sparse")
    project_dir = data_dir / "projects" / project.config.id
    (project_dir / "document.md").unlink()
    (project_dir / "commits.json").unlink()

    loaded = await projects.load_project(project.config.id)
    assert loaded.document_content == ""
    assert loaded.commits == []


@pytest.mark.asyncio
async def test_load_without_metadata_fails(projects, data_dir):
    project = await projects.create_project("Broken")
    (data_dir / "projects" / project.config.id / "metadata.json").unlink()
    with pytest.raises(StorageIOError):
        await projects.load_project(project.config.id)


@pytest.mark.asyncio
async def test_malformed_commit_list_fails(projects, data_dir):
    project = await projects.create_project("Corrupt history")
    (data_dir / "projects" / project.config.id / "commits.json").write_text("not json", encoding="utf-8")
    with pytest.raises(StorageParseError):
        await projects.load_project(project.config.id)


@pytest.mark.asyncio
async def test_delete_is_idempotent(projects, data_dir):
    project = await projects.create_project("Short lived")
    assert await projects.delete_project(project.config.id) is True
    assert not (data_dir / "projects" / project.config.id).exists()
    assert await projects.delete_project(project.config.id) is False


@pytest.mark.asyncio
async def test_list_skips_corrupt_and_sorts_newest_first(projects, data_dir):
    older = await projects.create_project("Older")
    newer = await projects.create_project("Newer")

    older.config.last_modified = datetime.now(timezone.utc) - timedelta(days=2)
    newer.config.last_modified = datetime.now(timezone.utc) - timedelta(days=1)
    await projects.save_project(older)
    await projects.save_project(newer)

    broken_dir = data_dir / "projects" / "broken"
    broken_dir.mkdir()
    (broken_dir / "config.json").write_text("{oops", encoding="utf-8")
    (data_dir / "projects" / "empty-dir").mkdir()

    listed = await projects.list_projects()
    assert [c.id for c in listed] == [newer.config.id, older.config.id]


@pytest.mark.asyncio
async def test_list_without_root(tmp_path):
    storage = ProjectStorage(data_dir=str(tmp_path / "never-created"))
    assert await storage.list_projects() == []


@pytest.mark.asyncio
async def test_update_content_refreshes_metadata(projects):
    project = await projects.create_project("Counting")
    updated = await projects.update_content(project.config.id, "hello   world\n\nfoo")

    meta = updated.document_metadata
    assert meta.word_count == 3
    assert meta.character_count == 18
    assert meta.line_count == 3
    assert updated.config.last_modified >= project.config.last_modified


@pytest.mark.asyncio
async def test_commit_checkout_rollback(projects):
    project = await projects.create_project("Versions")
    project_id = project.config.id

    await projects.update_content(project_id, "one two")
    first = await projects.create_commit(project_id, "Draft 1")
    await projects.update_content(project_id, "one two three four")
    second = await projects.create_commit(project_id, is_auto_commit=True)

    loaded = await projects.load_project(project_id)
    assert [c.id for c in loaded.commits] == [second.id, first.id]
    assert first.word_count == 2
    assert second.message == "Auto commit"
    assert second.document_hash != first.document_hash

    assert await projects.checkout(project_id, first.id) == "one two"
    # checkout is read-only
    assert (await projects.load_project(project_id)).document_content == "one two three four"

    rolled = await projects.rollback(project_id, first.id)
    assert rolled.document_content == "one two"
    assert rolled.commits[0].message == "Rollback to Draft 1"
    assert rolled.commits[0].is_auto_commit is False
    assert len(rolled.commits) == 3


@pytest.mark.asyncio
async def test_checkout_unknown_commit(projects):
    project = await projects.create_project("No history")
    with pytest.raises(EntityNotFoundError):
        await projects.checkout(project.config.id, "missing-commit")


@pytest.mark.asyncio
async def test_diff_commits(projects):
    project = await projects.create_project("Diffs")
    project_id = project.config.id
    await projects.update_content(project_id, "a\nb")
    old = await projects.create_commit(project_id, "old")
    await projects.update_content(project_id, "a\nc")
    new = await projects.create_commit(project_id, "new")

    result = await projects.diff_commits(project_id, old.id, new.id)
    assert [(c.type, c.value) for c in result.changes] == [
        ("unchanged", "a"),
        ("removed", "b"),
        ("added", "c"),
    ]


@pytest.mark.asyncio
async def test_prune_snapshots_removes_only_orphans(projects, data_dir):
    project = await projects.create_project("Prune")
    project_id = project.config.id
    await projects.update_content(project_id, "kept")
    commit = await projects.create_commit(project_id, "kept")

    snapshot_dir = data_dir / "projects" / project_id / "commit_data"
    (snapshot_dir / "stray.md").write_text("orphan", encoding="utf-8")

    # orphans survive a plain load/save
    loaded = await projects.load_project(project_id)
    assert loaded.commit_data["stray"] == "orphan"
    await projects.save_project(loaded)
    assert (snapshot_dir / "stray.md").exists()

    assert await projects.prune_snapshots(project_id) == ["stray"]
    assert not (snapshot_dir / "stray.md").exists()
    assert (snapshot_dir / f"{commit.id}.md").exists()
    assert await projects.prune_snapshots(project_id) == []


@pytest.mark.asyncio
async def test_stats(projects):
    project = await projects.create_project("Stats")
    project_id = project.config.id
    await projects.update_content(project_id, "some words here")
    for index in range(5):
        await projects.create_commit(project_id, f"c{index}", is_auto_commit=index < 3)

    stats = await projects.get_project_stats(project_id)
    assert stats.total_commits == 5
    assert stats.auto_commits == 3
    assert stats.manual_commits == 2
    assert stats.current_word_count == 3
    assert stats.current_line_count == 1


@pytest.mark.asyncio
async def test_stray_snapshot_file_does_not_block_saves(projects, data_dir):
    project = await projects.create_project("Stray file")
    project_id = project.config.id
    stray = data_dir / "projects" / project_id / "commit_data" / "old copy.md"
    stray.write_text("copied by hand", encoding="utf-8")

    loaded = await projects.load_project(project_id)
    assert "old copy" not in loaded.commit_data

    updated = await projects.update_content(project_id, "hello")
    assert updated.document_content == "hello"
    commit = await projects.create_commit(project_id, "after stray")
    rolled = await projects.rollback(project_id, commit.id)
    assert rolled.document_content == "hello"

    assert stray.read_text(encoding="utf-8") == "copied by hand"
    assert await projects.prune_snapshots(project_id) == []

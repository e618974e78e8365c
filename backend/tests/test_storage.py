"""Basic storage read/write tests using tmp_path."""
import json

import pytest

from branchwrite.exceptions import EntityNotFoundError, StorageIOError, StorageParseError, ValidationError
from branchwrite.schemas.project import ProjectConfig
from branchwrite.storage.base import Artifact, ArtifactPolicy, BaseStorage


class ProjectLikeStorage(BaseStorage):
    collection = "projects"
    entity_kind = "project"


@pytest.fixture
def storage(tmp_path):
    return ProjectLikeStorage(data_dir=str(tmp_path))


@pytest.mark.asyncio
async def test_write_and_read_json(storage, tmp_path):
    filepath = tmp_path / "test_proj" / "config.json"
    data = {"name": "测试", "value": 42}
    await storage.write_json(filepath, data)
    assert filepath.exists()
    result = await storage.read_json(filepath)
    assert result == data
    # pretty printed, non-ASCII kept as is
    raw = filepath.read_text(encoding="utf-8")
    assert "测试" in raw
    assert "\n  " in raw


@pytest.mark.asyncio
async def test_read_text_missing_raises(storage, tmp_path):
    with pytest.raises(StorageIOError):
        await storage.read_text(tmp_path / "nonexistent.md")


@pytest.mark.asyncio
async def test_read_json_malformed_raises(storage, tmp_path):
    filepath = tmp_path / "broken.json"
    filepath.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageParseError):
        await storage.read_json(filepath)


@pytest.mark.asyncio
async def test_write_text_keeps_newlines_and_leaves_no_temp_files(storage, tmp_path):
    project_dir = tmp_path / "test_proj"
    filepath = project_dir / "chapter.md"
    content = "# Chapter 1\r\n\r\nHello world."
    await storage.write_text(filepath, content)
    assert filepath.read_bytes().decode("utf-8") == content
    assert [p.name for p in project_dir.iterdir()] == ["chapter.md"]


@pytest.mark.asyncio
async def test_write_text_overwrites(storage, tmp_path):
    filepath = tmp_path / "doc.md"
    await storage.write_text(filepath, "first")
    await storage.write_text(filepath, "second")
    assert await storage.read_text(filepath) == "second"


@pytest.mark.asyncio
async def test_required_artifact_missing_raises(storage, tmp_path):
    artifact = Artifact("project config", "config.json", ArtifactPolicy.REQUIRED)
    with pytest.raises(StorageIOError):
        await storage.load_json_artifact(tmp_path, artifact, ProjectConfig)


@pytest.mark.asyncio
async def test_optional_artifact_missing_uses_default(storage, tmp_path):
    artifact = Artifact("commit list", "commits.json", ArtifactPolicy.OPTIONAL)
    result = await storage.load_json_artifact(tmp_path, artifact, list, default=[])
    assert result.value == []
    assert result.found is False


@pytest.mark.asyncio
async def test_optional_artifact_malformed_still_raises(storage, tmp_path):
    (tmp_path / "commits.json").write_text("[{", encoding="utf-8")
    artifact = Artifact("commit list", "commits.json", ArtifactPolicy.OPTIONAL)
    with pytest.raises(StorageParseError):
        await storage.load_json_artifact(tmp_path, artifact, list, default=[])


@pytest.mark.asyncio
async def test_artifact_with_wrong_shape_raises(storage, tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"name": "no id"}), encoding="utf-8")
    artifact = Artifact("project config", "config.json", ArtifactPolicy.REQUIRED)
    with pytest.raises(StorageParseError):
        await storage.load_json_artifact(tmp_path, artifact, ProjectConfig)


def test_entity_path_rejects_traversal(storage):
    with pytest.raises(ValidationError):
        storage.get_entity_path("../outside")
    with pytest.raises(ValidationError):
        storage.get_entity_path("a/b")


def test_require_entity_dir_missing(storage):
    with pytest.raises(EntityNotFoundError) as exc_info:
        storage.require_entity_dir("missing")
    assert exc_info.value.kind == "project"
    assert exc_info.value.entity_id == "missing"


def test_remove_tree_reports_existence(storage, tmp_path):
    target = tmp_path / "projects" / "p1"
    target.mkdir(parents=True)
    (target / "config.json").write_text("{}", encoding="utf-8")
    assert storage.remove_tree(target) is True
    assert not target.exists()
    assert storage.remove_tree(target) is False

"""
Projects Router / 项目路由

提供单文档项目的 CRUD、版本（提交/检出/回滚/对比）与导出端点。
存储异常由应用级异常处理器统一转换为 HTTP 状态码。
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from branchwrite.dependencies import get_store
from branchwrite.exceptions import ValidationError
from branchwrite.schemas.project import (
    CommitCreate,
    CommitInfo,
    ContentUpdate,
    DiffResult,
    ExportRequest,
    ProjectConfig,
    ProjectCreate,
    ProjectData,
    ProjectStats,
)
from branchwrite.store import BranchWriteStore
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectConfig])
async def list_projects(store: BranchWriteStore = Depends(get_store)):
    """
    列出所有项目

    Returns:
        项目配置列表，按最后修改时间倒序
    """
    return await store.list_projects()


@router.post("", response_model=ProjectData)
async def create_project(payload: ProjectCreate, store: BranchWriteStore = Depends(get_store)):
    """
    创建新项目

    Args:
        payload: 项目创建请求

    Returns:
        新项目的完整数据
    """
    project = await store.create_project(payload.name, payload.description, payload.author)
    logger.info(f"Created project {project.config.id} via API")
    return project


@router.get("/{project_id}", response_model=ProjectData)
async def get_project(project_id: str, store: BranchWriteStore = Depends(get_store)):
    return await store.load_project(project_id)


@router.put("/{project_id}", response_model=ProjectData)
async def save_project(project_id: str, project: ProjectData, store: BranchWriteStore = Depends(get_store)):
    """
    整体保存项目

    Args:
        project_id: 项目ID，必须与请求体中的 config.id 一致
        project: 项目完整数据

    Returns:
        保存后的项目数据
    """
    if project.config.id != project_id:
        raise ValidationError(f"Project id mismatch: {project.config.id} != {project_id}")
    await store.save_project(project)
    return project


@router.delete("/{project_id}")
async def delete_project(project_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    删除项目（不存在时同样返回成功）

    Args:
        project_id: 项目ID

    Returns:
        删除结果
    """
    await store.delete_project(project_id)
    return {"success": True, "message": f"Project {project_id} deleted"}


@router.put("/{project_id}/content", response_model=ProjectData)
async def update_content(project_id: str, payload: ContentUpdate, store: BranchWriteStore = Depends(get_store)):
    """
    更新主文档正文并刷新统计

    Args:
        project_id: 项目ID
        payload: 新正文

    Returns:
        更新后的项目数据
    """
    return await store.update_project_content(project_id, payload.content)


@router.post("/{project_id}/export")
async def export_project(project_id: str, payload: ExportRequest, store: BranchWriteStore = Depends(get_store)):
    """
    导出项目为 Markdown 包

    Args:
        project_id: 项目ID
        payload: 导出目标目录

    Returns:
        导出目录路径
    """
    export_dir = await store.export_project(project_id, payload.destination)
    return {"success": True, "path": str(export_dir)}


@router.get("/{project_id}/stats", response_model=ProjectStats)
async def get_project_stats(project_id: str, store: BranchWriteStore = Depends(get_store)):
    return await store.get_project_stats(project_id)


@router.post("/{project_id}/commits", response_model=CommitInfo)
async def create_commit(project_id: str, payload: CommitCreate, store: BranchWriteStore = Depends(get_store)):
    """
    为当前正文创建提交

    Args:
        project_id: 项目ID
        payload: 提交信息（留空时使用默认信息）

    Returns:
        新提交
    """
    return await store.create_commit(project_id, payload.message, payload.is_auto_commit)


@router.get("/{project_id}/commits/{commit_id}")
async def checkout_commit(project_id: str, commit_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    检出提交快照（只读，不修改项目）

    Args:
        project_id: 项目ID
        commit_id: 提交ID

    Returns:
        快照正文
    """
    content = await store.checkout_commit(project_id, commit_id)
    return {"commit_id": commit_id, "content": content}


@router.post("/{project_id}/commits/{commit_id}/rollback", response_model=ProjectData)
async def rollback_project(project_id: str, commit_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    回滚到指定提交，并记录一次回滚提交

    Args:
        project_id: 项目ID
        commit_id: 目标提交ID

    Returns:
        回滚后的项目数据
    """
    project = await store.rollback_project(project_id, commit_id)
    logger.info(f"Rolled back project {project_id} to commit {commit_id} via API")
    return project


@router.get("/{project_id}/diff", response_model=DiffResult)
async def diff_commits(
    project_id: str,
    from_commit: str = Query(..., alias="from"),
    to_commit: str = Query(..., alias="to"),
    store: BranchWriteStore = Depends(get_store),
):
    """
    对比两个提交的快照（按行）

    Args:
        project_id: 项目ID
        from_commit: 旧提交ID
        to_commit: 新提交ID

    Returns:
        行级差异
    """
    return await store.diff_commits(project_id, from_commit, to_commit)


@router.post("/{project_id}/snapshots/prune")
async def prune_snapshots(project_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    清理没有提交引用的孤立快照

    Returns:
        被删除的快照ID列表
    """
    pruned = await store.prune_snapshots(project_id)
    return {"success": True, "pruned": pruned}


@router.get("/{project_id}/status")
async def get_version_status(project_id: str, store: BranchWriteStore = Depends(get_store)):
    """
    获取版本状态（是否有未提交修改、是否应自动提交）

    Returns:
        has_unsaved_changes / should_auto_commit
    """
    return await store.get_version_status(project_id)

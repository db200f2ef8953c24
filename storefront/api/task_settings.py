"""
Task Settings API Endpoints (admins)

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends

from storefront.core.auth import SessionUser, get_current_user, require_admin, require_superadmin
from storefront.domain.task import TASK_SETTINGS_ID, TaskItem, TaskSettingsWrite
from storefront.services.task_settings_service import get_task_settings_service

router = APIRouter()


@router.get("")
async def get_all_task_settings(_: SessionUser = Depends(require_admin)):
    settings = get_task_settings_service().get_all_task_settings()
    return {"status": "success", "count": len(settings), "data": [s.to_dict() for s in settings]}


@router.get("/current")
async def get_current_task_settings(_: SessionUser = Depends(get_current_user)):
    """Active requirements, or an empty document when none were saved"""
    return {"status": "success", "data": get_task_settings_service().current().to_dict()}


@router.get("/empty")
async def get_empty_task_settings(_: SessionUser = Depends(require_admin)):
    empty = get_task_settings_service().get_empty_task_settings()
    return {"status": "success", "data": {key: item.model_dump() for key, item in empty.items()}}


@router.post("", status_code=201)
async def create_task_settings(data: TaskSettingsWrite, _: SessionUser = Depends(require_admin)):
    created = get_task_settings_service().create_task_settings(data.settings, TASK_SETTINGS_ID)
    return {"status": "success", "data": created.to_dict()}


@router.get("/{settings_id}")
async def get_task_settings(settings_id: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_task_settings_service().get_task_settings_by_id(settings_id).to_dict()}


@router.put("/{settings_id}")
async def update_task_settings(settings_id: str, data: TaskSettingsWrite, _: SessionUser = Depends(require_admin)):
    updated = get_task_settings_service().update_task_settings(settings_id, data.settings)
    return {"status": "success", "data": updated.to_dict()}


@router.put("/{settings_id}/{task_key}")
async def update_specific_task(
    settings_id: str,
    task_key: str,
    item: TaskItem,
    _: SessionUser = Depends(require_admin)
):
    updated = get_task_settings_service().update_specific_task(settings_id, task_key, item)
    return {"status": "success", "data": updated.to_dict()}


@router.delete("/{settings_id}")
async def delete_task_settings(settings_id: str, _: SessionUser = Depends(require_admin)):
    get_task_settings_service().delete_task_settings(settings_id)
    return {"status": "success", "message": "Task settings deleted"}


@router.delete("/admin/{settings_id}")
async def admin_delete_task_settings(settings_id: str, _: SessionUser = Depends(require_superadmin)):
    get_task_settings_service().admin_delete_task_settings(settings_id)
    return {"status": "success", "message": "Task settings deleted"}

"""
Tasks API Endpoints
The customer's task board, task completion and purchases made from it

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from storefront.core.auth import SessionUser, get_current_user, require_admin
from storefront.domain.task import TaskCreate, TaskProgressUpdate, TaskUpdate
from storefront.services.purchase_service import get_purchase_service
from storefront.services.task_rules import format_currency
from storefront.services.task_service import get_task_service

router = APIRouter()


class PurchaseRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


@router.get("/me")
async def get_my_board(user: SessionUser = Depends(get_current_user)):
    """
    Task board of the current user (created on first visit)

    Returns:
        {"status": "success", "data": {"task", "entries": [{key, done, available, requirement}], "percentage"}}
    """
    return {"status": "success", "data": get_task_service().board(user.id)}


@router.post("/purchase")
async def purchase(data: PurchaseRequest, user: SessionUser = Depends(get_current_user)):
    result = get_purchase_service().purchase(user, data.product_id, data.quantity)
    return {
        "status": "success",
        "message": f"Purchase complete. Cashback {format_currency(result.cashback)}",
        "data": {
            "product": result.product.to_dict(),
            "sale": result.sale,
            "cost": result.cost,
            "cashback": result.cashback,
            "order": result.order,
        }
    }


@router.get("")
async def get_tasks(
    limit: int = Query(10, ge=1, le=10000),
    _: SessionUser = Depends(require_admin)
):
    tasks = get_task_service().get_tasks(limit=limit)
    return {"status": "success", "limit": limit, "count": len(tasks), "data": tasks}


@router.post("", status_code=201)
async def create_task(
    data: TaskCreate,
    user_id: str = Query(..., description="Owner of the new board"),
    _: SessionUser = Depends(require_admin)
):
    """Admin-made board; customers get theirs from GET /me"""
    return {"status": "success", "data": get_task_service().create_task(user_id, data)}


@router.delete("/admin/{task_id}")
async def admin_delete_task(task_id: str, _: SessionUser = Depends(require_admin)):
    get_task_service().admin_delete_task(task_id)
    return {"status": "success", "message": "Task deleted"}


@router.get("/{task_id}")
async def get_task(task_id: str, _: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_task_service().get_task_by_id(task_id)}


@router.put("/{task_id}")
async def update_task(task_id: str, data: TaskUpdate, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_task_service().update_task(task_id, data)}


@router.put("/{task_id}/progress")
async def update_task_progress(
    task_id: str,
    data: TaskProgressUpdate,
    _: SessionUser = Depends(require_admin)
):
    return {"status": "success", "data": get_task_service().update_task_progress(task_id, data.progress)}


@router.post("/{task_id}/complete/{task_key}")
async def complete_task(task_id: str, task_key: str, user: SessionUser = Depends(get_current_user)):
    """Mark a task done; the response names the celebration effect to play"""
    task, effect = get_task_service().complete_task(user, task_id, task_key)
    return {"status": "success", "data": {"task": task, "effect": effect}}


@router.delete("/{task_id}")
async def delete_task(task_id: str, user: SessionUser = Depends(get_current_user)):
    get_task_service().delete_task(user, task_id)
    return {"status": "success", "message": "Task deleted"}

"""
Orders API Endpoints

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Body, Depends, Query

from storefront.core.auth import SessionUser, get_current_user, require_admin
from storefront.domain.order import OrderCreate, OrderStatusUpdate, OrderUpdate
from storefront.services.order_service import get_order_service

router = APIRouter()


def _order_lines(orders):
    lines = get_order_service().describe_orders(orders)
    return [
        {
            **line["order"].model_dump(),
            "product": line["product"].to_dict() if line["product"] else None,
            "unit_price": line["unit_price"],
            "total": line["total"],
            "commission": line["commission"],
        }
        for line in lines
    ]


@router.get("")
async def get_orders(
    limit: int = Query(10, ge=1, le=10000),
    _: SessionUser = Depends(require_admin)
):
    orders = get_order_service().get_orders(limit=limit)
    return {"status": "success", "limit": limit, "count": len(orders), "data": orders}


@router.get("/me")
async def get_my_orders(user: SessionUser = Depends(get_current_user)):
    """Orders of the current user with product, total and commission"""
    orders = get_order_service().get_user_orders(user)
    return {"status": "success", "count": len(orders), "data": _order_lines(orders)}


@router.get("/admin/all")
async def admin_get_all_orders(
    limit: int = Query(100, ge=1, le=10000),
    _: SessionUser = Depends(require_admin)
):
    orders = get_order_service().admin_get_all_orders(limit=limit)
    return {"status": "success", "limit": limit, "count": len(orders), "data": _order_lines(orders)}


@router.delete("/admin/{order_id}")
async def admin_delete_order(order_id: str, _: SessionUser = Depends(require_admin)):
    get_order_service().admin_delete_order(order_id)
    return {"status": "success", "message": "Order deleted"}


@router.get("/{order_id}")
async def get_order(order_id: str, _: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_order_service().get_order_by_id(order_id)}


@router.post("", status_code=201)
async def create_order(data: OrderCreate, user: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_order_service().create_order(user, data)}


@router.put("/{order_id}")
async def update_order(order_id: str, data: OrderUpdate, user: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_order_service().update_order(user, order_id, data)}


@router.delete("/{order_id}")
async def delete_order(order_id: str, user: SessionUser = Depends(get_current_user)):
    get_order_service().delete_order(user, order_id)
    return {"status": "success", "message": "Order deleted"}


@router.put("/{order_id}/shipment")
async def add_shipment_to_order(
    order_id: str,
    shipment_automation_id: str = Body(..., embed=True),
    _: SessionUser = Depends(require_admin)
):
    order = get_order_service().add_shipment_to_order(order_id, shipment_automation_id)
    return {"status": "success", "data": order}


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    _: SessionUser = Depends(require_admin)
):
    return {"status": "success", "data": get_order_service().update_order_status(order_id, data.status)}

"""
API endpoints for shipments and shipment automations.

- /api/v1/shipment-automations - timed progress templates (admins)
- /api/v1/shipments - shipments of sellers, with their current step

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends, Query

from storefront.core.auth import SessionUser, get_current_user, require_admin, require_seller, require_superadmin
from storefront.domain.shipment import (
    AutomationProgressUpdate,
    Shipment,
    ShipmentAutomationCreate,
    ShipmentAutomationUpdate,
    ShipmentCreate,
    ShipmentUpdate,
)
from storefront.services.shipment_service import get_shipment_service


# ============================================================================
# ROUTERS
# ============================================================================

automations_router = APIRouter(prefix="/api/v1/shipment-automations", tags=["Shipment Automations"])

shipments_router = APIRouter(prefix="/api/v1/shipments", tags=["Shipments"])


def _with_step(shipment: Shipment) -> dict:
    step = get_shipment_service().shipment_status(shipment)
    return {**shipment.model_dump(), "current_step": step.model_dump() if step else None}


# ============================================================================
# SHIPMENT AUTOMATIONS
# ============================================================================

@automations_router.get("")
async def get_shipment_automations(
    limit: int = Query(10, ge=1, le=1000),
    _: SessionUser = Depends(require_seller)
):
    automations = get_shipment_service().get_shipment_automations(limit=limit)
    return {"status": "success", "limit": limit, "count": len(automations), "data": automations}


@automations_router.get("/me")
async def get_my_shipment_automations(user: SessionUser = Depends(require_admin)):
    automations = get_shipment_service().get_user_shipment_automations(user.id)
    return {"status": "success", "count": len(automations), "data": automations}


@automations_router.post("", status_code=201)
async def create_shipment_automation(data: ShipmentAutomationCreate, user: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_shipment_service().create_shipment_automation(user, data)}


@automations_router.delete("/admin/{automation_id}")
async def admin_delete_shipment_automation(automation_id: str, _: SessionUser = Depends(require_superadmin)):
    get_shipment_service().admin_delete_shipment_automation(automation_id)
    return {"status": "success", "message": "Shipment automation deleted"}


@automations_router.get("/{automation_id}")
async def get_shipment_automation(automation_id: str, _: SessionUser = Depends(require_seller)):
    return {"status": "success", "data": get_shipment_service().get_shipment_automation_by_id(automation_id)}


@automations_router.put("/{automation_id}")
async def update_shipment_automation(
    automation_id: str,
    data: ShipmentAutomationUpdate,
    user: SessionUser = Depends(require_admin)
):
    automation = get_shipment_service().update_shipment_automation(user, automation_id, data)
    return {"status": "success", "data": automation}


@automations_router.put("/{automation_id}/progress")
async def update_automation_progress(
    automation_id: str,
    data: AutomationProgressUpdate,
    _: SessionUser = Depends(require_admin)
):
    return {"status": "success", "data": get_shipment_service().update_progress(automation_id, data.progress)}


@automations_router.delete("/{automation_id}")
async def delete_shipment_automation(automation_id: str, user: SessionUser = Depends(require_admin)):
    get_shipment_service().delete_shipment_automation(user, automation_id)
    return {"status": "success", "message": "Shipment automation deleted"}


# ============================================================================
# SHIPMENTS
# ============================================================================

@shipments_router.get("")
async def get_shipments(
    limit: int = Query(10000, ge=1, le=10000),
    _: SessionUser = Depends(require_admin)
):
    shipments = get_shipment_service().get_shipments(limit=limit)
    return {"status": "success", "limit": limit, "count": len(shipments), "data": [_with_step(s) for s in shipments]}


@shipments_router.get("/me")
async def get_my_shipments(user: SessionUser = Depends(get_current_user)):
    shipments = get_shipment_service().get_user_shipments(user.id)
    return {"status": "success", "count": len(shipments), "data": [_with_step(s) for s in shipments]}


@shipments_router.get("/recent")
async def get_recent_shipments(
    days: int = Query(30, ge=1, le=365),
    _: SessionUser = Depends(require_admin)
):
    shipments = get_shipment_service().get_recent_shipments(days=days)
    return {"status": "success", "count": len(shipments), "data": [_with_step(s) for s in shipments]}


@shipments_router.get("/product/{product_id}")
async def get_shipments_by_product(product_id: str, _: SessionUser = Depends(require_admin)):
    shipments = get_shipment_service().get_shipments_by_product_id(product_id)
    return {"status": "success", "count": len(shipments), "data": [_with_step(s) for s in shipments]}


@shipments_router.post("", status_code=201)
async def create_shipment(data: ShipmentCreate, user: SessionUser = Depends(require_seller)):
    return {"status": "success", "data": get_shipment_service().create_shipment(user.id, data)}


@shipments_router.delete("/admin/{shipment_id}")
async def admin_delete_shipment(shipment_id: str, _: SessionUser = Depends(require_admin)):
    get_shipment_service().admin_delete_shipment(shipment_id)
    return {"status": "success", "message": "Shipment deleted"}


@shipments_router.get("/{shipment_id}")
async def get_shipment(shipment_id: str, _: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": _with_step(get_shipment_service().get_shipment_by_id(shipment_id))}


@shipments_router.put("/{shipment_id}")
async def update_shipment(shipment_id: str, data: ShipmentUpdate, user: SessionUser = Depends(require_seller)):
    return {"status": "success", "data": get_shipment_service().update_shipment(user, shipment_id, data)}


@shipments_router.delete("/{shipment_id}")
async def delete_shipment(shipment_id: str, user: SessionUser = Depends(require_seller)):
    get_shipment_service().delete_shipment(user, shipment_id)
    return {"status": "success", "message": "Shipment deleted"}

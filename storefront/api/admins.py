"""
Admin Accounts API Endpoints (superadmins)

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends, Query

from storefront.core.auth import SessionUser, require_superadmin
from storefront.domain.user import AccountUpdate, AdminCreate
from storefront.services.admin_service import get_admin_service

router = APIRouter()


@router.get("")
async def get_admins(
    limit: int = Query(10000, ge=1, le=10000),
    offset: int = Query(0, ge=0),
    user: SessionUser = Depends(require_superadmin)
):
    admins, total = get_admin_service().get_admins(user, limit=limit, offset=offset)
    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(admins),
        "data": [admin.to_dict() for admin in admins]
    }


@router.post("", status_code=201)
async def create_admin(data: AdminCreate, user: SessionUser = Depends(require_superadmin)):
    admin = get_admin_service().create_admin(user, data)
    return {"status": "success", "data": admin.to_dict(), "user_id": admin.id}


@router.get("/{admin_id}")
async def get_admin(admin_id: str, _: SessionUser = Depends(require_superadmin)):
    return {"status": "success", "data": get_admin_service().get_admin_by_id(admin_id).to_dict()}


@router.put("/{admin_id}")
async def update_admin(admin_id: str, data: AccountUpdate, user: SessionUser = Depends(require_superadmin)):
    admin = get_admin_service().update_admin(user, admin_id, data)
    return {"status": "success", "data": admin.to_dict()}


@router.delete("/{admin_id}")
async def delete_admin(admin_id: str, user: SessionUser = Depends(require_superadmin)):
    get_admin_service().delete_admin(user, admin_id)
    return {"status": "success", "message": "Admin deleted successfully"}

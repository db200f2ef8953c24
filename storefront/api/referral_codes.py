"""
Referral Codes API Endpoints

Author: TM3
Date: 2026-03-02
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from storefront.core.auth import SessionUser, require_admin, require_superadmin
from storefront.core.rate_limit import auth_rate_limit
from storefront.domain.referral_code import ReferralCodeUpdate
from storefront.services.referral_code_service import get_referral_code_service

router = APIRouter()


@router.get("")
async def get_referral_codes(
    limit: int = Query(25, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    _: SessionUser = Depends(require_superadmin)
):
    codes, total = get_referral_code_service().get_referral_codes(limit=limit, offset=offset)
    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(codes),
        "data": codes
    }


@router.get("/me")
async def get_my_referral_codes(user: SessionUser = Depends(require_admin)):
    codes = get_referral_code_service().get_user_referral_codes(user.id)
    return {"status": "success", "count": len(codes), "data": codes}


@router.post("", status_code=201)
async def create_referral_code(user: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_referral_code_service().create_referral_code(user)}


@router.post("/admin", status_code=201)
async def admin_create_referral_code(
    belongs_to: Optional[str] = Body(None, embed=True),
    _: SessionUser = Depends(require_superadmin)
):
    return {"status": "success", "data": get_referral_code_service().admin_create_referral_code(belongs_to)}


@router.get("/validate/{code}")
async def validate_referral_code(code: str, _: None = Depends(auth_rate_limit)):
    """Used by the signup form; 400 with the reason when the code cannot be used"""
    get_referral_code_service().validate_referral_code(code)
    return {"status": "success", "data": {"code": code, "valid": True}}


@router.get("/code/{code}")
async def get_referral_code_by_code(code: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_referral_code_service().get_referral_code_by_code(code)}


@router.put("/admin/{code_id}")
async def admin_update_referral_code(
    code_id: str,
    data: ReferralCodeUpdate,
    _: SessionUser = Depends(require_superadmin)
):
    return {"status": "success", "data": get_referral_code_service().admin_update_referral_code(code_id, data)}


@router.delete("/admin/{code_id}")
async def admin_delete_referral_code(code_id: str, _: SessionUser = Depends(require_superadmin)):
    get_referral_code_service().admin_delete_referral_code(code_id)
    return {"status": "success", "message": "Referral code deleted"}


@router.get("/{code_id}")
async def get_referral_code(code_id: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_referral_code_service().get_referral_code_by_id(code_id)}


@router.put("/{code_id}")
async def update_referral_code(code_id: str, data: ReferralCodeUpdate, user: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_referral_code_service().update_referral_code(user, code_id, data)}


@router.delete("/{code_id}")
async def delete_referral_code(code_id: str, user: SessionUser = Depends(require_admin)):
    get_referral_code_service().delete_referral_code(user, code_id)
    return {"status": "success", "message": "Referral code deleted"}

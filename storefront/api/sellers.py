"""
Seller Accounts API Endpoints (admins)

Admins see the sellers that signed up with one of their referral codes;
superadmins see every seller.

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends, Query

from storefront.core.auth import SessionUser, require_admin
from storefront.domain.user import AccountUpdate, SellerCreate
from storefront.services.seller_service import get_seller_service

router = APIRouter()


@router.get("")
async def get_sellers(
    page: int = Query(0, ge=0),
    page_size: int = Query(25, ge=1, le=10000),
    keyword: str = Query(""),
    user: SessionUser = Depends(require_admin)
):
    service = get_seller_service()
    if user.is_superadmin:
        sellers, total = service.get_all_sellers(page=page, page_size=page_size, keyword=keyword)
    else:
        sellers, total = service.get_sellers_by_admin(user.id, page=page, page_size=page_size, keyword=keyword)

    return {
        "status": "success",
        "total": total,
        "limit": page_size,
        "offset": page * page_size,
        "count": len(sellers),
        "data": [seller.to_dict() for seller in sellers]
    }


@router.post("", status_code=201)
async def create_seller(data: SellerCreate, _: SessionUser = Depends(require_admin)):
    seller = get_seller_service().create_seller(data)
    return {"status": "success", "message": "Account created successfully", "data": seller.to_dict()}


@router.get("/referral-code/{code}")
async def get_sellers_by_referral_code(code: str, _: SessionUser = Depends(require_admin)):
    sellers = get_seller_service().get_sellers_by_referral_code(code)
    return {"status": "success", "total": len(sellers), "data": [seller.to_dict() for seller in sellers]}


@router.get("/{seller_id}")
async def get_seller(seller_id: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_seller_service().get_seller_by_id(seller_id).to_dict()}


@router.put("/{seller_id}")
async def update_seller(seller_id: str, data: AccountUpdate, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_seller_service().update_seller(seller_id, data).to_dict()}


@router.delete("/{seller_id}")
async def delete_seller(seller_id: str, _: SessionUser = Depends(require_admin)):
    get_seller_service().delete_seller(seller_id)
    return {"status": "success", "message": "Seller deleted successfully"}

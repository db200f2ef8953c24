"""
Withdrawals API Endpoints
Sellers request cash-outs; admins review the requests of the sellers they
referred, superadmins review all of them.

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends, Query

from storefront.core.auth import SessionUser, get_current_user, require_admin, require_superadmin
from storefront.domain.withdrawal import WithdrawalCreate, WithdrawalStatusUpdate, WithdrawalUpdate
from storefront.services.withdrawal_service import get_withdrawal_service

router = APIRouter()


@router.post("", status_code=201)
async def create_withdrawal(data: WithdrawalCreate, user: SessionUser = Depends(get_current_user)):
    withdrawal = get_withdrawal_service().create_withdrawal(user, data.withdraw_amount)
    return {"status": "success", "data": withdrawal.to_dict()}


@router.get("")
async def admin_get_withdrawals(
    page: int = Query(0, ge=0),
    limit: int = Query(25, ge=1, le=1000),
    keyword: str = Query(""),
    user: SessionUser = Depends(require_admin)
):
    """
    Withdrawals newest first

    Superadmins see every request, admins only those of their referred sellers.
    """
    service = get_withdrawal_service()
    if user.is_superadmin:
        withdrawals, total = service.admin_get_all_withdrawals(page=page, limit=limit, keyword=keyword)
    else:
        withdrawals, total = service.get_withdrawals_by_admin(user.id, page=page, limit=limit)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": page * limit,
        "count": len(withdrawals),
        "data": [w.to_dict() for w in withdrawals]
    }


@router.get("/me")
async def get_my_withdrawals(user: SessionUser = Depends(get_current_user)):
    withdrawals = get_withdrawal_service().get_user_withdrawals(user.id)
    return {"status": "success", "count": len(withdrawals), "data": [w.to_dict() for w in withdrawals]}


@router.get("/me/pending")
async def has_pending_withdrawal(user: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": {"pending": get_withdrawal_service().has_pending_withdrawal(user.id)}}


@router.delete("/admin/{withdrawal_id}")
async def admin_delete_withdrawal(withdrawal_id: str, _: SessionUser = Depends(require_superadmin)):
    get_withdrawal_service().admin_delete_withdrawal(withdrawal_id)
    return {"status": "success", "message": "Withdrawal deleted"}


@router.get("/{withdrawal_id}")
async def get_withdrawal(withdrawal_id: str, user: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_withdrawal_service().get_withdrawal_by_id(withdrawal_id).to_dict()}


@router.put("/{withdrawal_id}")
async def update_withdrawal(
    withdrawal_id: str,
    data: WithdrawalUpdate,
    user: SessionUser = Depends(get_current_user)
):
    withdrawal = get_withdrawal_service().update_withdrawal(user, withdrawal_id, data)
    return {"status": "success", "data": withdrawal.to_dict()}


@router.delete("/{withdrawal_id}")
async def delete_withdrawal(withdrawal_id: str, user: SessionUser = Depends(get_current_user)):
    get_withdrawal_service().delete_withdrawal(user, withdrawal_id)
    return {"status": "success", "message": "Withdrawal deleted"}


@router.put("/{withdrawal_id}/status")
async def update_withdrawal_status(
    withdrawal_id: str,
    data: WithdrawalStatusUpdate,
    _: SessionUser = Depends(require_admin)
):
    withdrawal = get_withdrawal_service().admin_update_withdrawal_status(withdrawal_id, data.status)
    return {"status": "success", "data": withdrawal.to_dict()}


@router.post("/{withdrawal_id}/approve")
async def approve_withdrawal(withdrawal_id: str, _: SessionUser = Depends(require_admin)):
    withdrawal = get_withdrawal_service().approve_withdrawal(withdrawal_id)
    return {"status": "success", "message": "Withdrawal approved", "data": withdrawal.to_dict()}


@router.post("/{withdrawal_id}/reject")
async def reject_withdrawal(withdrawal_id: str, _: SessionUser = Depends(require_admin)):
    withdrawal = get_withdrawal_service().reject_withdrawal(withdrawal_id)
    return {"status": "success", "message": "Withdrawal rejected", "data": withdrawal.to_dict()}

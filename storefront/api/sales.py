"""
Sales API Endpoints
Customer wallets and sales statistics

Author: TM3
Date: 2026-03-02
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.auth import SessionUser, get_current_user, require_admin, require_superadmin
from storefront.core.errors import StorefrontError
from storefront.domain.sale import SaleCreate, SaleUpdate, TotalSalesIncrement
from storefront.services.sale_service import get_sale_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_sales(
    limit: int = Query(10000, ge=1, le=10000),
    _: SessionUser = Depends(require_admin)
):
    try:
        sales = get_sale_service().get_sales(limit=limit)
        return {"status": "success", "limit": limit, "count": len(sales), "data": sales}

    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error fetching sales: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching sales: {str(e)}")


@router.get("/me")
async def get_my_sales(user: SessionUser = Depends(get_current_user)):
    sales = get_sale_service().get_user_sales(user.id)
    return {"status": "success", "count": len(sales), "data": sales}


@router.get("/user/{user_id}")
async def get_sales_by_user_id(user_id: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_sale_service().get_sales_by_user_id(user_id)}


@router.post("", status_code=201)
async def create_sale(data: SaleCreate, _: SessionUser = Depends(require_admin)):
    """Create a wallet; an existing wallet of the same user is returned as is"""
    sale, created = get_sale_service().create_sale(data)
    message = "Sales record created" if created else "Sales record already exists"
    return {"status": "success", "message": message, "data": sale}


@router.delete("/admin/{sale_id}")
async def admin_delete_sale(sale_id: str, _: SessionUser = Depends(require_superadmin)):
    get_sale_service().admin_delete_sale(sale_id)
    return {"status": "success", "message": "Sales record deleted"}


@router.get("/{sale_id}")
async def get_sale(sale_id: str, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_sale_service().get_sale_by_id(sale_id)}


@router.put("/{sale_id}")
async def update_sale(sale_id: str, data: SaleUpdate, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_sale_service().update_sale(sale_id, data)}


@router.post("/{sale_id}/total-sales")
async def update_total_sales(sale_id: str, data: TotalSalesIncrement, _: SessionUser = Depends(require_admin)):
    return {"status": "success", "data": get_sale_service().update_total_sales(sale_id, data.amount)}


@router.delete("/{sale_id}")
async def delete_sale(sale_id: str, _: SessionUser = Depends(require_admin)):
    get_sale_service().delete_sale(sale_id)
    return {"status": "success", "message": "Sales record deleted"}

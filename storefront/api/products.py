"""
Products API Endpoints
Catalog reads for everyone, catalog management for sellers and admins

Author: TM3
Date: 2026-03-02
"""
import logging
import mimetypes
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile

from storefront.core.auth import SessionUser, require_admin, require_seller
from storefront.core.errors import StorefrontError
from storefront.domain.product import ProductCreate, ProductUpdate
from storefront.services.product_service import ImageUpload, get_product_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_uploads(files: Optional[List[UploadFile]]) -> List[ImageUpload]:
    uploads = []
    for file in files or []:
        content = await file.read()
        if content:
            uploads.append(ImageUpload(content=content, filename=file.filename or "image", content_type=file.content_type))
    return uploads


@router.get("")
async def get_products(
    keyword: str = Query("", description="Case-insensitive match inside the product name"),
    limit: int = Query(10000, ge=1, le=10000),
    offset: int = Query(0, ge=0)
):
    """
    List products, newest first

    Returns:
        {"status": "success", "total", "limit", "offset", "count", "data": [...]}
    """
    try:
        products, total = get_product_service().get_products(limit=limit, offset=offset, keyword=keyword)

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


# Images (declared before /{product_id} so the paths do not collide)

@router.post("/images", status_code=201)
async def upload_product_images(
    files: List[UploadFile] = File(...),
    _: SessionUser = Depends(require_seller)
):
    service = get_product_service()
    file_ids = service.upload_product_images(await read_uploads(files))
    return {
        "status": "success",
        "count": len(file_ids),
        "data": [{"id": file_id, "url": service.image_url(file_id)} for file_id in file_ids]
    }


@router.get("/images/{file_id}")
async def get_product_image(file_id: str):
    content = get_product_service().get_product_image(file_id)
    media_type = mimetypes.guess_type(file_id)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type, headers={"Cache-Control": "public, max-age=1800"})


@router.post("/with-images", status_code=201)
async def create_product_with_images(
    name: str = Form(...),
    price: float = Form(...),
    description: str = Form(""),
    quantity: int = Form(0),
    discount_rate: float = Form(0),
    files: List[UploadFile] = File(default=[]),
    _: SessionUser = Depends(require_seller)
):
    data = ProductCreate(
        name=name, description=description, price=price, quantity=quantity, discount_rate=discount_rate
    )
    product = get_product_service().create_product_with_images(data, await read_uploads(files))
    return {"status": "success", "data": product.to_dict()}


@router.get("/{product_id}")
async def get_product(product_id: str):
    product = get_product_service().get_product_by_id(product_id)
    return {"status": "success", "data": product.to_dict()}


@router.post("", status_code=201)
async def create_product(data: ProductCreate, _: SessionUser = Depends(require_seller)):
    product = get_product_service().create_product(data)
    return {"status": "success", "data": product.to_dict()}


@router.put("/{product_id}")
async def update_product(product_id: str, data: ProductUpdate, _: SessionUser = Depends(require_seller)):
    product = get_product_service().update_product(product_id, data)
    return {"status": "success", "data": product.to_dict()}


@router.put("/{product_id}/with-images")
async def update_product_with_images(
    product_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    quantity: Optional[int] = Form(None),
    discount_rate: Optional[float] = Form(None),
    keep_existing_images: bool = Form(True),
    files: List[UploadFile] = File(default=[]),
    _: SessionUser = Depends(require_seller)
):
    """Update fields and append uploaded images to the gallery"""
    data = ProductUpdate(
        name=name, description=description, price=price, quantity=quantity, discount_rate=discount_rate
    )
    product = get_product_service().update_product_with_images(
        product_id, data, await read_uploads(files), keep_existing_images=keep_existing_images
    )
    return {"status": "success", "data": product.to_dict()}


@router.delete("/{product_id}")
async def delete_product(product_id: str, _: SessionUser = Depends(require_seller)):
    get_product_service().delete_product(product_id)
    return {"status": "success", "message": "Product deleted"}


@router.delete("/admin/{product_id}")
async def admin_delete_product(product_id: str, _: SessionUser = Depends(require_admin)):
    get_product_service().admin_delete_product(product_id)
    return {"status": "success", "message": "Product deleted"}

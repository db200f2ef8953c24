"""
Seller dashboard

The route guard has already checked the session and label for every
path under /seller. Product management is shared with the superadmin
dashboard through `product_manager` and `handle_product_*`.

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from storefront.api.products import read_uploads
from storefront.core.errors import StorefrontError
from storefront.domain.product import ProductCreate, ProductUpdate
from storefront.services.product_service import get_product_service
from storefront.services.sale_service import get_sale_service
from storefront.services.shipment_service import get_shipment_service
from storefront.web._layout import (
    card,
    data_table,
    esc,
    fmt_date,
    money,
    post_button,
    redirect,
    render,
    require_page_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


# --- shared product management ---------------------------------------

def product_manager(base_path: str, keyword: str = "") -> str:
    """Product table with inline edit forms and a create form"""
    service = get_product_service()
    products, total = service.get_products(keyword=keyword)

    rows = []
    for p in products:
        thumb = ""
        if p.cover_image:
            thumb = f'<img src="{esc(service.image_url(p.cover_image))}" width="48" alt="">'
        edit = f"""
          <form method="POST" action="{base_path}/{esc(p.id)}/update" enctype="multipart/form-data" class="inline">
            <input type="number" name="price" value="{p.price:g}" step="0.01" min="0" style="width:90px">
            <input type="number" name="discount_rate" value="{p.discount_rate:g}" step="0.1" min="0" max="100" style="width:70px">
            <input type="number" name="quantity" value="{p.quantity}" min="0" style="width:70px">
            <input type="file" name="files" accept="image/*" multiple style="width:180px">
            <button class="button-small" type="submit">Save</button>
          </form>
        """
        rows.append([
            thumb,
            esc(p.name),
            money(p.final_price),
            str(p.quantity),
            edit,
            post_button(f"{base_path}/{p.id}/delete", "Delete", confirm=f"Delete {p.name}?"),
        ])

    search = f"""
      <form method="GET" action="{base_path}" class="form-row">
        <div class="form-col"><input type="text" name="keyword" value="{esc(keyword)}" placeholder="Search by name"></div>
        <button class="button-primary" type="submit">Search</button>
      </form>
    """
    create = f"""
      <form method="POST" action="{base_path}" enctype="multipart/form-data">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Name</label><input type="text" name="name" required></div>
          <div class="form-col"><label class="label-small">Price</label><input type="number" name="price" step="0.01" min="0" required></div>
          <div class="form-col"><label class="label-small">Discount %</label><input type="number" name="discount_rate" value="0" step="0.1" min="0" max="100"></div>
          <div class="form-col"><label class="label-small">Quantity</label><input type="number" name="quantity" value="0" min="0"></div>
        </div>
        <div class="form-row">
          <div class="form-col"><label class="label-small">Description</label><textarea name="description" rows="2"></textarea></div>
          <div class="form-col"><label class="label-small">Images</label><input type="file" name="files" accept="image/*" multiple></div>
        </div>
        <button class="button-primary" type="submit">Add product</button>
      </form>
    """
    table = data_table(["", "Name", "Final price", "Stock", "Price / discount / stock / images", ""], rows,
                       empty="No products yet.")
    return card("Add product", create) + card("Products", search + table, subtext=f"{total} products")


async def handle_product_create(
    base_path: str,
    name: str,
    price: float,
    description: str,
    quantity: int,
    discount_rate: float,
    files: Optional[List[UploadFile]]
):
    try:
        data = ProductCreate(
            name=name,
            price=price,
            description=description,
            quantity=quantity,
            discount_rate=discount_rate
        )
        product = get_product_service().create_product_with_images(data, await read_uploads(files))
    except ValueError:
        return redirect(base_path, error="Check the price, discount and quantity")
    except StorefrontError as e:
        return redirect(base_path, error=e.message)
    return redirect(base_path, message=f"Created {product.name}")


async def handle_product_update(
    base_path: str,
    product_id: str,
    price: Optional[float],
    discount_rate: Optional[float],
    quantity: Optional[int],
    files: Optional[List[UploadFile]]
):
    try:
        data = ProductUpdate(price=price, discount_rate=discount_rate, quantity=quantity)
        product = get_product_service().update_product_with_images(product_id, data, await read_uploads(files))
    except ValueError:
        return redirect(base_path, error="Check the price, discount and quantity")
    except StorefrontError as e:
        return redirect(base_path, error=e.message)
    return redirect(base_path, message=f"Updated {product.name}")


def handle_product_delete(base_path: str, product_id: str, admin: bool = False):
    service = get_product_service()
    try:
        if admin:
            service.admin_delete_product(product_id)
        else:
            service.delete_product(product_id)
    except StorefrontError as e:
        return redirect(base_path, error=e.message)
    return redirect(base_path, message="Product deleted")


# --- pages -----------------------------------------------------------

@router.get("/seller", response_class=HTMLResponse)
async def seller_home(request: Request):
    user = require_page_user(request)
    sale = get_sale_service().get_sales_by_user_id(user.id)
    shipments = get_shipment_service().get_user_shipments(user.id)
    stats = f"""
      <div class="grid">
        <div><p class="muted">Total sales</p><p class="stat">{money(sale.total_sales if sale else 0)}</p></div>
        <div><p class="muted">Shipments</p><p class="stat">{len(shipments)}</p></div>
      </div>
      <p><a href="/seller/product">Manage products</a> &middot; <a href="/seller/shipment">Manage shipments</a>
         &middot; <a href="/seller/sales">Sales</a></p>
    """
    return render(request, card("Seller dashboard", stats), title="Seller")


@router.get("/seller/product", response_class=HTMLResponse)
async def seller_products(request: Request, keyword: str = ""):
    require_page_user(request)
    return render(request, product_manager("/seller/product", keyword), title="Products")


@router.post("/seller/product")
async def seller_create_product(
    name: str = Form(...),
    price: float = Form(...),
    description: str = Form(""),
    quantity: int = Form(0),
    discount_rate: float = Form(0),
    files: Optional[List[UploadFile]] = File(None)
):
    return await handle_product_create("/seller/product", name, price, description, quantity, discount_rate, files)


@router.post("/seller/product/{product_id}/update")
async def seller_update_product(
    product_id: str,
    price: Optional[float] = Form(None),
    discount_rate: Optional[float] = Form(None),
    quantity: Optional[int] = Form(None),
    files: Optional[List[UploadFile]] = File(None)
):
    return await handle_product_update("/seller/product", product_id, price, discount_rate, quantity, files)


@router.post("/seller/product/{product_id}/delete")
async def seller_delete_product(product_id: str):
    return handle_product_delete("/seller/product", product_id)


@router.get("/seller/sales", response_class=HTMLResponse)
async def seller_sales(request: Request):
    user = require_page_user(request)
    sales = get_sale_service().get_user_sales(user.id)
    rows = [
        [str(s.task_complete), money(s.total_sales), money(s.balance), money(s.total_earning)]
        for s in sales
    ]
    table = data_table(["Tasks completed", "Total sales", "Balance", "Total earning"], rows,
                       empty="No sales data yet.")
    return render(request, card("Sales", table), title="Sales")


@router.get("/seller/shipment", response_class=HTMLResponse)
async def seller_shipments(request: Request):
    user = require_page_user(request)
    service = get_shipment_service()
    shipments = service.get_user_shipments(user.id)
    products = get_product_service().get_products_by_ids([s.product_id for s in shipments])

    rows = []
    for shipment in shipments:
        step = service.shipment_status(shipment)
        product = products.get(shipment.product_id)
        rows.append([
            esc(shipment.customer_name),
            esc(product.name if product else shipment.product_id),
            fmt_date(shipment.order_date),
            esc(step.name if step else "No automation"),
        ])
    table = data_table(["Customer", "Product", "Order date", "Current step"], rows, empty="No shipments yet.")
    return render(request, card("Shipments", table), title="Shipments")


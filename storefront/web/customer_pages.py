"""
Customer pages

- /         product catalog with search
- /product  product details
- /task     daily task board with purchases and celebrations
- /orders   order history with commission
- /my       wallet, withdrawals and profile
- /contact  customer service links

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import List

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse

from storefront.core.errors import StorefrontError
from storefront.core.timeutil import utc_date, utcnow
from storefront.domain.product import Product
from storefront.services.auth_service import get_auth_service
from storefront.services.order_service import get_order_service
from storefront.services.product_service import get_product_service
from storefront.services.purchase_service import get_purchase_service
from storefront.services.sale_service import get_sale_service
from storefront.services.social_settings_service import get_social_settings_service
from storefront.services.task_rules import format_currency, is_trial_bonus_date_today
from storefront.services.task_service import get_task_service
from storefront.services.withdrawal_service import get_withdrawal_service
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
    status_pill,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


def _image_tag(product: Product, width: int = 160) -> str:
    if not product.cover_image:
        return ""
    src = get_product_service().image_url(product.cover_image)
    return f'<img src="{esc(src)}" alt="{esc(product.name)}" width="{width}" loading="lazy">'


def _price_html(product: Product) -> str:
    if product.discount_rate:
        return f'<s class="muted">{money(product.price)}</s> <strong>{money(product.final_price)}</strong>'
    return f"<strong>{money(product.price)}</strong>"


def _product_cards(products: List[Product]) -> str:
    if not products:
        return '<p class="muted">No products found.</p>'
    cells = []
    for product in products:
        stock = '<span class="pill pill-rejected">Out of stock</span>' if product.is_out_of_stock else ""
        cells.append(f"""
        <div class="card">
          <a href="/product?id={esc(product.id)}">{_image_tag(product)}</a>
          <p class="mini-head"><a href="/product?id={esc(product.id)}">{esc(product.name)}</a></p>
          <p>{_price_html(product)} {stock}</p>
        </div>
        """)
    return f'<div class="grid">{"".join(cells)}</div>'


# --- catalog ---------------------------------------------------------

@router.get("/", response_class=HTMLResponse)
async def home(request: Request, keyword: str = ""):
    products, total = get_product_service().get_products(keyword=keyword)
    search = f"""
      <form method="GET" action="/" class="form-row">
        <div class="form-col"><input type="text" name="keyword" value="{esc(keyword)}" placeholder="Search products"></div>
        <button class="button-primary" type="submit">Search</button>
      </form>
    """
    body_html = card("Products", search + _product_cards(products), subtext=f"{total} products")
    return render(request, body_html, title="Storefront")


@router.get("/product", response_class=HTMLResponse)
async def product_page(request: Request, id: str = ""):
    service = get_product_service()
    if not id:
        products, _ = service.get_products()
        return render(request, card("All products", _product_cards(products)), title="Products")

    product = service.get_product_by_id(id)
    images = "".join(
        f'<img src="{esc(service.image_url(file_id))}" alt="{esc(product.name)}" width="240" loading="lazy"> '
        for file_id in product.image_urls
    )
    body_html = card(product.name, f"""
      <div>{images}</div>
      <p>{_price_html(product)}</p>
      <p class="muted">Discount {product.discount_rate:g}% &middot; {product.quantity} in stock</p>
      <p>{esc(product.description)}</p>
    """)
    return render(request, body_html, title=product.name)


# --- tasks -----------------------------------------------------------

def _task_cell(entry: dict, products: dict) -> str:
    key = entry["key"]
    requirement = entry["requirement"]
    classes = ["task-cell"]
    if entry["done"]:
        classes.append("task-done")
    elif not entry["available"]:
        classes.append("task-locked")

    detail = ""
    if requirement.has_requirement:
        product = products.get(requirement.product_id)
        name = product.name if product else requirement.product_id
        units = requirement.required_amount or 1
        detail = f'<p class="muted">{esc(name)} &times; {units}</p>'

    if entry["done"]:
        action = '<span class="pill pill-approved">Done</span>'
    elif not entry["available"]:
        action = '<span class="pill">Locked</span>'
    else:
        buttons = []
        if requirement.has_requirement:
            buttons.append(post_button("/task/purchase", "Buy", hidden={
                "product_id": requirement.product_id,
                "quantity": requirement.required_amount or 1,
            }))
        buttons.append(post_button("/task/complete", "Complete", hidden={"task_key": key}))
        action = "".join(buttons)

    return f'<div class="{" ".join(classes)}"><strong>{esc(key)}</strong>{detail}{action}</div>'


@router.get("/task", response_class=HTMLResponse)
async def task_page(request: Request, effect: str = ""):
    user = require_page_user(request)
    now = utcnow()
    board = get_task_service().board(user.id, now)
    sale = get_sale_service().get_sales_by_user_id(user.id)

    requirement_ids = [e["requirement"].product_id for e in board["entries"] if e["requirement"].has_requirement]
    products = get_product_service().get_products_by_ids(requirement_ids)

    funds = sale.available_funds(utc_date(now)) if sale else 0
    trial = ""
    if is_trial_bonus_date_today(sale, now):
        trial = f'<p class="muted">Includes today\'s trial bonus of {money(sale.trial_bonus)}</p>'

    summary = f"""
      <div class="grid">
        <div><p class="muted">Available funds</p><p class="stat">{money(funds)}</p>{trial}</div>
        <div><p class="muted">Today's cashback</p><p class="stat">{money(sale.today_bonus if sale else 0)}</p></div>
        <div><p class="muted">Progress</p><p class="stat">{board['percentage']}%</p></div>
      </div>
    """
    cells = "".join(_task_cell(entry, products) for entry in board["entries"])
    canvas = ""
    if effect:
        canvas = f'<canvas id="effects" data-effect="{esc(effect)}"></canvas><script src="/static/effects.js"></script>'

    body_html = card("Today's tasks", summary) + card("Task board", f'<div class="task-grid">{cells}</div>') + canvas
    return render(request, body_html, title="Tasks")


@router.post("/task/purchase")
async def task_purchase(request: Request, product_id: str = Form(...), quantity: int = Form(...)):
    user = require_page_user(request)
    try:
        result = get_purchase_service().purchase(user, product_id, quantity)
    except StorefrontError as e:
        return redirect("/task", error=e.message)
    return redirect("/task", message=f"Purchase complete. Cashback {format_currency(result.cashback)}")


@router.post("/task/complete")
async def task_complete(request: Request, task_key: str = Form(...)):
    user = require_page_user(request)
    service = get_task_service()
    try:
        task = service.get_user_tasks(user.id)
        _, effect = service.complete_task(user, task.id, task_key)
    except StorefrontError as e:
        return redirect("/task", error=e.message)
    return redirect(f"/task?effect={effect}", message=f"{task_key} completed")


# --- orders ----------------------------------------------------------

@router.get("/orders", response_class=HTMLResponse)
async def orders_page(request: Request):
    user = require_page_user(request)
    service = get_order_service()
    lines = service.describe_orders(service.get_user_orders(user))

    rows = []
    for line in lines:
        order, product = line["order"], line["product"]
        rows.append([
            esc(product.name if product else order.product_id),
            str(order.amount),
            money(line["unit_price"]),
            money(line["total"]),
            money(line["commission"]),
            esc(order.status or "Processing"),
            fmt_date(order.ordered_at),
        ])

    table = data_table(["Product", "Units", "Unit price", "Total", "Commission", "Status", "Ordered"], rows,
                       empty="You have no orders yet.")
    return render(request, card("My orders", table), title="Orders")


# --- account ---------------------------------------------------------

@router.get("/my", response_class=HTMLResponse)
async def my_page(request: Request):
    user = require_page_user(request)
    sale = get_sale_service().get_sales_by_user_id(user.id)
    withdrawals = get_withdrawal_service().get_user_withdrawals(user.id)
    pending = any(w.is_pending for w in withdrawals)

    if sale:
        overview = f"""
          <div class="grid">
            <div><p class="muted">Balance</p><p class="stat">{money(sale.balance)}</p></div>
            <div><p class="muted">Total earning</p><p class="stat">{money(sale.total_earning)}</p></div>
            <div><p class="muted">Tasks completed</p><p class="stat">{sale.task_complete}</p></div>
            <div><p class="muted">Total sales</p><p class="stat">{money(sale.total_sales)}</p></div>
          </div>
        """
    else:
        overview = '<p class="muted">No sales data yet.</p>'

    disabled = " disabled" if pending else ""
    withdraw_form = f"""
      <form method="POST" action="/my/withdraw" class="form-row">
        <div class="form-col"><input type="number" name="amount" step="0.01" min="0.01" placeholder="Amount" required{disabled}></div>
        <button class="button-primary" type="submit"{disabled}>Request withdrawal</button>
      </form>
      {'<p class="muted">You already have a pending withdrawal request.</p>' if pending else ''}
    """
    history = data_table(
        ["Amount", "Date requested", "Status"],
        [[money(w.withdraw_amount), fmt_date(w.requested_at), status_pill(w.status)] for w in withdrawals],
        empty="No withdrawals yet."
    )

    phone = user.phone or ""
    profile = f"""
      <form method="POST" action="/my/profile">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Name</label>
            <input type="text" name="name" value="{esc(user.name)}" required></div>
          <div class="form-col"><label class="label-small">Phone number</label>
            <input type="text" name="phone" value="{esc(phone)}" required></div>
        </div>
        <button class="button-primary" type="submit">Update profile</button>
      </form>
      <form method="POST" action="/my/password" class="form-row" style="margin-top:16px">
        <div class="form-col"><input type="password" name="password" minlength="8" placeholder="New password" required></div>
        <button class="button-primary" type="submit">Change password</button>
      </form>
    """

    body_html = (
        card("Sales overview", overview)
        + card("Withdrawal", withdraw_form + history)
        + card("Account settings", profile, subtext="Changes to your name show after you sign in again.")
    )
    return render(request, body_html, title="My account")


@router.post("/my/withdraw")
async def my_withdraw(request: Request, amount: float = Form(...)):
    user = require_page_user(request)
    try:
        get_withdrawal_service().create_withdrawal(user, amount)
    except StorefrontError as e:
        return redirect("/my", error=e.message)
    return redirect("/my", message="Withdrawal request submitted successfully")


@router.post("/my/profile")
async def my_profile(request: Request, name: str = Form(...), phone: str = Form(...)):
    user = require_page_user(request)
    try:
        get_auth_service().update_user_info(user.id, name, phone)
    except StorefrontError as e:
        return redirect("/my", error=e.message)
    return redirect("/my", message="Profile updated successfully")


@router.post("/my/password")
async def my_password(request: Request, password: str = Form(...)):
    user = require_page_user(request)
    try:
        get_auth_service().update_user_password(user.id, password)
    except StorefrontError as e:
        return redirect("/my", error=e.message)
    return redirect("/my", message="Password updated")


# --- contact ---------------------------------------------------------

@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request):
    social = get_social_settings_service().get_or_create_default_social_settings()
    links = []
    if social.whatsapp_link:
        links.append(f'<p><a class="button-primary" href="{esc(social.whatsapp_link)}" target="_blank" rel="noopener">WhatsApp</a></p>')
    if social.telegram_link:
        links.append(f'<p><a class="button-primary" href="{esc(social.telegram_link)}" target="_blank" rel="noopener">Telegram</a></p>')
    inner = "".join(links) or '<p class="muted">Customer service links are not configured yet.</p>'
    return render(request, card("Contact customer service", inner), title="Contact")

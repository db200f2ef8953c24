"""
Admin dashboard

Admins manage the sellers that registered with their referral codes:
wallets, shipments, withdrawals and the shared task settings. Superadmins
may enter every page here and see all sellers instead of their own.

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse

from storefront.core.auth import SessionUser
from storefront.core.errors import StorefrontError
from storefront.core.timeutil import utcnow
from storefront.domain.sale import SaleUpdate
from storefront.domain.shipment import AutomationRule, ShipmentAutomationCreate, ShipmentCreate
from storefront.domain.task import TaskItem
from storefront.domain.withdrawal import WithdrawalStatus
from storefront.services.product_service import get_product_service
from storefront.services.referral_code_service import get_referral_code_service
from storefront.services.sale_service import default_sale, get_sale_service
from storefront.services.seller_service import get_seller_service
from storefront.services.shipment_service import get_shipment_service
from storefront.services.task_rules import ordered_keys
from storefront.services.task_settings_service import get_task_settings_service
from storefront.services.withdrawal_service import get_withdrawal_service
from storefront.web._layout import (
    card,
    data_table,
    esc,
    fmt_date,
    money,
    pagination,
    post_button,
    redirect,
    render,
    require_page_user,
    status_pill,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

PAGE_SIZE = 25


def _sellers_for(user: SessionUser, page: int = 0, page_size: int = PAGE_SIZE, keyword: str = ""):
    service = get_seller_service()
    if user.is_superadmin:
        return service.get_all_sellers(page=page, page_size=page_size, keyword=keyword)
    return service.get_sellers_by_admin(user.id, page=page, page_size=page_size, keyword=keyword)


def _product_options(selected: str = "") -> str:
    products, _ = get_product_service().get_products()
    options = ['<option value="">None</option>']
    for p in products:
        mark = " selected" if p.id == selected else ""
        options.append(f'<option value="{esc(p.id)}"{mark}>{esc(p.name)} ({money(p.final_price)})</option>')
    return "".join(options)


def parse_rules(text: str) -> List[AutomationRule]:
    """
    One step per line: `<name>, <hours after order>`

    Raises:
        ValueError: a line has no hour value or a negative one
    """
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        name, sep, hours = line.rpartition(",")
        if not sep or not name.strip():
            raise ValueError(f"Expected '<step name>, <hours>' but got '{line}'")
        rules.append(AutomationRule(name=name.strip(), after_hour=float(hours)))
    return rules


def rules_text(rules: List[AutomationRule]) -> str:
    return "\n".join(f"{rule.name}, {rule.after_hour:g}" for rule in rules)


# --- shared task settings --------------------------------------------

def task_settings_manager(base_path: str) -> str:
    settings = get_task_settings_service().get_or_create_task_settings()
    items: Dict[str, TaskItem] = {**get_task_settings_service().get_empty_task_settings(), **settings.settings}
    products, _ = get_product_service().get_products()

    rows = []
    for key in ordered_keys(items):
        item = items[key]
        options = ['<option value="">None</option>'] + [
            f'<option value="{esc(p.id)}"{" selected" if p.id == item.product_id else ""}>{esc(p.name)}</option>'
            for p in products
        ]
        rows.append([
            esc(key),
            f'<select name="product_id__{esc(key)}">{"".join(options)}</select>',
            f'<input type="number" name="amount__{esc(key)}" value="{esc(item.amount)}" min="1" style="width:90px">',
        ])

    table = data_table(["Task", "Required product", "Units"], rows)
    return card("Task settings", f"""
      <form method="POST" action="{base_path}">
        {table}
        <button class="button-primary" type="submit">Save task settings</button>
      </form>
    """, subtext="Tasks with a product can only be completed after buying the given number of units that day.")


async def handle_task_settings_update(request: Request, base_path: str):
    form = await request.form()
    items = {}
    for name, value in form.items():
        if name.startswith("product_id__"):
            key = name[len("product_id__"):]
            items[key] = TaskItem(product_id=value, amount=form.get(f"amount__{key}", "") if value else "")

    service = get_task_settings_service()
    try:
        settings = service.get_or_create_task_settings()
        service.update_task_settings(settings.id, items)
    except StorefrontError as e:
        return redirect(base_path, error=e.message)
    return redirect(base_path, message="Task settings saved")


# --- shared referral codes -------------------------------------------

def referral_code_manager(base_path: str, codes) -> str:
    rows = [
        [
            f"<code>{esc(c.code)}</code>",
            esc(c.belongs_to or ""),
            esc(c.user_id or ""),
            fmt_date(c.created_at),
            post_button(f"{base_path}/{c.id}/delete", "Delete", confirm=f"Delete code {c.code}?"),
        ]
        for c in codes
    ]
    create = post_button(base_path, "Generate new code")
    table = data_table(["Code", "Owner", "Redeemed by", "Created", ""], rows, empty="No referral codes yet.")
    return card("Referral codes", create + table, subtext="New customers need one of these codes to sign up.")


# --- dashboard -------------------------------------------------------

@router.get("/admin", response_class=HTMLResponse)
async def admin_home(request: Request):
    user = require_page_user(request)
    _, seller_total = _sellers_for(user, page_size=1)
    codes = get_referral_code_service().get_user_referral_codes(user.id)
    body = f"""
      <div class="grid">
        <div><p class="muted">Sellers</p><p class="stat">{seller_total}</p></div>
        <div><p class="muted">My referral codes</p><p class="stat">{', '.join(esc(c.code) for c in codes) or '-'}</p></div>
      </div>
      <p>
        <a href="/admin/seller">Sellers</a> &middot;
        <a href="/admin/withdrawal">Withdrawals</a> &middot;
        <a href="/admin/shipment_automation">Shipment automations</a> &middot;
        <a href="/admin/task_settings">Task settings</a> &middot;
        <a href="/admin/referral_code">Referral codes</a>
      </p>
    """
    return render(request, card("Admin dashboard", body), title="Admin")


# --- sellers ---------------------------------------------------------

@router.get("/admin/seller", response_class=HTMLResponse)
async def admin_sellers(request: Request, page: int = 0, keyword: str = ""):
    user = require_page_user(request)
    sellers, total = _sellers_for(user, page=max(page, 0), keyword=keyword)

    rows = [
        [
            esc(s.name),
            esc(s.phone),
            esc(s.referral_code),
            fmt_date(s.created_at),
            f'<a href="/admin/seller/{esc(s.id)}/sales">Sales</a> &middot; '
            f'<a href="/admin/seller/{esc(s.id)}/shipments">Shipments</a>',
            post_button(f"/admin/seller/{s.id}/delete", "Delete", confirm=f"Delete {s.name}?"),
        ]
        for s in sellers
    ]
    search = f"""
      <form method="GET" action="/admin/seller" class="form-row">
        <div class="form-col"><input type="text" name="keyword" value="{esc(keyword)}" placeholder="Name or phone"></div>
        <button class="button-primary" type="submit">Search</button>
      </form>
    """
    table = data_table(["Name", "Phone", "Referral code", "Joined", "", ""], rows, empty="No sellers found.")
    body = card("Sellers", search + table + pagination("/admin/seller", max(page, 0), PAGE_SIZE, total, keyword=keyword),
                subtext=f"{total} sellers")
    return render(request, body, title="Sellers")


@router.post("/admin/seller/{seller_id}/delete")
async def admin_delete_seller(seller_id: str):
    try:
        get_seller_service().delete_seller(seller_id)
    except StorefrontError as e:
        return redirect("/admin/seller", error=e.message)
    return redirect("/admin/seller", message="Seller deleted successfully")


@router.get("/admin/seller/{seller_id}/sales", response_class=HTMLResponse)
async def admin_seller_sales(request: Request, seller_id: str):
    require_page_user(request)
    seller = get_seller_service().get_seller_by_id(seller_id)
    sale = get_sale_service().get_sales_by_user_id(seller_id)
    base = f"/admin/seller/{seller_id}/sales"

    if sale is None:
        inner = f'<p class="muted">No sales record yet.</p>{post_button(base + "/create", "Create sales record")}'
        return render(request, card(f"Sales of {seller.name}", inner), title="Seller sales")

    fields = [
        ("balance", "Balance", sale.balance),
        ("trial_bonus", "Trial bonus", sale.trial_bonus),
        ("today_bonus", "Today bonus", sale.today_bonus),
        ("total_earning", "Total earning", sale.total_earning),
        ("total_sales", "Total sales", sale.total_sales),
        ("task_complete", "Tasks completed", sale.task_complete),
        ("number_of_rating", "Ratings", sale.number_of_rating),
    ]
    inputs = "".join(
        f'<div class="form-col"><label class="label-small">{label}</label>'
        f'<input type="number" step="0.01" name="{name}" value="{value:g}"></div>'
        for name, label, value in fields
    )
    inner = f"""
      <p class="muted">Trial bonus date {fmt_date(sale.trial_bonus_date)} &middot; today bonus date {fmt_date(sale.today_bonus_date)}</p>
      <form method="POST" action="{base}">
        <div class="form-row">{inputs}</div>
        <label class="label-small"><input type="checkbox" name="renew_trial" value="1" style="width:auto"> Grant the trial bonus for today</label>
        <button class="button-primary" type="submit">Save</button>
      </form>
    """
    return render(request, card(f"Sales of {seller.name}", inner), title="Seller sales")


@router.post("/admin/seller/{seller_id}/sales/create")
async def admin_create_seller_sale(seller_id: str):
    base = f"/admin/seller/{seller_id}/sales"
    try:
        _, created = get_sale_service().create_sale(default_sale(seller_id))
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Sales record created" if created else "Sales record already exists")


@router.post("/admin/seller/{seller_id}/sales")
async def admin_update_seller_sale(
    seller_id: str,
    balance: float = Form(...),
    trial_bonus: float = Form(...),
    today_bonus: float = Form(...),
    total_earning: float = Form(...),
    total_sales: float = Form(...),
    task_complete: int = Form(...),
    number_of_rating: int = Form(...),
    renew_trial: Optional[str] = Form(None)
):
    base = f"/admin/seller/{seller_id}/sales"
    service = get_sale_service()
    try:
        sale = service.require_user_sale(seller_id)
        fields = dict(
            balance=balance,
            trial_bonus=trial_bonus,
            today_bonus=today_bonus,
            total_earning=total_earning,
            total_sales=total_sales,
            task_complete=task_complete,
            number_of_rating=number_of_rating
        )
        # Unset, not None: an unticked box keeps the current trial date
        if renew_trial:
            fields["trial_bonus_date"] = utcnow()
        service.update_sale(sale.id, SaleUpdate(**fields))
    except ValueError:
        return redirect(base, error="Counts cannot be negative")
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Sales record updated")


@router.get("/admin/seller/{seller_id}/shipments", response_class=HTMLResponse)
async def admin_seller_shipments(request: Request, seller_id: str):
    require_page_user(request)
    seller = get_seller_service().get_seller_by_id(seller_id)
    service = get_shipment_service()
    shipments = service.get_user_shipments(seller_id)
    automations = {a.id: a for a in service.get_shipment_automations(limit=1000)}
    products = get_product_service().get_products_by_ids([s.product_id for s in shipments])
    base = f"/admin/seller/{seller_id}/shipments"

    rows = []
    for shipment in shipments:
        step = service.shipment_status(shipment)
        automation = automations.get(shipment.shipment_automation_id)
        product = products.get(shipment.product_id)
        rows.append([
            esc(shipment.customer_name),
            esc(product.name if product else shipment.product_id),
            esc(automation.name if automation else ""),
            fmt_date(shipment.order_date),
            esc(step.name if step else "-"),
            post_button(f"{base}/{shipment.id}/delete", "Delete", confirm="Delete this shipment?"),
        ])

    automation_options = '<option value="">None</option>' + "".join(
        f'<option value="{esc(a.id)}">{esc(a.name)}</option>' for a in automations.values()
    )
    create = f"""
      <form method="POST" action="{base}">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Customer name</label><input type="text" name="customer_name" required></div>
          <div class="form-col"><label class="label-small">Product</label><select name="product_id" required>{_product_options()}</select></div>
          <div class="form-col"><label class="label-small">Automation</label><select name="shipment_automation_id">{automation_options}</select></div>
          <div class="form-col"><label class="label-small">Order date</label><input type="datetime-local" name="order_date"></div>
        </div>
        <button class="button-primary" type="submit">Add shipment</button>
      </form>
    """
    table = data_table(["Customer", "Product", "Automation", "Order date", "Current step", ""], rows,
                       empty="No shipments yet.")
    return render(request, card(f"Shipments of {seller.name}", create + table), title="Seller shipments")


@router.post("/admin/seller/{seller_id}/shipments")
async def admin_create_seller_shipment(
    seller_id: str,
    customer_name: str = Form(...),
    product_id: str = Form(...),
    shipment_automation_id: str = Form(""),
    order_date: str = Form("")
):
    base = f"/admin/seller/{seller_id}/shipments"
    try:
        data = ShipmentCreate(
            customer_name=customer_name,
            product_id=product_id,
            shipment_automation_id=shipment_automation_id or None,
            order_date=order_date or None
        )
        get_shipment_service().create_shipment(seller_id, data)
    except ValueError:
        return redirect(base, error="Invalid order date")
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Shipment created")


@router.post("/admin/seller/{seller_id}/shipments/{shipment_id}/delete")
async def admin_delete_seller_shipment(seller_id: str, shipment_id: str):
    base = f"/admin/seller/{seller_id}/shipments"
    try:
        get_shipment_service().admin_delete_shipment(shipment_id)
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Shipment deleted")


# --- shipment automations --------------------------------------------

@router.get("/admin/shipment_automation", response_class=HTMLResponse)
async def admin_shipment_automations(request: Request):
    require_page_user(request)
    automations = get_shipment_service().get_shipment_automations(limit=1000)

    rows = []
    for a in automations:
        edit = f"""
          <form method="POST" action="/admin/shipment_automation/{esc(a.id)}/progress" class="inline">
            <textarea name="rules" rows="{max(len(a.progress), 2)}" style="width:260px">{esc(rules_text(a.progress))}</textarea>
            <button class="button-small" type="submit">Save steps</button>
          </form>
        """
        rows.append([
            esc(a.name),
            edit,
            post_button(f"/admin/shipment_automation/{a.id}/delete", "Delete", confirm=f"Delete {a.name}?"),
        ])

    create = """
      <form method="POST" action="/admin/shipment_automation">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Name</label><input type="text" name="name" required></div>
          <div class="form-col"><label class="label-small">Steps, one per line: name, hours after order</label>
            <textarea name="rules" rows="4" placeholder="Order received, 0&#10;Shipped, 24&#10;Delivered, 72"></textarea></div>
        </div>
        <button class="button-primary" type="submit">Create automation</button>
      </form>
    """
    table = data_table(["Name", "Steps", ""], rows, empty="No automations yet.")
    return render(request, card("New shipment automation", create) + card("Shipment automations", table),
                  title="Shipment automations")


@router.post("/admin/shipment_automation")
async def admin_create_shipment_automation(request: Request, name: str = Form(...), rules: str = Form("")):
    user = require_page_user(request)
    base = "/admin/shipment_automation"
    try:
        data = ShipmentAutomationCreate(name=name, progress=parse_rules(rules))
        get_shipment_service().create_shipment_automation(user, data)
    except ValueError as e:
        return redirect(base, error=str(e))
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message=f"Created {name}")


@router.post("/admin/shipment_automation/{automation_id}/progress")
async def admin_update_automation_progress(automation_id: str, rules: str = Form("")):
    base = "/admin/shipment_automation"
    try:
        get_shipment_service().update_progress(automation_id, parse_rules(rules))
    except ValueError as e:
        return redirect(base, error=str(e))
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Steps saved")


@router.post("/admin/shipment_automation/{automation_id}/delete")
async def admin_delete_shipment_automation(request: Request, automation_id: str):
    user = require_page_user(request)
    base = "/admin/shipment_automation"
    service = get_shipment_service()
    try:
        if user.is_superadmin:
            service.admin_delete_shipment_automation(automation_id)
        else:
            service.delete_shipment_automation(user, automation_id)
    except StorefrontError as e:
        return redirect(base, error=e.message)
    return redirect(base, message="Automation deleted")


# --- task settings ---------------------------------------------------

@router.get("/admin/task_settings", response_class=HTMLResponse)
async def admin_task_settings(request: Request):
    require_page_user(request)
    return render(request, task_settings_manager("/admin/task_settings"), title="Task settings")


@router.post("/admin/task_settings")
async def admin_update_task_settings(request: Request):
    return await handle_task_settings_update(request, "/admin/task_settings")


# --- withdrawals -----------------------------------------------------

@router.get("/admin/withdrawal", response_class=HTMLResponse)
async def admin_withdrawals(request: Request, page: int = 0, keyword: str = ""):
    user = require_page_user(request)
    service = get_withdrawal_service()
    page = max(page, 0)
    if user.is_superadmin:
        withdrawals, total = service.admin_get_all_withdrawals(page=page, limit=PAGE_SIZE, keyword=keyword)
    else:
        withdrawals, total = service.get_withdrawals_by_admin(user.id, page=page, limit=PAGE_SIZE)

    rows = []
    for w in withdrawals:
        actions = ""
        if w.status == WithdrawalStatus.PENDING:
            actions = (
                post_button(f"/admin/withdrawal/{w.id}/approve", "Approve", confirm="Approve and debit the balance?")
                + post_button(f"/admin/withdrawal/{w.id}/reject", "Reject")
            )
        rows.append([esc(w.user_id), money(w.withdraw_amount), fmt_date(w.requested_at), status_pill(w.status), actions])

    table = data_table(["Seller", "Amount", "Requested", "Status", ""], rows, empty="No withdrawal requests.")
    body = card("Withdrawals", table + pagination("/admin/withdrawal", page, PAGE_SIZE, total, keyword=keyword),
                subtext=f"{total} requests")
    return render(request, body, title="Withdrawals")


@router.post("/admin/withdrawal/{withdrawal_id}/approve")
async def admin_approve_withdrawal(withdrawal_id: str):
    try:
        get_withdrawal_service().approve_withdrawal(withdrawal_id)
    except StorefrontError as e:
        return redirect("/admin/withdrawal", error=e.message)
    return redirect("/admin/withdrawal", message="Withdrawal approved")


@router.post("/admin/withdrawal/{withdrawal_id}/reject")
async def admin_reject_withdrawal(withdrawal_id: str):
    try:
        get_withdrawal_service().reject_withdrawal(withdrawal_id)
    except StorefrontError as e:
        return redirect("/admin/withdrawal", error=e.message)
    return redirect("/admin/withdrawal", message="Withdrawal rejected")


# --- referral codes --------------------------------------------------

@router.get("/admin/referral_code", response_class=HTMLResponse)
async def admin_referral_codes(request: Request):
    user = require_page_user(request)
    codes = get_referral_code_service().get_user_referral_codes(user.id)
    return render(request, referral_code_manager("/admin/referral_code", codes), title="Referral codes")


@router.post("/admin/referral_code")
async def admin_create_referral_code(request: Request):
    user = require_page_user(request)
    try:
        code = get_referral_code_service().create_referral_code(user)
    except StorefrontError as e:
        return redirect("/admin/referral_code", error=e.message)
    return redirect("/admin/referral_code", message=f"Created code {code.code}")


@router.post("/admin/referral_code/{code_id}/delete")
async def admin_delete_referral_code(request: Request, code_id: str):
    user = require_page_user(request)
    try:
        get_referral_code_service().delete_referral_code(user, code_id)
    except StorefrontError as e:
        return redirect("/admin/referral_code", error=e.message)
    return redirect("/admin/referral_code", message="Referral code deleted")

"""
Superadmin dashboard

Admin accounts, every seller, the catalog, all referral codes, the
customer service links and the task settings.

Author: TM3
Date: 2026-03-02
"""
from typing import List, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from storefront.core.errors import StorefrontError
from storefront.domain.social_settings import SocialSettingsUpdate
from storefront.domain.user import AccountUpdate, AdminCreate, SellerCreate
from storefront.services.admin_service import get_admin_service
from storefront.services.referral_code_service import get_referral_code_service
from storefront.services.seller_service import get_seller_service
from storefront.services.social_settings_service import get_social_settings_service
from storefront.web._layout import (
    card,
    data_table,
    esc,
    fmt_date,
    pagination,
    post_button,
    redirect,
    render,
    require_page_user,
)
from storefront.web.admin_pages import (
    PAGE_SIZE,
    handle_task_settings_update,
    referral_code_manager,
    task_settings_manager,
)
from storefront.web.seller_pages import (
    handle_product_create,
    handle_product_delete,
    handle_product_update,
    product_manager,
)

router = APIRouter(tags=["Pages"])


def _account_edit_form(action: str, name: str, phone: Optional[str]) -> str:
    return f"""
      <form method="POST" action="{esc(action)}" class="inline">
        <input type="text" name="name" value="{esc(name)}" style="width:120px" required>
        <input type="text" name="phone" value="{esc(phone)}" placeholder="Phone" style="width:120px">
        <input type="password" name="password" placeholder="New password" minlength="8" style="width:120px">
        <button class="button-small" type="submit">Save</button>
      </form>
    """


def _account_update(name: str, phone: str, password: str) -> AccountUpdate:
    return AccountUpdate(name=name, phone=phone or None, password=password or None)


@router.get("/superadmin", response_class=HTMLResponse)
async def superadmin_home(request: Request):
    user = require_page_user(request)
    _, admin_total = get_admin_service().get_admins(user, limit=1)
    _, seller_total = get_seller_service().get_all_sellers(page_size=1)
    _, code_total = get_referral_code_service().get_referral_codes(limit=1)
    body = f"""
      <div class="grid">
        <div><p class="muted">Admins</p><p class="stat">{admin_total}</p></div>
        <div><p class="muted">Sellers</p><p class="stat">{seller_total}</p></div>
        <div><p class="muted">Referral codes</p><p class="stat">{code_total}</p></div>
      </div>
      <p>
        <a href="/superadmin/admin">Admins</a> &middot;
        <a href="/superadmin/seller">Sellers</a> &middot;
        <a href="/superadmin/product">Products</a> &middot;
        <a href="/superadmin/referral_code">Referral codes</a> &middot;
        <a href="/superadmin/social_settings">Social settings</a> &middot;
        <a href="/superadmin/task_settings">Task settings</a> &middot;
        <a href="/admin">Admin dashboard</a>
      </p>
    """
    return render(request, card("Superadmin dashboard", body), title="Superadmin")


# --- admins ----------------------------------------------------------

@router.get("/superadmin/admin", response_class=HTMLResponse)
async def superadmin_admins(request: Request):
    user = require_page_user(request)
    admins, total = get_admin_service().get_admins(user)
    codes = get_referral_code_service()
    sellers = get_seller_service()

    rows = []
    for admin in admins:
        admin_codes = codes.get_user_referral_codes(admin.id)
        referred = sum(len(sellers.get_sellers_by_referral_code(c.code)) for c in admin_codes)
        rows.append([
            _account_edit_form(f"/superadmin/admin/{admin.id}/update", admin.name, admin.phone),
            ", ".join(esc(c.code) for c in admin_codes) or "-",
            str(referred),
            fmt_date(admin.created_at),
            post_button(f"/superadmin/admin/{admin.id}/delete", "Delete", confirm=f"Delete {admin.name}?"),
        ])

    create = """
      <form method="POST" action="/superadmin/admin">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Name</label><input type="text" name="name" required></div>
          <div class="form-col"><label class="label-small">Phone number</label><input type="text" name="phone" required></div>
          <div class="form-col"><label class="label-small">Password</label><input type="password" name="password" minlength="8" required></div>
        </div>
        <button class="button-primary" type="submit">Create admin</button>
      </form>
    """
    table = data_table(["Name / phone / password", "Referral codes", "Sellers", "Created", ""], rows,
                       empty="No admins yet.")
    body = card("New admin", create, subtext="Each admin gets a referral code of their own.") + \
        card("Admins", table, subtext=f"{total} admins")
    return render(request, body, title="Admins")


@router.post("/superadmin/admin")
async def superadmin_create_admin(
    request: Request,
    name: str = Form(...),
    phone: str = Form(...),
    password: str = Form(...)
):
    user = require_page_user(request)
    try:
        admin = get_admin_service().create_admin(user, AdminCreate(name=name, phone=phone, password=password))
    except ValueError:
        return redirect("/superadmin/admin", error="Password must be at least 8 characters")
    except StorefrontError as e:
        return redirect("/superadmin/admin", error=e.message)
    return redirect("/superadmin/admin", message=f"Created admin {admin.name}")


@router.post("/superadmin/admin/{admin_id}/update")
async def superadmin_update_admin(
    request: Request,
    admin_id: str,
    name: str = Form(...),
    phone: str = Form(""),
    password: str = Form("")
):
    user = require_page_user(request)
    try:
        get_admin_service().update_admin(user, admin_id, _account_update(name, phone, password))
    except ValueError:
        return redirect("/superadmin/admin", error="Password must be at least 8 characters")
    except StorefrontError as e:
        return redirect("/superadmin/admin", error=e.message)
    return redirect("/superadmin/admin", message="Admin updated")


@router.post("/superadmin/admin/{admin_id}/delete")
async def superadmin_delete_admin(request: Request, admin_id: str):
    user = require_page_user(request)
    try:
        get_admin_service().delete_admin(user, admin_id)
    except StorefrontError as e:
        return redirect("/superadmin/admin", error=e.message)
    return redirect("/superadmin/admin", message="Admin deleted successfully")


# --- sellers ---------------------------------------------------------

@router.get("/superadmin/seller", response_class=HTMLResponse)
async def superadmin_sellers(request: Request, page: int = 0, keyword: str = ""):
    require_page_user(request)
    page = max(page, 0)
    sellers, total = get_seller_service().get_all_sellers(page=page, page_size=PAGE_SIZE, keyword=keyword)

    rows = [
        [
            _account_edit_form(f"/superadmin/seller/{s.id}/update", s.name, s.phone),
            esc(s.email),
            esc(s.referral_code),
            fmt_date(s.created_at),
            post_button(f"/superadmin/seller/{s.id}/delete", "Delete", confirm=f"Delete {s.name}?"),
        ]
        for s in sellers
    ]
    search = f"""
      <form method="GET" action="/superadmin/seller" class="form-row">
        <div class="form-col"><input type="text" name="keyword" value="{esc(keyword)}" placeholder="Name or phone"></div>
        <button class="button-primary" type="submit">Search</button>
      </form>
    """
    create = """
      <form method="POST" action="/superadmin/seller">
        <div class="form-row">
          <div class="form-col"><label class="label-small">Name</label><input type="text" name="name" required></div>
          <div class="form-col"><label class="label-small">Email</label><input type="email" name="email" required></div>
          <div class="form-col"><label class="label-small">Password</label><input type="password" name="password" minlength="8" required></div>
          <div class="form-col"><label class="label-small">Confirm password</label><input type="password" name="confirm_password" minlength="8" required></div>
        </div>
        <button class="button-primary" type="submit">Create seller</button>
      </form>
    """
    table = data_table(["Name / phone / password", "Email", "Referral code", "Joined", ""], rows,
                       empty="No sellers found.")
    body = card("New seller", create) + card(
        "Sellers",
        search + table + pagination("/superadmin/seller", page, PAGE_SIZE, total, keyword=keyword),
        subtext=f"{total} sellers"
    )
    return render(request, body, title="Sellers")


@router.post("/superadmin/seller")
async def superadmin_create_seller(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...)
):
    try:
        data = SellerCreate(name=name, email=email, password=password, confirm_password=confirm_password)
        seller = get_seller_service().create_seller(data)
    except ValueError:
        return redirect("/superadmin/seller", error="Password must be at least 8 characters")
    except StorefrontError as e:
        return redirect("/superadmin/seller", error=e.message)
    return redirect("/superadmin/seller", message=f"Created seller {seller.name}")


@router.post("/superadmin/seller/{seller_id}/update")
async def superadmin_update_seller(
    seller_id: str,
    name: str = Form(...),
    phone: str = Form(""),
    password: str = Form("")
):
    try:
        get_seller_service().update_seller(seller_id, _account_update(name, phone, password))
    except ValueError:
        return redirect("/superadmin/seller", error="Password must be at least 8 characters")
    except StorefrontError as e:
        return redirect("/superadmin/seller", error=e.message)
    return redirect("/superadmin/seller", message="Seller updated")


@router.post("/superadmin/seller/{seller_id}/delete")
async def superadmin_delete_seller(seller_id: str):
    try:
        get_seller_service().delete_seller(seller_id)
    except StorefrontError as e:
        return redirect("/superadmin/seller", error=e.message)
    return redirect("/superadmin/seller", message="Seller deleted successfully")


# --- products --------------------------------------------------------

@router.get("/superadmin/product", response_class=HTMLResponse)
async def superadmin_products(request: Request, keyword: str = ""):
    require_page_user(request)
    return render(request, product_manager("/superadmin/product", keyword), title="Products")


@router.post("/superadmin/product")
async def superadmin_create_product(
    name: str = Form(...),
    price: float = Form(...),
    description: str = Form(""),
    quantity: int = Form(0),
    discount_rate: float = Form(0),
    files: Optional[List[UploadFile]] = File(None)
):
    return await handle_product_create("/superadmin/product", name, price, description, quantity, discount_rate, files)


@router.post("/superadmin/product/{product_id}/update")
async def superadmin_update_product(
    product_id: str,
    price: Optional[float] = Form(None),
    discount_rate: Optional[float] = Form(None),
    quantity: Optional[int] = Form(None),
    files: Optional[List[UploadFile]] = File(None)
):
    return await handle_product_update("/superadmin/product", product_id, price, discount_rate, quantity, files)


@router.post("/superadmin/product/{product_id}/delete")
async def superadmin_delete_product(product_id: str):
    return handle_product_delete("/superadmin/product", product_id, admin=True)


# --- referral codes --------------------------------------------------

@router.get("/superadmin/referral_code", response_class=HTMLResponse)
async def superadmin_referral_codes(request: Request, page: int = 0):
    require_page_user(request)
    page = max(page, 0)
    codes, total = get_referral_code_service().get_referral_codes(limit=PAGE_SIZE, offset=page * PAGE_SIZE)
    body = referral_code_manager("/superadmin/referral_code", codes)
    body += pagination("/superadmin/referral_code", page, PAGE_SIZE, total)
    return render(request, body, title="Referral codes")


@router.post("/superadmin/referral_code")
async def superadmin_create_referral_code(request: Request):
    user = require_page_user(request)
    try:
        code = get_referral_code_service().admin_create_referral_code(user.id)
    except StorefrontError as e:
        return redirect("/superadmin/referral_code", error=e.message)
    return redirect("/superadmin/referral_code", message=f"Created code {code.code}")


@router.post("/superadmin/referral_code/{code_id}/delete")
async def superadmin_delete_referral_code(code_id: str):
    try:
        get_referral_code_service().admin_delete_referral_code(code_id)
    except StorefrontError as e:
        return redirect("/superadmin/referral_code", error=e.message)
    return redirect("/superadmin/referral_code", message="Referral code deleted")


# --- social settings -------------------------------------------------

@router.get("/superadmin/social_settings", response_class=HTMLResponse)
async def superadmin_social_settings(request: Request):
    require_page_user(request)
    social = get_social_settings_service().get_or_create_default_social_settings()
    form = f"""
      <form method="POST" action="/superadmin/social_settings">
        <div class="form-row">
          <div class="form-col"><label class="label-small">WhatsApp link</label>
            <input type="url" name="whatsapp_link" value="{esc(social.whatsapp_link)}" placeholder="https://wa.me/..."></div>
          <div class="form-col"><label class="label-small">Telegram link</label>
            <input type="url" name="telegram_link" value="{esc(social.telegram_link)}" placeholder="https://t.me/..."></div>
        </div>
        <button class="button-primary" type="submit">Save</button>
      </form>
    """
    return render(request, card("Customer service links", form), title="Social settings")


@router.post("/superadmin/social_settings")
async def superadmin_update_social_settings(whatsapp_link: str = Form(""), telegram_link: str = Form("")):
    try:
        get_social_settings_service().update_default_social_settings(
            SocialSettingsUpdate(whatsapp_link=whatsapp_link.strip(), telegram_link=telegram_link.strip())
        )
    except StorefrontError as e:
        return redirect("/superadmin/social_settings", error=e.message)
    return redirect("/superadmin/social_settings", message="Social settings saved")


# --- task settings ---------------------------------------------------

@router.get("/superadmin/task_settings", response_class=HTMLResponse)
async def superadmin_task_settings(request: Request):
    require_page_user(request)
    return render(request, task_settings_manager("/superadmin/task_settings"), title="Task settings")


@router.post("/superadmin/task_settings")
async def superadmin_update_task_settings(request: Request):
    return await handle_task_settings_update(request, "/superadmin/task_settings")

"""
Login, signup and logout pages

Author: TM3
Date: 2026-03-02
"""
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from storefront.core.auth import (
    SessionUser,
    clear_session_cookies,
    session_token,
    set_session_cookies,
    user_from_token,
)
from storefront.core.errors import StorefrontError
from storefront.core.rate_limit import auth_rate_limit
from storefront.domain.user import SignUpRequest
from storefront.services.auth_service import get_auth_service
from storefront.web._layout import card, esc, redirect, render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


def safe_callback(callback_url: str) -> str:
    """Only same-site paths are followed after login"""
    if callback_url and callback_url.startswith("/") and not callback_url.startswith("//"):
        if not callback_url.startswith("/login"):
            return callback_url
    return ""


def home_for(user: SessionUser) -> str:
    if user.is_superadmin:
        return "/superadmin"
    if user.is_admin:
        return "/admin"
    if user.is_seller:
        return "/seller"
    return "/"


# --- login/logout ----------------------------------------------------

@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request, callbackUrl: str = ""):
    body_html = card("Sign in", f"""
      <form method="POST" action="/login">
        <input type="hidden" name="callbackUrl" value="{esc(safe_callback(callbackUrl))}">
        <div class="form-row">
          <div class="form-col">
            <label class="label-small">Phone number</label>
            <input type="text" name="phone" placeholder="0123456789" required />
          </div>
          <div class="form-col">
            <label class="label-small">Password</label>
            <input type="password" name="password" required />
          </div>
        </div>
        <button class="button-primary" type="submit">Sign in</button>
      </form>
      <p class="muted">No account yet? <a href="/signup">Sign up</a></p>
    """)
    return render(request, body_html, title="Sign in")


@router.post("/login")
async def login_submit(
    phone: str = Form(...),
    password: str = Form(...),
    callbackUrl: str = Form(""),
    _: None = Depends(auth_rate_limit)
):
    try:
        session = get_auth_service().sign_in(phone, password)
    except StorefrontError as e:
        logger.info(f"Login failed for {phone}: {e.message}")
        return redirect("/login", error="Invalid phone number or password")

    user = user_from_token(session.access_token)
    response = redirect(safe_callback(callbackUrl) or home_for(user))
    set_session_cookies(response, session.access_token, session.refresh_token)
    return response


@router.get("/logout")
@router.post("/logout")
async def logout(request: Request):
    try:
        get_auth_service().logout(session_token(request))
    except StorefrontError as e:
        logger.warning(f"Session revoke failed: {e.message}")

    response = redirect("/login", message="You have been signed out")
    clear_session_cookies(response)
    return response


# --- signup ----------------------------------------------------------

@router.get("/signup", response_class=HTMLResponse)
async def signup_form(request: Request, code: str = ""):
    body_html = card("Create your account", f"""
      <form method="POST" action="/signup">
        <div class="form-row">
          <div class="form-col">
            <label class="label-small">Name</label>
            <input type="text" name="name" required />
          </div>
          <div class="form-col">
            <label class="label-small">Phone number</label>
            <input type="text" name="phone" placeholder="0123456789" required />
          </div>
        </div>
        <div class="form-row">
          <div class="form-col">
            <label class="label-small">Password</label>
            <input type="password" name="password" minlength="8" required />
          </div>
          <div class="form-col">
            <label class="label-small">Confirm password</label>
            <input type="password" name="confirm_password" minlength="8" required />
          </div>
          <div class="form-col">
            <label class="label-small">Referral code</label>
            <input type="text" name="referral_code" value="{esc(code)}" pattern="[0-9]{{6}}" required />
          </div>
        </div>
        <button class="button-primary" type="submit">Sign up</button>
      </form>
      <p class="muted">Already registered? <a href="/login">Sign in</a></p>
    """, subtext="You need a referral code from your agent to register.")
    return render(request, body_html, title="Sign up")


@router.post("/signup")
async def signup_submit(
    name: str = Form(...),
    phone: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...),
    referral_code: str = Form(...),
    _: None = Depends(auth_rate_limit)
):
    try:
        data = SignUpRequest(
            name=name,
            phone=phone,
            password=password,
            confirm_password=confirm_password,
            referral_code=referral_code.strip()
        )
    except ValueError:
        return redirect("/signup", error="Please check the form: password needs 8 characters, code 6 digits")

    try:
        get_auth_service().sign_up(data)
    except StorefrontError as e:
        return redirect("/signup", error=e.message)

    return redirect("/login", message="Account created, please sign in")

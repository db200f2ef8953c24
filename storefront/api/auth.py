"""
Auth API Endpoints
Signup, phone login, logout and the current user's profile

Author: TM3
Date: 2026-03-02
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from storefront.core.auth import (
    SessionUser,
    clear_session_cookies,
    get_current_user,
    require_admin,
    session_token,
    set_session_cookies,
)
from storefront.core.rate_limit import auth_rate_limit
from storefront.domain.user import PasswordUpdate, SignInRequest, SignUpRequest, UserInfoUpdate
from storefront.services.auth_service import get_auth_service

router = APIRouter()


@router.post("/signup", status_code=201)
async def sign_up(data: SignUpRequest, _: None = Depends(auth_rate_limit)):
    """
    Register a customer with a referral code

    Returns:
        {"status": "success", "message": "Account created successfully", "data": {...user}}
    """
    user = get_auth_service().sign_up(data)
    return {
        "status": "success",
        "message": "Account created successfully",
        "data": user.to_dict()
    }


@router.post("/login")
async def login(data: SignInRequest, response: Response, _: None = Depends(auth_rate_limit)):
    """
    Phone + password login

    Sets the session cookies and also returns the tokens for API clients.
    """
    session = get_auth_service().sign_in(data.phone, data.password)
    set_session_cookies(response, session.access_token, session.refresh_token)
    return {
        "status": "success",
        "message": "Login successful",
        "data": {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in,
            "token_type": "bearer"
        }
    }


@router.post("/logout")
async def logout(request: Request, response: Response):
    get_auth_service().logout(session_token(request))
    clear_session_cookies(response)
    return {"status": "success", "message": "Logout successful"}


@router.get("/me")
async def get_me(user: SessionUser = Depends(get_current_user)):
    account = get_auth_service().get_user_by_id(user.id)
    return {"status": "success", "data": account.to_dict()}


@router.put("/me")
async def update_me(data: UserInfoUpdate, user: SessionUser = Depends(get_current_user)):
    account = get_auth_service().update_user_info(user.id, data.name, data.phone)
    return {"status": "success", "message": "Profile updated successfully", "data": account.to_dict()}


@router.put("/me/password")
async def update_my_password(data: PasswordUpdate, user: SessionUser = Depends(get_current_user)):
    get_auth_service().update_user_password(user.id, data.password)
    return {"status": "success", "message": "Password updated successfully"}


@router.get("/me/prefs")
async def get_my_prefs(user: SessionUser = Depends(get_current_user)):
    return {"status": "success", "data": get_auth_service().get_user_prefs(user.id)}


@router.patch("/me/prefs")
async def update_my_prefs(
    prefs: Dict[str, Any] = Body(...),
    user: SessionUser = Depends(get_current_user)
):
    """Merge the given keys into the stored preferences"""
    return {"status": "success", "data": get_auth_service().update_user_prefs(user.id, prefs)}


@router.get("/lookup")
async def lookup_user_by_phone(
    phone: str = Query(..., min_length=6),
    _: SessionUser = Depends(require_admin)
):
    return {"status": "success", "data": {"email": get_auth_service().lookup_user_by_phone(phone)}}


@router.get("/users/{user_id}")
async def get_user(user_id: str, _: SessionUser = Depends(require_admin)):
    account = get_auth_service().get_user_by_id(user_id)
    return {"status": "success", "data": account.to_dict()}

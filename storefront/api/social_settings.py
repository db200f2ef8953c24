"""
Social Settings API Endpoints

Author: TM3
Date: 2026-03-02
"""
from fastapi import APIRouter, Depends

from storefront.core.auth import SessionUser, require_superadmin
from storefront.domain.social_settings import SocialSettingsUpdate
from storefront.services.social_settings_service import get_social_settings_service

router = APIRouter()


@router.get("")
async def get_default_social_settings():
    """Contact links shown to customers; created empty on first read"""
    return {"status": "success", "data": get_social_settings_service().get_or_create_default_social_settings()}


@router.put("")
async def update_default_social_settings(data: SocialSettingsUpdate, _: SessionUser = Depends(require_superadmin)):
    return {"status": "success", "data": get_social_settings_service().update_default_social_settings(data)}


@router.get("/{settings_id}")
async def get_social_settings(settings_id: str):
    return {"status": "success", "data": get_social_settings_service().get_social_settings(settings_id)}

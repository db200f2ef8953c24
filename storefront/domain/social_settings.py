"""
Social Settings Domain Model

Author: TM3
Date: 2026-03-02
"""
from typing import Optional

from pydantic import BaseModel

DEFAULT_SOCIAL_SETTINGS_ID = "default"


class SocialSettings(BaseModel):
    """Customer service contact links shown on the contact page"""
    id: str = DEFAULT_SOCIAL_SETTINGS_ID
    whatsapp_link: str = ""
    telegram_link: str = ""


class SocialSettingsUpdate(BaseModel):
    whatsapp_link: Optional[str] = None
    telegram_link: Optional[str] = None

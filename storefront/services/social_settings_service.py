"""
Social Settings Service
Customer service contact links (WhatsApp, Telegram)

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Optional

from storefront.core.errors import NotFoundError
from storefront.domain.social_settings import DEFAULT_SOCIAL_SETTINGS_ID, SocialSettings, SocialSettingsUpdate
from storefront.repositories.social_settings_repository import SocialSettingsRepository

logger = logging.getLogger(__name__)


class SocialSettingsService:

    def __init__(self, repository: Optional[SocialSettingsRepository] = None):
        self.repository = repository or SocialSettingsRepository()

    def get_or_create_default_social_settings(self) -> SocialSettings:
        found = self.repository.find_by_id(DEFAULT_SOCIAL_SETTINGS_ID)
        if found is not None:
            return found
        logger.info("Creating default social settings")
        return self.repository.create(SocialSettings())

    def update_default_social_settings(self, data: SocialSettingsUpdate) -> SocialSettings:
        self.get_or_create_default_social_settings()
        updated = self.repository.update(DEFAULT_SOCIAL_SETTINGS_ID, data.model_dump(exclude_none=True))
        if updated is None:
            raise NotFoundError("Social settings not found")
        return updated

    def get_social_settings(self, settings_id: str = DEFAULT_SOCIAL_SETTINGS_ID) -> SocialSettings:
        found = self.repository.find_by_id(settings_id)
        if found is None:
            raise NotFoundError("Social settings not found")
        return found


_social_settings_service: Optional[SocialSettingsService] = None


def get_social_settings_service() -> SocialSettingsService:
    global _social_settings_service
    if _social_settings_service is None:
        _social_settings_service = SocialSettingsService()
    return _social_settings_service

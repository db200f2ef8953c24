"""
Social Settings Repository

Author: TM3
Date: 2026-03-02
"""
from typing import Any, Dict, Optional

from storefront.domain.social_settings import SocialSettings
from storefront.repositories.base import BaseRepository


class SocialSettingsRepository(BaseRepository):

    table = "social_settings"
    columns = "id, whatsapp_link, telegram_link"
    writable_columns = frozenset({"id", "whatsapp_link", "telegram_link"})

    @staticmethod
    def _map_row(row: dict) -> SocialSettings:
        return SocialSettings(
            id=row['id'],
            whatsapp_link=row.get('whatsapp_link') or "",
            telegram_link=row.get('telegram_link') or ""
        )

    def find_by_id(self, settings_id: str) -> Optional[SocialSettings]:
        row = self._find_by_id(settings_id)
        return self._map_row(row) if row else None

    def create(self, settings: SocialSettings) -> SocialSettings:
        row = self._insert(settings.model_dump())
        return self._map_row(row)

    def update(self, settings_id: str, fields: Dict[str, Any]) -> Optional[SocialSettings]:
        row = self._update(settings_id, fields)
        return self._map_row(row) if row else None

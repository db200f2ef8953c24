"""
Unit tests for task settings and social settings

Author: TM3
Date: 2026-03-02
"""
import pytest
from unittest.mock import Mock

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.social_settings import SocialSettings, SocialSettingsUpdate
from storefront.domain.task import TaskItem, TaskSettings
from storefront.services.social_settings_service import SocialSettingsService
from storefront.services.task_settings_service import TaskSettingsService


class TestTaskSettingsService:

    @pytest.fixture
    def service(self):
        return TaskSettingsService(repository=Mock())

    def test_empty_settings_cover_every_slot(self, service):
        empty = service.get_empty_task_settings()

        assert len(empty) == 36
        assert empty["task36"] == TaskItem()

    def test_create_twice_conflicts(self, service):
        service.repository.find_by_id.return_value = TaskSettings()

        with pytest.raises(ConflictError):
            service.create_task_settings()
        service.repository.create.assert_not_called()

    def test_update_specific_task_keeps_others(self, service):
        # Arrange
        service.repository.find_by_id.return_value = TaskSettings(
            settings={"task1": TaskItem(product_id="prod-1", amount="2")}
        )

        # Act
        service.update_specific_task("task-settings", "task2", TaskItem(product_id="prod-2", amount="3"))

        # Assert
        settings_id, merged = service.repository.update.call_args[0]
        assert settings_id == "task-settings"
        assert set(merged) == {"task1", "task2"}
        assert merged["task2"].product_id == "prod-2"

    def test_unknown_key_is_rejected(self, service):
        with pytest.raises(ValidationError):
            service.update_specific_task("task-settings", "bonus1", TaskItem())
        service.repository.update.assert_not_called()

    def test_required_amount_without_saved_settings(self, service):
        service.repository.find_by_id.return_value = None

        assert service.required_amount_for("prod-1") is None
        assert service.requirement_for("task1") == TaskItem()

    def test_delete_missing(self, service):
        service.repository.delete.return_value = False

        with pytest.raises(NotFoundError):
            service.admin_delete_task_settings("task-settings")


class TestSocialSettingsService:

    def test_default_document_created_once(self):
        repository = Mock()
        repository.find_by_id.return_value = None
        repository.create.side_effect = lambda settings: settings
        service = SocialSettingsService(repository=repository)

        created = service.get_or_create_default_social_settings()

        assert created.id == "default"
        assert created.whatsapp_link == ""

    def test_update_only_sends_given_links(self):
        # Arrange
        repository = Mock()
        repository.find_by_id.return_value = SocialSettings()
        repository.update.return_value = SocialSettings(whatsapp_link="https://wa.me/60123456789")
        service = SocialSettingsService(repository=repository)

        # Act
        updated = service.update_default_social_settings(SocialSettingsUpdate(whatsapp_link="https://wa.me/60123456789"))

        # Assert
        repository.update.assert_called_once_with("default", {"whatsapp_link": "https://wa.me/60123456789"})
        assert updated.whatsapp_link == "https://wa.me/60123456789"
        repository.create.assert_not_called()

    def test_missing_settings(self):
        repository = Mock()
        repository.find_by_id.return_value = None
        service = SocialSettingsService(repository=repository)

        with pytest.raises(NotFoundError):
            service.get_social_settings("other")

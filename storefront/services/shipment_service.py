"""
Shipment Service
Shipment automations (timed progress steps) and the shipments that follow them

Author: TM3
Date: 2026-03-02
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from storefront.core.auth import SessionUser
from storefront.core.errors import ForbiddenError, NotFoundError
from storefront.core.timeutil import as_utc, utcnow
from storefront.domain.shipment import (
    AutomationRule,
    Shipment,
    ShipmentAutomation,
    ShipmentAutomationCreate,
    ShipmentAutomationUpdate,
    ShipmentCreate,
    ShipmentUpdate,
)
from storefront.repositories.shipment_repository import ShipmentAutomationRepository, ShipmentRepository

logger = logging.getLogger(__name__)


def current_progress_step(
    order_date: datetime,
    rules: List[AutomationRule],
    now: Optional[datetime] = None
) -> Optional[AutomationRule]:
    """
    Step a shipment has reached: the last rule whose `after_hour` has
    elapsed since the order date, or the first rule before any has.
    """
    if not rules:
        return None
    elapsed_hours = (as_utc(now or utcnow()) - as_utc(order_date)).total_seconds() / 3600

    reached = rules[0]
    for rule in rules:
        if rule.after_hour <= elapsed_hours:
            reached = rule
    return reached


class ShipmentService:

    def __init__(
        self,
        automations: Optional[ShipmentAutomationRepository] = None,
        shipments: Optional[ShipmentRepository] = None
    ):
        self.automations = automations or ShipmentAutomationRepository()
        self.shipments = shipments or ShipmentRepository()

    # ------------------------------------------------------------------
    # Automations
    # ------------------------------------------------------------------

    def create_shipment_automation(self, user: SessionUser, data: ShipmentAutomationCreate) -> ShipmentAutomation:
        automation = self.automations.create(user.id, data.name, data.progress)
        logger.info(f"Created shipment automation {automation.id} ({automation.name})")
        return automation

    def get_shipment_automations(self, limit: int = 10) -> List[ShipmentAutomation]:
        return self.automations.find_all(limit=limit)

    def get_shipment_automation_by_id(self, automation_id: str) -> ShipmentAutomation:
        automation = self.automations.find_by_id(automation_id)
        if automation is None:
            raise NotFoundError("Shipment automation not found")
        return automation

    def get_user_shipment_automations(self, user_id: str) -> List[ShipmentAutomation]:
        return self.automations.find_by_user(user_id)

    def _owned_automation(self, user: SessionUser, automation_id: str, action: str) -> ShipmentAutomation:
        automation = self.get_shipment_automation_by_id(automation_id)
        if automation.user_id and automation.user_id != user.id and not user.is_superadmin:
            raise ForbiddenError(f"Not authorized to {action} this shipment automation")
        return automation

    def update_shipment_automation(
        self,
        user: SessionUser,
        automation_id: str,
        data: ShipmentAutomationUpdate
    ) -> ShipmentAutomation:
        self._owned_automation(user, automation_id, "update")
        updated = self.automations.update(automation_id, data.model_dump(exclude_none=True))
        if updated is None:
            raise NotFoundError("Shipment automation not found")
        return updated

    def update_progress(self, automation_id: str, rules: List[AutomationRule]) -> ShipmentAutomation:
        updated = self.automations.update(automation_id, {"progress": rules})
        if updated is None:
            raise NotFoundError("Shipment automation not found")
        return updated

    def delete_shipment_automation(self, user: SessionUser, automation_id: str) -> None:
        self._owned_automation(user, automation_id, "delete")
        self.automations.delete(automation_id)

    def admin_delete_shipment_automation(self, automation_id: str) -> None:
        if not self.automations.delete(automation_id):
            raise NotFoundError("Shipment automation not found")

    # ------------------------------------------------------------------
    # Shipments
    # ------------------------------------------------------------------

    def create_shipment(self, user_id: str, data: ShipmentCreate) -> Shipment:
        shipment = self.shipments.create(user_id, data.model_dump())
        logger.info(f"Created shipment {shipment.id} for user {user_id}")
        return shipment

    def get_shipments(self, limit: int = 10000) -> List[Shipment]:
        return self.shipments.find_all(limit=limit)

    def get_shipment_by_id(self, shipment_id: str) -> Shipment:
        shipment = self.shipments.find_by_id(shipment_id)
        if shipment is None:
            raise NotFoundError("Shipment not found")
        return shipment

    def get_user_shipments(self, user_id: str) -> List[Shipment]:
        return self.shipments.find_by_user(user_id)

    def get_shipments_by_product_id(self, product_id: str) -> List[Shipment]:
        return self.shipments.find_by_product(product_id)

    def get_recent_shipments(self, days: int = 30, now: Optional[datetime] = None) -> List[Shipment]:
        return self.shipments.find_since((now or utcnow()) - timedelta(days=days))

    def _owned_shipment(self, user: SessionUser, shipment_id: str, action: str) -> Shipment:
        shipment = self.get_shipment_by_id(shipment_id)
        if shipment.user_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this shipment")
        return shipment

    def update_shipment(self, user: SessionUser, shipment_id: str, data: ShipmentUpdate) -> Shipment:
        self._owned_shipment(user, shipment_id, "update")
        return self.admin_update_shipment(shipment_id, data)

    def admin_update_shipment(self, shipment_id: str, data: ShipmentUpdate) -> Shipment:
        updated = self.shipments.update(shipment_id, data.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError("Shipment not found")
        return updated

    def delete_shipment(self, user: SessionUser, shipment_id: str) -> None:
        self._owned_shipment(user, shipment_id, "delete")
        self.shipments.delete(shipment_id)

    def admin_delete_shipment(self, shipment_id: str) -> None:
        if not self.shipments.delete(shipment_id):
            raise NotFoundError("Shipment not found")

    def shipment_status(self, shipment: Shipment, now: Optional[datetime] = None) -> Optional[AutomationRule]:
        """Current step of a shipment under its automation, if it has one"""
        if not shipment.shipment_automation_id:
            return None
        automation = self.automations.find_by_id(shipment.shipment_automation_id)
        if automation is None:
            return None
        return current_progress_step(shipment.order_date, automation.progress, now)


_shipment_service: Optional[ShipmentService] = None


def get_shipment_service() -> ShipmentService:
    global _shipment_service
    if _shipment_service is None:
        _shipment_service = ShipmentService()
    return _shipment_service

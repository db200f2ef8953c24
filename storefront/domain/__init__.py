"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
Date: 2026-03-02
"""
from storefront.domain.product import Product
from storefront.domain.order import Order
from storefront.domain.task import Task, TaskItem, TaskSettings
from storefront.domain.sale import Sale
from storefront.domain.shipment import AutomationRule, Shipment, ShipmentAutomation
from storefront.domain.withdrawal import Withdrawal, WithdrawalStatus
from storefront.domain.referral_code import ReferralCode
from storefront.domain.social_settings import SocialSettings
from storefront.domain.user import Label, User

__all__ = [
    'Product',
    'Order',
    'Task',
    'TaskItem',
    'TaskSettings',
    'Sale',
    'AutomationRule',
    'Shipment',
    'ShipmentAutomation',
    'Withdrawal',
    'WithdrawalStatus',
    'ReferralCode',
    'SocialSettings',
    'Label',
    'User',
]

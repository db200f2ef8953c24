"""
Repository Layer - Data Access

Table repositories run SQL against the Supabase Postgres database and
return domain models. UserRepository and StorageRepository wrap the
Supabase auth admin and storage APIs.

Author: TM3
Date: 2026-03-02
"""
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.task_repository import TaskRepository, TaskSettingsRepository
from storefront.repositories.sale_repository import SaleRepository
from storefront.repositories.shipment_repository import ShipmentAutomationRepository, ShipmentRepository
from storefront.repositories.withdrawal_repository import WithdrawalRepository
from storefront.repositories.referral_code_repository import ReferralCodeRepository
from storefront.repositories.social_settings_repository import SocialSettingsRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.storage_repository import StorageRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'TaskRepository',
    'TaskSettingsRepository',
    'SaleRepository',
    'ShipmentAutomationRepository',
    'ShipmentRepository',
    'WithdrawalRepository',
    'ReferralCodeRepository',
    'SocialSettingsRepository',
    'UserRepository',
    'StorageRepository',
]

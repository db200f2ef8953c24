"""
Storefront Platform

Customer storefront with seller, admin and superadmin dashboards backed by Supabase.
"""
__version__ = "1.0.0"

"""
User Repository - Supabase Auth admin API

Users are not a table we own; every call goes through the service-role
client's auth admin API and comes back as a User domain model.

Author: TM3
Date: 2026-03-02
"""
import logging
import re
from typing import Any, Dict, List, Optional

from supabase import AuthApiError, AuthError

from storefront.core.database import create_auth_client, get_supabase
from storefront.core.errors import BackendError, NotAuthorizedError
from storefront.domain.user import User

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 1000


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only; Supabase stores phones without the leading +"""
    return re.sub(r"\D", "", phone or "")


class UserRepository:
    """Repository for Supabase Auth users"""

    @staticmethod
    def _map_user(raw) -> User:
        app_metadata = getattr(raw, "app_metadata", None) or {}
        user_metadata = getattr(raw, "user_metadata", None) or {}
        return User(
            id=str(raw.id),
            name=user_metadata.get("name") or "",
            email=getattr(raw, "email", None),
            phone=getattr(raw, "phone", None),
            labels=list(app_metadata.get("labels") or []),
            prefs=dict(user_metadata.get("prefs") or {}),
            created_at=getattr(raw, "created_at", None)
        )

    def create(
        self,
        email: str,
        password: str,
        name: str,
        labels: List[str],
        phone: Optional[str] = None,
        prefs: Optional[Dict[str, Any]] = None
    ) -> User:
        attributes: Dict[str, Any] = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"name": name, "prefs": prefs or {}},
            "app_metadata": {"labels": labels},
        }
        if phone:
            attributes["phone"] = phone
            attributes["phone_confirm"] = True

        try:
            response = get_supabase().auth.admin.create_user(attributes)
        except AuthError as e:
            logger.error(f"Error creating user {email}: {e}")
            raise BackendError(str(e)) from e

        return self._map_user(response.user)

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            response = get_supabase().auth.admin.get_user_by_id(user_id)
        except AuthApiError as e:
            if getattr(e, "status", None) == 404:
                return None
            logger.error(f"Error fetching user {user_id}: {e}")
            raise BackendError(str(e)) from e

        if not response or not response.user:
            return None
        return self._map_user(response.user)

    def find_all(self) -> List[User]:
        """Every user, walking the admin API page by page"""
        users: List[User] = []
        page = 1

        try:
            while True:
                batch = get_supabase().auth.admin.list_users(page=page, per_page=LIST_PAGE_SIZE)
                users.extend(self._map_user(raw) for raw in batch)
                if len(batch) < LIST_PAGE_SIZE:
                    break
                page += 1
        except AuthError as e:
            logger.error(f"Error listing users: {e}")
            raise BackendError(str(e)) from e

        return users

    def find_by_label(self, label: str) -> List[User]:
        """Users carrying a label, newest first"""
        users = [user for user in self.find_all() if user.has_label(label)]
        users.sort(key=lambda u: u.created_at.timestamp() if u.created_at else 0, reverse=True)
        return users

    def find_by_phone(self, phone: str) -> Optional[User]:
        wanted = normalize_phone(phone)
        if not wanted:
            return None
        for user in self.find_all():
            if normalize_phone(user.phone) == wanted:
                return user
        return None

    def update(self, user_id: str, attributes: Dict[str, Any]) -> User:
        """
        Update auth attributes (email, phone, password, user_metadata, app_metadata)
        """
        try:
            response = get_supabase().auth.admin.update_user_by_id(user_id, attributes)
        except AuthError as e:
            logger.error(f"Error updating user {user_id}: {e}")
            raise BackendError(str(e)) from e

        return self._map_user(response.user)

    def update_metadata(self, user: User, name: Optional[str] = None, prefs: Optional[Dict[str, Any]] = None) -> User:
        """Rewrite user_metadata keeping fields that are not being changed"""
        metadata = {
            "name": name if name is not None else user.name,
            "prefs": prefs if prefs is not None else user.prefs,
        }
        return self.update(user.id, {"user_metadata": metadata})

    def delete(self, user_id: str) -> None:
        try:
            get_supabase().auth.admin.delete_user(user_id)
        except AuthError as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            raise BackendError(str(e)) from e

    def sign_in(self, email: str, password: str):
        """
        Password sign-in on a throwaway anon client

        Returns:
            Supabase Session (access_token, refresh_token, expires_in)
        """
        try:
            response = create_auth_client().auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as e:
            logger.info(f"Sign-in rejected for {email}: {e}")
            raise NotAuthorizedError("Invalid phone number or password") from e

        if not response.session:
            raise NotAuthorizedError("Invalid phone number or password")
        return response.session

    def sign_out(self, access_token: str) -> None:
        """Revoke every session of the token owner"""
        try:
            get_supabase().auth.admin.sign_out(access_token)
        except AuthError as e:
            logger.warning(f"Sign-out failed: {e}")
            raise BackendError(str(e)) from e

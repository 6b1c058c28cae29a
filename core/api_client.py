"""
core/api_client.py
------------------
Typed client for the SalesRoles REST API.

Role and product calls raise `ApiError` / `requests.RequestException` and
leave recovery to the caller (the store). The three AI calls never raise:
they log and return the fallbacks defined in `core.assistant`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests

from core.assistant import (
    FALLBACK_PERMISSIONS,
    fallback_description,
    fallback_recommendations,
    filter_permissions,
)
from core.config import API_PREFIX, BACKEND_URL
from core.logger import get_logger
from core.types import Product, Role, RoleRecommendation
from core.ui_helpers import ApiError, api_request, build_session

logger = get_logger(__name__)


class IncentiveApi:
    """Thin wrapper over the /api endpoints."""

    def __init__(self, base_url: str = BACKEND_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or build_session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}/{path.lstrip('/')}"

    def _call(self, method: str, path: str, data: Any = None) -> Any:
        return api_request(self._url(path), method, data, session=self.session)

    # ------------------------------------------------------------------ #
    # Roles
    # ------------------------------------------------------------------ #

    def list_roles(self) -> List[Role]:
        return [Role.from_api(item) for item in self._call("GET", "roles") or []]

    def get_role_count(self) -> int:
        return int(self._call("GET", "roles/count"))

    def get_role(self, role_id: int) -> Role:
        return Role.from_api(self._call("GET", f"roles/{role_id}"))

    def create_role(
        self,
        title: str,
        description: str,
        permissions: Optional[Sequence[str]] = None,
        is_default: bool = False,
    ) -> Role:
        payload = _role_payload(title, description, permissions, is_default)
        return Role.from_api(self._call("POST", "roles", payload))

    def update_role(
        self,
        role_id: int,
        title: str,
        description: str,
        permissions: Optional[Sequence[str]] = None,
        is_default: bool = False,
    ) -> Role:
        payload = _role_payload(title, description, permissions, is_default)
        return Role.from_api(self._call("PUT", f"roles/{role_id}", payload))

    def delete_role(self, role_id: int) -> None:
        self._call("DELETE", f"roles/{role_id}")

    def set_default_role(self, role_id: int) -> Role:
        return Role.from_api(self._call("PUT", f"roles/{role_id}/default"))

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #

    def list_products(self) -> List[Product]:
        return [Product.from_api(item) for item in self._call("GET", "products") or []]

    def get_role_products(self, role_id: int) -> List[Product]:
        return [Product.from_api(item) for item in self._call("GET", f"roles/{role_id}/products") or []]

    def update_role_products(self, role_id: int, product_ids: Iterable[str]) -> List[Product]:
        payload = {"productIds": sorted(set(product_ids))}
        return [Product.from_api(item) for item in self._call("PUT", f"roles/{role_id}/products", payload) or []]

    # ------------------------------------------------------------------ #
    # AI assistance (never raises)
    # ------------------------------------------------------------------ #

    def generate_role_description(self, role_name: str) -> str:
        try:
            data = self._call("POST", "generate-role-description", {"roleName": role_name})
            description = _as_object(data).get("description")
            if isinstance(description, str) and description.strip():
                return description.strip()
            logger.warning("[API] Empty role description returned; using fallback.")
        except (ApiError, requests.RequestException, ValueError) as e:
            logger.warning(f"[API] Role description generation failed: {e}")
        return fallback_description(role_name)

    def recommend_roles(
        self,
        business_description: str,
        existing_roles: Sequence[str] = (),
        target_market: str = "general",
        sales_goals: str = "growth",
    ) -> List[RoleRecommendation]:
        payload: Dict[str, Any] = {
            "businessDescription": business_description,
            "existingRoles": list(existing_roles),
            "targetMarket": target_market,
            "salesGoals": sales_goals,
        }
        try:
            data = self._call("POST", "recommend-roles", payload)
            items = _as_object(data).get("recommendations")
            items = [item for item in items if isinstance(item, dict)] if isinstance(items, list) else []
            if items:
                return [RoleRecommendation.from_api(item) for item in items]
            logger.warning("[API] No recommendations returned; using fallback.")
        except (ApiError, requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning(f"[API] Role recommendation failed: {e}")
        return fallback_recommendations()

    def generate_role_permissions(self, role_name: str, role_description: str) -> List[str]:
        payload = {"roleName": role_name, "roleDescription": role_description}
        try:
            data = self._call("POST", "generate-role-permissions", payload)
            raw = _as_object(data).get("permissions")
            permissions = filter_permissions(raw) if isinstance(raw, list) else []
            if permissions:
                return permissions
            logger.warning("[API] No usable permissions returned; using fallback.")
        except (ApiError, requests.RequestException, ValueError) as e:
            logger.warning(f"[API] Permission generation failed: {e}")
        return list(FALLBACK_PERMISSIONS)


def _role_payload(
    title: str,
    description: str,
    permissions: Optional[Sequence[str]],
    is_default: bool,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"title": title, "description": description, "isDefault": bool(is_default)}
    if permissions is not None:
        payload["permissions"] = list(permissions)
    return payload


def _as_object(data: Any) -> Dict[str, Any]:
    """The decoded body when it is a JSON object, otherwise an empty dict."""
    return data if isinstance(data, dict) else {}

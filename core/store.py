"""
core/store.py
-------------
Incentive / selection store: the single source of truth for roles, products,
role-product assignments, the acting identity and UI mode of one console
session.

Design
------
- Explicitly constructed with its API client; the console keeps one
  instance per browser session, tests build their own and call `reset()`.
- Mutations are optimistic: local state changes first, then the API call.
  A failed call is recovered by re-fetching the affected slice from the
  server, never by undoing the local change by hand.
- Selectors are pure reads of the current state.
- Collections are replaced, not mutated in place, so callers holding an
  old reference can tell that something changed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, TypeVar

import requests

from core.api_client import IncentiveApi
from core.incentives import combine_incentive
from core.logger import get_logger
from core.types import (
    CombinedIncentive,
    Member,
    Product,
    Role,
    RoleIncentive,
    UserMode,
    ViewMode,
)
from core.ui_helpers import ApiError

logger = get_logger(__name__)

T = TypeVar("T")

# Network failures the store recovers from instead of propagating
RECOVERABLE = (ApiError, requests.RequestException)

DEFAULT_MEMBERS: List[Member] = [
    Member(id=1411, name="Muhammad Gunes", email="muhammad.gunes@example.com", role_id=1),
    Member(id=1422, name="Sarah Johnson", email="sarah.johnson@example.com", role_id=3),
    Member(id=1437, name="David Chen", email="david.chen@example.com", role_id=2),
]


class IncentiveStore:
    """State container and actions for the incentive console."""

    def __init__(self, api: IncentiveApi, members: Optional[Sequence[Member]] = None):
        self.api = api
        self._initial_members = list(DEFAULT_MEMBERS if members is None else members)
        self.reset()

    def reset(self) -> None:
        """Restore the initial state. The API client is kept."""
        self.products: List[Product] = []
        self.roles: List[Role] = []
        self.role_incentives: Dict[int, RoleIncentive] = {}
        self.members: List[Member] = list(self._initial_members)
        self.current_member_id: Optional[int] = None
        self.user_mode: UserMode = UserMode.ADMINISTRATOR
        self.current_sales_role_id: Optional[int] = None
        self.selected_roles: List[int] = []
        self.mode: ViewMode = ViewMode.VIEW
        self.active_tab: str = "default"
        self.is_loading_products = False
        self.is_loading_roles = False
        self.is_updating_products = False

    # ------------------------------------------------------------------ #
    # Optimistic mutation helper
    # ------------------------------------------------------------------ #

    def optimistic(
        self,
        apply: Callable[[], None],
        request: Callable[[], T],
        reconcile: Optional[Callable[[T], None]] = None,
        resync: Optional[Callable[[], None]] = None,
    ) -> Optional[T]:
        """
        Apply a local change, then persist it.

        On success the server answer is passed to `reconcile`. On failure
        `resync` re-reads the authoritative state and None is returned.
        """
        apply()
        try:
            result = request()
        except RECOVERABLE as e:
            logger.warning(f"[Store] Mutation failed, re-syncing from server: {e}")
            if resync is not None:
                resync()
            return None
        if reconcile is not None:
            reconcile(result)
        return result

    def _set_incentive(self, role_id: int, product_ids: Iterable[str]) -> None:
        updated = dict(self.role_incentives)
        updated[role_id] = RoleIncentive(role_id=role_id, product_ids=frozenset(product_ids))
        self.role_incentives = updated

    # ------------------------------------------------------------------ #
    # Simple setters
    # ------------------------------------------------------------------ #

    def set_mode(self, mode: ViewMode) -> None:
        self.mode = ViewMode(mode)

    def set_active_tab(self, tab: str) -> None:
        self.active_tab = tab

    def set_roles(self, roles: Sequence[Role]) -> None:
        counts: Dict[int, int] = {}
        for member in self.members:
            counts[member.role_id] = counts.get(member.role_id, 0) + 1
        self.roles = [replace(role, member_count=counts.get(role.id, 0)) for role in roles]
        known = {role.id for role in self.roles}
        self.selected_roles = [rid for rid in self.selected_roles if rid in known]

    def add_role(self, role: Role) -> None:
        self.set_roles([*self.roles, role])

    def remove_role(self, role_id: int) -> None:
        self.roles = [role for role in self.roles if role.id != role_id]
        self.role_incentives = {rid: ri for rid, ri in self.role_incentives.items() if rid != role_id}
        self.selected_roles = [rid for rid in self.selected_roles if rid != role_id]

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    def load_roles(self) -> List[Role]:
        self.is_loading_roles = True
        try:
            self.set_roles(self.api.list_roles())
        except RECOVERABLE as e:
            logger.error(f"[Store] Failed to load roles: {e}")
        finally:
            self.is_loading_roles = False
        return self.roles

    def fetch_products(self) -> List[Product]:
        self.is_loading_products = True
        try:
            self.products = self.api.list_products()
            logger.info(f"[Store] Loaded {len(self.products)} products")
        except RECOVERABLE as e:
            logger.error(f"[Store] Failed to fetch products: {e}")
        finally:
            self.is_loading_products = False
        return self.products

    def fetch_role_products(self, role_id: int) -> Optional[FrozenSet[str]]:
        """
        Refresh one role's assignment from the server.

        An empty answer for a role with no entry leaves it unconfigured.
        Returns None when the request fails.
        """
        try:
            products = self.api.get_role_products(role_id)
        except RECOVERABLE as e:
            logger.error(f"[Store] Failed to fetch products for role {role_id}: {e}")
            return None

        product_ids = frozenset(p.id for p in products)
        if product_ids or role_id in self.role_incentives:
            self._set_incentive(role_id, product_ids)
        return product_ids

    # ------------------------------------------------------------------ #
    # Product assignment
    # ------------------------------------------------------------------ #

    def toggle_product_selection(self, product_id: str, role_id: int, selected: bool) -> bool:
        """
        Add or remove one product for a role, optimistically.

        Returns True when the server accepted the change.
        """
        existing = self.role_incentives.get(role_id)
        if existing is None and not selected:
            return True

        current = existing.product_ids if existing else frozenset()
        updated = current | {product_id} if selected else current - {product_id}

        self.is_updating_products = True
        try:
            result = self.optimistic(
                apply=lambda: self._set_incentive(role_id, updated),
                request=lambda: self.api.update_role_products(role_id, updated),
                reconcile=lambda products: self._set_incentive(role_id, (p.id for p in products)),
                resync=lambda: self.fetch_role_products(role_id),
            )
        finally:
            self.is_updating_products = False
        return result is not None

    def update_role_products(self, role_id: int, product_ids: Iterable[str]) -> FrozenSet[str]:
        """
        Replace a role's whole product set.

        Returns the new set, or an empty set when the update did not go
        through (products are re-fetched in that case).
        """
        wanted = frozenset(product_ids)
        self.is_updating_products = True
        try:
            self.api.update_role_products(role_id, wanted)
        except RECOVERABLE as e:
            logger.error(f"[Store] Failed to update products for role {role_id}: {e}")
            self.fetch_products()
            return frozenset()
        finally:
            self.is_updating_products = False

        self._set_incentive(role_id, wanted)
        self.products = [replace(p, selected=p.id in wanted) for p in self.products]
        return wanted

    # ------------------------------------------------------------------ #
    # Role mutations
    # ------------------------------------------------------------------ #

    @property
    def total_roles(self) -> int:
        return len(self.roles)

    def can_delete_role(self) -> bool:
        return self.total_roles > 1

    def create_role(self, title: str, description: str, permissions: Sequence[str], is_default: bool = False) -> Role:
        """Create a role; ApiError propagates so forms can show validation errors."""
        role = self.api.create_role(title, description, list(permissions), is_default)
        if role.is_default:
            self.load_roles()
        else:
            self.add_role(role)
        return role

    def update_role(
        self,
        role_id: int,
        title: str,
        description: str,
        permissions: Sequence[str],
        is_default: bool = False,
    ) -> Role:
        role = self.api.update_role(role_id, title, description, list(permissions), is_default)
        if role.is_default:
            self.load_roles()
        else:
            self.set_roles([role if r.id == role_id else r for r in self.roles])
        return role

    def delete_role(self, role_id: int) -> bool:
        if not self.can_delete_role():
            logger.warning("[Store] Refusing to delete the last remaining role")
            return False
        result = self.optimistic(
            apply=lambda: self.remove_role(role_id),
            request=lambda: self.api.delete_role(role_id) or True,
            reconcile=lambda _: self.load_roles(),
            resync=self.load_roles,
        )
        return result is not None

    def set_default_role(self, role_id: int) -> bool:
        def apply() -> None:
            self.roles = [replace(r, is_default=r.id == role_id) for r in self.roles]

        result = self.optimistic(
            apply=apply,
            request=lambda: self.api.set_default_role(role_id),
            resync=self.load_roles,
        )
        return result is not None

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    def switch_to_member(self, member_id: Optional[int]) -> None:
        if member_id is None:
            self.user_mode = UserMode.ADMINISTRATOR
            self.current_member_id = None
            self.current_sales_role_id = None
            return

        member = next((m for m in self.members if m.id == member_id), None)
        if member is None:
            return

        self.user_mode = UserMode.IMPERSONATED_MEMBER
        self.current_member_id = member.id
        self.current_sales_role_id = member.role_id

    @property
    def is_impersonating(self) -> bool:
        return self.user_mode == UserMode.IMPERSONATED_MEMBER

    @property
    def current_member(self) -> Optional[Member]:
        return next((m for m in self.members if m.id == self.current_member_id), None)

    def toggle_role_selection(self, role_id: int) -> None:
        if role_id in self.selected_roles:
            self.selected_roles = [rid for rid in self.selected_roles if rid != role_id]
        else:
            self.selected_roles = [*self.selected_roles, role_id]

    # ------------------------------------------------------------------ #
    # Selectors
    # ------------------------------------------------------------------ #

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_selected_products_for_role(self, role_id: int) -> List[Product]:
        entry = self.role_incentives.get(role_id)
        if entry is None:
            return [p for p in self.products if p.selected]
        return [p for p in self.products if p.id in entry.product_ids]

    def _contributing_products(self, role_id: int, sellable_only: bool) -> List[Product]:
        entry = self.role_incentives.get(role_id)
        candidates = self.products if entry is None else [p for p in self.products if p.id in entry.product_ids]
        if sellable_only:
            candidates = [p for p in candidates if p.is_sellable]
        return candidates

    def effective_roles(self) -> List[int]:
        if self.is_impersonating:
            return [] if self.current_sales_role_id is None else [self.current_sales_role_id]
        return list(self.selected_roles)

    def calculate_combined_incentives(self) -> List[CombinedIncentive]:
        """Combined commission and bonus per product over the effective roles."""
        roles = self.effective_roles()
        if not roles or not self.products:
            return []

        sellable_only = self.is_impersonating
        contributors: Dict[str, List[int]] = {}
        for role_id in roles:
            for product in self._contributing_products(role_id, sellable_only):
                contributors.setdefault(product.id, []).append(role_id)

        if not contributors:
            # Nothing configured yet: show every (visible) product
            for product in self.products:
                if product.is_sellable or not sellable_only:
                    contributors[product.id] = list(roles)

        return [
            combine_incentive(product, contributors[product.id])
            for product in self.products
            if product.id in contributors
        ]

    def get_available_products_for_sales_member(self) -> List[Product]:
        role_id = self.current_sales_role_id
        if role_id is None:
            return []
        entry = self.role_incentives.get(role_id)
        if entry is None:
            return [p for p in self.products if p.is_sellable and p.selected]
        return [p for p in self.products if p.is_sellable and p.id in entry.product_ids]

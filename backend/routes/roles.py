"""
Roles Router
============

CRUD for sales team roles plus the role ↔ product assignment endpoints.

Endpoints:
----------
- GET    /api/roles                  → all roles ordered by id
- GET    /api/roles/count            → number of roles
- GET    /api/roles/{id}             → one role
- POST   /api/roles                  → create (201)
- PUT    /api/roles/{id}             → update
- DELETE /api/roles/{id}             → delete (204); the last role cannot be deleted
- PUT    /api/roles/{id}/default     → mark as the default role
- GET    /api/roles/{id}/products    → products assigned to a role
- PUT    /api/roles/{id}/products    → replace a role's product set
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from backend.schemas import ProductOut, RoleIn, RoleOut, RoleProductsIn
from core.logger import get_logger
from database import queries

logger = get_logger(__name__)

router = APIRouter(prefix="/roles", tags=["roles"])


def _get_role_or_404(role_id: int):
    role = queries.get_role(role_id)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


# --------------------------------------------------------------------------- #
# Role CRUD
# --------------------------------------------------------------------------- #

@router.get("", response_model=List[RoleOut])
def list_roles():
    try:
        return queries.get_all_roles()
    except Exception as e:  # noqa: BLE001
        logger.exception("[API] Error fetching roles")
        raise HTTPException(status_code=500, detail=f"Failed to fetch roles: {e}")


@router.get("/count", response_model=int)
def count_roles():
    try:
        return queries.get_role_count()
    except Exception as e:  # noqa: BLE001
        logger.exception("[API] Error counting roles")
        raise HTTPException(status_code=500, detail=f"Failed to count roles: {e}")


@router.get("/{role_id}", response_model=RoleOut)
def get_role(role_id: int):
    return _get_role_or_404(role_id)


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(payload: RoleIn):
    role = queries.create_role(
        title=payload.title,
        description=payload.description,
        permissions=payload.permissions,
        is_default=payload.is_default,
    )
    return role


@router.put("/{role_id}", response_model=RoleOut)
def update_role(role_id: int, payload: RoleIn):
    role = queries.update_role(
        role_id,
        title=payload.title,
        description=payload.description,
        permissions=payload.permissions,
        is_default=payload.is_default,
    )
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: int):
    try:
        deleted = queries.delete_role(role_id)
    except queries.LastRoleError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Role not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{role_id}/default", response_model=RoleOut)
def set_default_role(role_id: int):
    role = queries.set_role_as_default(role_id)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


# --------------------------------------------------------------------------- #
# Role ↔ Product assignments
# --------------------------------------------------------------------------- #

@router.get("/{role_id}/products", response_model=List[ProductOut])
def get_role_products(role_id: int):
    _get_role_or_404(role_id)
    return queries.get_products_for_role(role_id)


@router.put("/{role_id}/products", response_model=List[ProductOut])
def update_role_products(role_id: int, payload: RoleProductsIn):
    try:
        return queries.update_product_role_assignments(role_id, payload.product_ids)
    except queries.RoleNotFoundError:
        raise HTTPException(status_code=404, detail="Role not found")
    except queries.ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

"""
Products Router
===============

Product catalogue CRUD. The list endpoint flags each product as `selected`
when at least one role is assigned to it.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from backend.schemas import ProductIn, ProductOut
from core.logger import get_logger
from database import queries

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products():
    try:
        rows = queries.get_products_with_role_assignments()
    except Exception as e:  # noqa: BLE001
        logger.exception("[API] Error fetching products")
        raise HTTPException(status_code=500, detail=f"Failed to fetch products: {e}")

    return [
        ProductOut.model_validate(row["product"]).model_copy(
            update={"selected": row["selected"], "role_ids": row["role_ids"]}
        )
        for row in rows
    ]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str):
    product = queries.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductIn):
    if queries.get_product(payload.id) is not None:
        raise HTTPException(status_code=400, detail=f"Product with ID {payload.id} already exists")
    return queries.create_product(**payload.model_dump())


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductIn):
    fields = payload.model_dump(exclude={"id"})
    product = queries.update_product(product_id, **fields)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str):
    if not queries.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

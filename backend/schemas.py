"""
Pydantic request/response models for the SalesRoles API.

Field names are snake_case in Python and camelCase on the wire
(`isDefault`, `isSellable`, `productIds`, ...).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# --------------------------------------------------------------------------- #
# Roles
# --------------------------------------------------------------------------- #

class RoleIn(ApiModel):
    """Create / update payload. Each rule reports its own field error."""
    title: str = Field(min_length=2)
    description: str = Field(min_length=10)
    permissions: Optional[List[str]] = Field(default=None, min_length=1)
    is_default: bool = False


class RoleOut(ApiModel):
    id: int
    title: str
    description: str
    permissions: List[str] = Field(default_factory=list)
    is_default: bool = False
    member_count: Optional[int] = None


# --------------------------------------------------------------------------- #
# Products
# --------------------------------------------------------------------------- #

class ProductIn(ApiModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    commission: str = Field(pattern=r"^\s*\d{1,9}(?:[.,]\d{1,4})?\s*%$")
    bonus: str = Field(pattern=r"^\s*\d{1,9}(?:[.,]\d{1,4})?\s*€$")
    created: str = "—"
    price: Optional[str] = None
    is_sellable: bool = True


class ProductOut(ApiModel):
    id: str
    name: str
    created: str = "—"
    commission: str
    bonus: str
    price: Optional[str] = None
    is_sellable: bool = True
    selected: bool = False
    role_ids: Optional[List[int]] = None


class RoleProductsIn(ApiModel):
    product_ids: List[str]


# --------------------------------------------------------------------------- #
# AI assistance
# --------------------------------------------------------------------------- #

class DescriptionRequest(ApiModel):
    role_name: str = Field(min_length=1)


class DescriptionResponse(ApiModel):
    description: str


class RecommendationRequest(ApiModel):
    business_description: str = Field(min_length=1)
    existing_roles: List[str] = Field(default_factory=list)
    target_market: str = "general"
    sales_goals: str = "growth"


class RoleRecommendationOut(ApiModel):
    title: str
    description: str
    responsibilities: List[str] = Field(default_factory=list)
    required_skills: List[str] = Field(default_factory=list)
    relevance_score: int = Field(ge=1, le=100)


class RecommendationResponse(ApiModel):
    recommendations: List[RoleRecommendationOut]


class PermissionRequest(ApiModel):
    role_name: str = Field(min_length=1)
    role_description: str = Field(min_length=1)


class PermissionResponse(ApiModel):
    permissions: List[str]

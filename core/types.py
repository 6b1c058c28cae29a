"""
core/types.py
-------------
Client-side domain types shared by the API client, the store and the UI.

All types are plain dataclasses; `from_api` converts the camelCase JSON
returned by the backend, `as_dict` produces the snake_case form used by
the Streamlit tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

PERMISSION_VOCABULARY: Tuple[str, ...] = (
    "view",
    "edit",
    "admin",
    "approve",
    "create",
    "delete",
    "export",
)


class UserMode(str, Enum):
    ADMINISTRATOR = "administrator"
    IMPERSONATED_MEMBER = "impersonated_member"


class ViewMode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


@dataclass
class Role:
    id: int
    title: str
    description: str
    permissions: List[str] = field(default_factory=list)
    is_default: bool = False
    member_count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Role":
        permissions = data.get("permissions") or []
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            permissions=[str(p) for p in permissions] if isinstance(permissions, list) else [],
            is_default=bool(data.get("isDefault", False)),
            member_count=int(data.get("memberCount") or 0),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Product:
    id: str
    name: str
    commission: str
    bonus: str
    created: str = "—"
    price: Optional[str] = None
    is_sellable: bool = True
    selected: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            commission=data.get("commission", "0%"),
            bonus=data.get("bonus", "0€"),
            created=data.get("created") or "—",
            price=data.get("price"),
            is_sellable=bool(data.get("isSellable", True)),
            selected=bool(data.get("selected", False)),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RoleIncentive:
    """Products a role may sell and earn incentives on."""
    role_id: int
    product_ids: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Member:
    id: int
    name: str
    email: str
    role_id: int
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class CombinedIncentive:
    product_id: str
    role_combination: Tuple[int, ...]
    combined_commission: str
    combined_bonus: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RoleRecommendation:
    title: str
    description: str
    responsibilities: Tuple[str, ...] = ()
    required_skills: Tuple[str, ...] = ()
    relevance_score: int = 50

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RoleRecommendation":
        try:
            score = int(data.get("relevanceScore", 50))
        except (TypeError, ValueError):
            score = 50
        return cls(
            title=str(data["title"]),
            description=str(data.get("description", "")),
            responsibilities=tuple(str(r) for r in data.get("responsibilities") or []),
            required_skills=tuple(str(s) for s in data.get("requiredSkills") or []),
            relevance_score=max(1, min(100, score)),
        )

    def to_api(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "responsibilities": list(self.responsibilities),
            "requiredSkills": list(self.required_skills),
            "relevanceScore": self.relevance_score,
        }

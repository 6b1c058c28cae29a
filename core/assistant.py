"""
core/assistant.py
-----------------
AI-assisted role authoring: descriptions, team-structure recommendations and
permission suggestions.

The capability is pluggable behind `RoleAssistant`:

- `OpenAIRoleAssistant` calls the OpenAI chat completions API and raises on
  any failure, so the backend can answer 500.
- `StaticRoleAssistant` is deterministic and returns the fallback values;
  the backend uses it when no OPENAI_API_KEY is configured.

The fallback helpers below define what every consumer shows when generation
fails. These features are conveniences: they degrade, they never block.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence

from core.config import OPENAI_API_KEY, OPENAI_MODEL
from core.logger import get_logger
from core.types import PERMISSION_VOCABULARY, RoleRecommendation

logger = get_logger(__name__)

# --------------------------------------------------------------------------- #
# Fallbacks
# --------------------------------------------------------------------------- #

FALLBACK_PERMISSIONS: List[str] = ["view"]


def fallback_description(role_name: str) -> str:
    return f"Responsible for {role_name.strip().lower()} activities within the sales organization."


def fallback_recommendations() -> List[RoleRecommendation]:
    return [
        RoleRecommendation(
            title="Sales Representative",
            description="Handles direct sales activities with customers to meet sales targets and grow the business.",
            responsibilities=(
                "Engaging with potential customers",
                "Demonstrating products/services",
                "Closing sales",
                "Maintaining customer relationships",
            ),
            required_skills=("Communication", "Negotiation", "Product knowledge", "Customer service"),
            relevance_score=90,
        )
    ]


def filter_permissions(candidates: Iterable[Any]) -> List[str]:
    """Keep vocabulary tags only, lower-cased, de-duplicated, order preserved."""
    seen: List[str] = []
    for tag in candidates:
        norm = str(tag).strip().lower()
        if norm in PERMISSION_VOCABULARY and norm not in seen:
            seen.append(norm)
    return seen


# --------------------------------------------------------------------------- #
# Capability interface
# --------------------------------------------------------------------------- #

class RoleAssistant(ABC):
    """Text-generation capability used by the role management screens."""

    @abstractmethod
    def generate_role_description(self, role_name: str) -> str:
        ...

    @abstractmethod
    def recommend_roles(
        self,
        business_description: str,
        existing_roles: Sequence[str] = (),
        target_market: str = "general",
        sales_goals: str = "growth",
    ) -> List[RoleRecommendation]:
        ...

    @abstractmethod
    def generate_role_permissions(self, role_name: str, role_description: str) -> List[str]:
        ...


class StaticRoleAssistant(RoleAssistant):
    """Deterministic assistant returning the fallback values."""

    def generate_role_description(self, role_name: str) -> str:
        return fallback_description(role_name)

    def recommend_roles(
        self,
        business_description: str,
        existing_roles: Sequence[str] = (),
        target_market: str = "general",
        sales_goals: str = "growth",
    ) -> List[RoleRecommendation]:
        return fallback_recommendations()

    def generate_role_permissions(self, role_name: str, role_description: str) -> List[str]:
        return list(FALLBACK_PERMISSIONS)


class OpenAIRoleAssistant(RoleAssistant):
    """
    Assistant backed by the OpenAI chat completions API.

    Args:
        api_key: OpenAI key (defaults to OPENAI_API_KEY)
        model: Model name (defaults to OPENAI_MODEL)
        client: Pre-built client, mainly for tests
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
        temperature: float = 0.7,
    ):
        self.model = model or OPENAI_MODEL
        self.temperature = temperature
        if client is not None:
            self.client = client
            return

        key = api_key or OPENAI_API_KEY
        if not key:
            raise ValueError("API key not found for OpenAI. Set OPENAI_API_KEY environment variable.")
        from openai import OpenAI

        self.client = OpenAI(api_key=key)

    def _complete(self, system: str, user: str, max_tokens: int, json_mode: bool = False) -> str:
        kwargs: dict = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "max_tokens": max_tokens,
            "temperature": self.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"[Assistant] Calling {self.model} (json={json_mode})")
        response = self.client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("No content in response")
        return content.strip()

    def generate_role_description(self, role_name: str) -> str:
        return self._complete(
            "You are a helpful AI assistant that generates concise, professional descriptions for sales team roles.",
            (
                f'Generate a brief professional description (2-3 sentences) for a sales team role titled "{role_name}". '
                "The description should explain the key responsibilities and importance of this role in a sales "
                "organization. Keep it under 150 characters and focus on business value."
            ),
            max_tokens=200,
        )

    def recommend_roles(
        self,
        business_description: str,
        existing_roles: Sequence[str] = (),
        target_market: str = "general",
        sales_goals: str = "growth",
    ) -> List[RoleRecommendation]:
        content = self._complete(
            (
                "You are a sales team structure expert that helps businesses optimize their sales organization. "
                "Provide recommendations based on the business type, existing roles, target market, and sales goals."
            ),
            (
                "Based on the following information, recommend the ideal sales team structure with specific roles.\n\n"
                f"Business Description: {business_description}\n"
                f"Existing Roles: {', '.join(existing_roles) or 'None provided'}\n"
                f"Target Market: {target_market}\n"
                f"Sales Goals: {sales_goals}\n\n"
                "For each role provide title, description (under 150 characters), responsibilities (3-4), "
                "requiredSkills (3-4) and relevanceScore (1-100). "
                'Respond with a JSON object of the form {"recommendations": [...]}.'
            ),
            max_tokens=1500,
            json_mode=True,
        )
        parsed = json.loads(content)
        items = parsed.get("recommendations") if isinstance(parsed, dict) else None
        if not isinstance(items, list):
            raise ValueError("Invalid response format")
        recommendations = [RoleRecommendation.from_api(item) for item in items if isinstance(item, dict)]
        return sorted(recommendations, key=lambda r: r.relevance_score, reverse=True)

    def generate_role_permissions(self, role_name: str, role_description: str) -> List[str]:
        content = self._complete(
            "You assign access permissions to sales team roles.",
            (
                f'Role: "{role_name}"\nDescription: {role_description}\n\n'
                f"Choose the permissions this role needs from: {', '.join(PERMISSION_VOCABULARY)}. "
                'Respond with a JSON object of the form {"permissions": [...]}.'
            ),
            max_tokens=100,
            json_mode=True,
        )
        parsed = json.loads(content)
        raw = parsed.get("permissions") if isinstance(parsed, dict) else None
        if not isinstance(raw, list):
            raise ValueError("Invalid response format")
        return filter_permissions(raw) or list(FALLBACK_PERMISSIONS)


def build_assistant() -> RoleAssistant:
    """Return the OpenAI assistant when a key is configured, otherwise the static one."""
    if OPENAI_API_KEY:
        return OpenAIRoleAssistant()
    logger.info("[Assistant] OPENAI_API_KEY not set; using static fallbacks.")
    return StaticRoleAssistant()

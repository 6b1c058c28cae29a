"""
Assistant Router
================

AI-assisted role authoring. Generation failures answer 500; the console
client degrades to its fallbacks in that case.

Endpoints:
----------
- POST /api/generate-role-description   → {description}
- POST /api/recommend-roles             → {recommendations: [...]}
- POST /api/generate-role-permissions   → {permissions: [...]}
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from backend.schemas import (
    DescriptionRequest,
    DescriptionResponse,
    PermissionRequest,
    PermissionResponse,
    RecommendationRequest,
    RecommendationResponse,
    RoleRecommendationOut,
)
from core.assistant import RoleAssistant, build_assistant
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["assistant"])


@lru_cache(maxsize=1)
def get_assistant() -> RoleAssistant:
    return build_assistant()


@router.post("/generate-role-description", response_model=DescriptionResponse)
def generate_role_description(payload: DescriptionRequest, assistant: RoleAssistant = Depends(get_assistant)):
    try:
        return {"description": assistant.generate_role_description(payload.role_name)}
    except Exception as e:  # noqa: BLE001 - any provider failure becomes a 500
        logger.error(f"[Assistant] Error generating role description: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate role description: {e}")


@router.post("/recommend-roles", response_model=RecommendationResponse)
def recommend_roles(payload: RecommendationRequest, assistant: RoleAssistant = Depends(get_assistant)):
    try:
        recommendations = assistant.recommend_roles(
            payload.business_description,
            payload.existing_roles,
            payload.target_market,
            payload.sales_goals,
        )
    except Exception as e:  # noqa: BLE001
        logger.error(f"[Assistant] Error generating role recommendations: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate role recommendations: {e}")

    return {"recommendations": [RoleRecommendationOut.model_validate(r.to_api()) for r in recommendations]}


@router.post("/generate-role-permissions", response_model=PermissionResponse)
def generate_role_permissions(payload: PermissionRequest, assistant: RoleAssistant = Depends(get_assistant)):
    try:
        return {"permissions": assistant.generate_role_permissions(payload.role_name, payload.role_description)}
    except Exception as e:  # noqa: BLE001
        logger.error(f"[Assistant] Error generating role permissions: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate role permissions: {e}")

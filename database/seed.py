# database/seed.py
"""
Seed the default roles and product catalogue into an empty database.

Run once with:
    python -m database.seed
"""
from __future__ import annotations

from core.logger import get_logger
from . import queries
from .db_setup import init_db

logger = get_logger(__name__)

SEED_ROLES = [
    {
        "title": "Closer",
        "description": "Responsible for finalizing deals with clients and ensuring customer satisfaction with the purchase.",
        "permissions": ["edit", "view"],
        "is_default": True,
    },
    {
        "title": "Setter",
        "description": "Responsible for initial client prospecting and scheduling appointments for Closers.",
        "permissions": ["view"],
        "is_default": False,
    },
    {
        "title": "Senior Closer",
        "description": "Handles high-value and complex sales deals. Has extensive sales experience and mentors other team members.",
        "permissions": ["admin", "edit", "view"],
        "is_default": False,
    },
]

SEED_PRODUCTS = [
    {"id": "352041", "name": "1-on-1 Strategy Session", "created": "08.01.2024", "commission": "20%", "bonus": "5€", "price": "450€"},
    {"id": "349274", "name": "Business Growth Masterclass", "created": "20.12.2023", "commission": "20%", "bonus": "10€", "price": "990€"},
    {"id": "302985", "name": "Leadership Coaching Program", "created": "04.05.2023", "commission": "15%", "bonus": "15€", "price": "2400€"},
    {"id": "302984", "name": "Sales Acceleration Workshop", "created": "04.06.2023", "commission": "10%", "bonus": "20€", "price": "690€"},
    {"id": "445504", "name": "Marketing Mindset Course", "created": "—", "commission": "15%", "bonus": "5€", "price": "290€", "is_sellable": False},
    {"id": "443939", "name": "CEO Mentoring Package", "created": "—", "commission": "25%", "bonus": "25€", "price": "4900€"},
    {"id": "441233", "name": "Social Media Authority Program", "created": "—", "commission": "20%", "bonus": "15€", "price": "790€", "is_sellable": False},
    {"id": "123456", "name": "Email Marketing Mastery", "created": "15.02.2024", "commission": "10%", "bonus": "5€", "price": "190€"},
    {"id": "234567", "name": "Client Acquisition System", "created": "22.03.2024", "commission": "25%", "bonus": "10€", "price": "1490€"},
    {"id": "345678", "name": "Business Scaling Blueprint", "created": "10.01.2024", "commission": "30%", "bonus": "15€", "price": "2900€"},
]

# Products initially assigned to the default (first) role
SEED_DEFAULT_ASSIGNMENTS = ["352041", "349274", "302985", "123456", "234567", "345678"]


def seed_database() -> dict:
    """Insert seed data into empty tables only. Returns what was inserted."""
    inserted = {"roles": 0, "products": 0}

    if queries.get_role_count() == 0:
        logger.info("[Seed] No existing roles found. Seeding roles...")
        for data in SEED_ROLES:
            queries.create_role(**data)
            inserted["roles"] += 1
    else:
        logger.info("[Seed] Roles present; skipping role seeding.")

    if not queries.get_all_products():
        logger.info("[Seed] Seeding product catalogue...")
        for data in SEED_PRODUCTS:
            queries.create_product(**data)
            inserted["products"] += 1

        default_role = next((r for r in queries.get_all_roles() if r.is_default), None)
        if default_role is not None:
            queries.update_product_role_assignments(default_role.id, SEED_DEFAULT_ASSIGNMENTS)

    return inserted


if __name__ == "__main__":
    init_db(queries.current_engine())
    print(seed_database())

# database/queries.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.logger import get_logger
from .models import Product, Role, RoleProduct
from .db_setup import get_engine

logger = get_logger(__name__)

# ---------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------
_engine = get_engine()
SessionLocal = sessionmaker(bind=_engine, autoflush=False, autocommit=False, expire_on_commit=False)


def bind_engine(engine: Engine) -> None:
    """Point every query in this module at another engine (used by tests)."""
    global _engine
    _engine = engine
    SessionLocal.configure(bind=engine)


def current_engine() -> Engine:
    return _engine


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------
class RoleNotFoundError(LookupError):
    pass


class ProductNotFoundError(LookupError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class LastRoleError(ValueError):
    """Raised when a delete would leave the system without any role."""


# ---------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------
def _clear_default(session: Session) -> None:
    session.execute(update(Role).where(Role.is_default.is_(True)).values(is_default=False))


def get_all_roles() -> List[Role]:
    """Return all roles ordered by id."""
    with SessionLocal() as session:
        return list(session.scalars(select(Role).order_by(Role.id)).all())


def get_role_count() -> int:
    with SessionLocal() as session:
        return int(session.scalar(select(func.count()).select_from(Role)) or 0)


def get_role(role_id: int) -> Optional[Role]:
    """Return a single role by ID."""
    with SessionLocal() as session:
        return session.get(Role, role_id)


def create_role(
    *,
    title: str,
    description: str,
    permissions: Optional[Sequence[str]] = None,
    is_default: bool = False,
) -> Role:
    """
    Create and persist a new Role.

    The first role created is always the default; a role created as
    default takes the flag away from the previous one.
    """
    with SessionLocal() as session:
        count = session.scalar(select(func.count()).select_from(Role)) or 0
        should_be_default = count == 0 or bool(is_default)
        if should_be_default:
            _clear_default(session)

        role = Role(
            title=title,
            description=description,
            permissions=list(permissions or []),
            is_default=should_be_default,
        )
        session.add(role)
        session.commit()
        session.refresh(role)
        logger.info(f"[DB] Created role {role.id} ({role.title})")
        return role


def update_role(
    role_id: int,
    *,
    title: str,
    description: str,
    permissions: Optional[Sequence[str]] = None,
    is_default: bool = False,
) -> Optional[Role]:
    """
    Update an existing role. Returns None if not found.

    A role stays default until another role is marked default.
    """
    with SessionLocal() as session:
        role = session.get(Role, role_id)
        if not role:
            return None
        if is_default and not role.is_default:
            _clear_default(session)
            role.is_default = True
        role.title = title
        role.description = description
        if permissions is not None:
            role.permissions = list(permissions)
        session.commit()
        session.refresh(role)
        return role


def delete_role(role_id: int) -> bool:
    """
    Delete a role and its product assignments. Returns True if deleted.

    Raises LastRoleError when it is the only role left. If the deleted role
    was the default, the lowest-id remaining role becomes default.
    """
    with SessionLocal() as session:
        role = session.get(Role, role_id)
        if not role:
            return False

        count = session.scalar(select(func.count()).select_from(Role)) or 0
        if count <= 1:
            raise LastRoleError("Cannot delete the last remaining role")

        was_default = bool(role.is_default)
        session.execute(delete(RoleProduct).where(RoleProduct.role_id == role_id))
        session.delete(role)
        session.flush()

        if was_default:
            successor = session.scalars(select(Role).order_by(Role.id).limit(1)).first()
            if successor is not None:
                successor.is_default = True
                logger.info(f"[DB] Role {successor.id} is now the default role")

        session.commit()
        logger.info(f"[DB] Deleted role {role_id}")
        return True


def set_role_as_default(role_id: int) -> Optional[Role]:
    with SessionLocal() as session:
        role = session.get(Role, role_id)
        if not role:
            return None
        _clear_default(session)
        role.is_default = True
        session.commit()
        session.refresh(role)
        return role


# ---------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------
def get_all_products() -> List[Product]:
    """Return all products ordered by name."""
    with SessionLocal() as session:
        return list(session.scalars(select(Product).order_by(Product.name)).all())


def get_product(product_id: str) -> Optional[Product]:
    with SessionLocal() as session:
        return session.get(Product, product_id)


def create_product(
    *,
    id: str,
    name: str,
    commission: str,
    bonus: str,
    created: str = "—",
    price: Optional[str] = None,
    is_sellable: bool = True,
) -> Product:
    with SessionLocal() as session:
        product = Product(
            id=id,
            name=name,
            commission=commission,
            bonus=bonus,
            created=created,
            price=price,
            is_sellable=is_sellable,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product


def update_product(product_id: str, **fields) -> Optional[Product]:
    """Update the given columns of a product. Returns None if not found."""
    with SessionLocal() as session:
        product = session.get(Product, product_id)
        if not product:
            return None
        for key, value in fields.items():
            if key != "id" and hasattr(Product, key):
                setattr(product, key, value)
        session.commit()
        session.refresh(product)
        return product


def delete_product(product_id: str) -> bool:
    """Delete a product and its role assignments. Returns True if deleted."""
    with SessionLocal() as session:
        product = session.get(Product, product_id)
        if not product:
            return False
        session.execute(delete(RoleProduct).where(RoleProduct.product_id == product_id))
        session.delete(product)
        session.commit()
        return True


def get_products_with_role_assignments() -> List[Dict[str, object]]:
    """
    Return every product with a `selected` flag set when at least one role
    is assigned to it, plus the assigned role ids.
    """
    with SessionLocal() as session:
        products = list(session.scalars(select(Product).order_by(Product.name)).all())
        role_map: Dict[str, List[int]] = {}
        for rp in session.scalars(select(RoleProduct)).all():
            role_map.setdefault(rp.product_id, []).append(rp.role_id)

    return [
        {"product": p, "selected": bool(role_map.get(p.id)), "role_ids": sorted(role_map.get(p.id, []))}
        for p in products
    ]


# ---------------------------------------------------------------------
# Role ↔ Product assignments
# ---------------------------------------------------------------------
def get_products_for_role(role_id: int) -> List[Product]:
    with SessionLocal() as session:
        stmt = (
            select(Product)
            .join(RoleProduct, RoleProduct.product_id == Product.id)
            .where(RoleProduct.role_id == role_id)
            .order_by(Product.name)
        )
        return list(session.scalars(stmt).all())


def update_product_role_assignments(role_id: int, product_ids: Iterable[str]) -> List[Product]:
    """
    Make `product_ids` the exact product set of a role.

    Raises RoleNotFoundError / ProductNotFoundError before touching
    anything. Returns the role's products after the update.
    """
    wanted = list(dict.fromkeys(product_ids))
    with SessionLocal() as session:
        if session.get(Role, role_id) is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        for product_id in wanted:
            if session.get(Product, product_id) is None:
                raise ProductNotFoundError(product_id)

        current = set(
            session.scalars(select(RoleProduct.product_id).where(RoleProduct.role_id == role_id)).all()
        )
        to_add = [pid for pid in wanted if pid not in current]
        to_remove = [pid for pid in current if pid not in wanted]

        for product_id in to_add:
            session.add(RoleProduct(role_id=role_id, product_id=product_id))
        if to_remove:
            session.execute(
                delete(RoleProduct).where(RoleProduct.role_id == role_id, RoleProduct.product_id.in_(to_remove))
            )
        session.commit()
        logger.info(f"[DB] Role {role_id} products: +{len(to_add)} / -{len(to_remove)}")

    return get_products_for_role(role_id)

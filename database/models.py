# database/models.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, String, Text, UniqueConstraint

# Important: must match Base from db_setup.py
from .db_setup import Base


class Role(Base):
    """Sales team role."""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    permissions = Column(JSON, nullable=False, default=list)
    is_default = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Role(id={self.id}, title={self.title}, is_default={self.is_default})>"


class Product(Base):
    """Sellable product with its commission percentage and flat bonus."""
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=False)
    created = Column(String(32), nullable=False, default="—")
    commission = Column(String(16), nullable=False, default="0%")
    bonus = Column(String(16), nullable=False, default="0€")
    price = Column(String(32), nullable=True)
    is_sellable = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, commission={self.commission}, bonus={self.bonus})>"


class RoleProduct(Base):
    """Join record: a role may sell and earn incentives on a product."""
    __tablename__ = "role_products"
    __table_args__ = (UniqueConstraint("role_id", "product_id", name="uq_role_product"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(64), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    def __repr__(self):
        return f"<RoleProduct(role_id={self.role_id}, product_id={self.product_id})>"

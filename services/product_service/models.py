from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from shared.config.database import Base
from shared.persistence import new_id
from services.catalog_service.models import Brand, Category, SubCategory # noqa: F401 (relationship targets)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("final_price >= 0", name="ck_products_final_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    sub_category_id = Column(String(36), ForeignKey("sub_categories.id"), nullable=False, index=True)
    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=False, index=True)
    size = Column(String(20), nullable=True, index=True)
    color = Column(String(40), nullable=True)
    quantity = Column(Integer, nullable=False, default=0) # stock on hand
    base_price = Column(Float, nullable=True)
    discount_price = Column(Float, nullable=True)
    final_price = Column(Float, nullable=False)
    images = Column(JSON, nullable=False, default=list) # ordered list of public URLs
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    category = relationship("Category", lazy="selectin")
    sub_category = relationship("SubCategory", lazy="selectin")
    brand = relationship("Brand", lazy="selectin")

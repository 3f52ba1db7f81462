from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from shared.config.database import Base
from shared.persistence import new_id


class Address(Base):
    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    mobile = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)
    pincode = Column(String(12), nullable=False)
    landmark = Column(String(255), nullable=True)
    district = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

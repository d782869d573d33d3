from sqlalchemy import Column, Date, Integer, String

from medstock.core.db import Base
from medstock.models.base.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    # Running on-hand quantity; only the movement engine changes it after creation
    quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(50), nullable=False)
    batch = Column(String(100), nullable=True)
    expiration_date = Column(Date, nullable=True, index=True)
    supplier = Column(String(255), nullable=True)

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self):
        return f"<Product id={self.id} name={self.name} qty={self.quantity}>"

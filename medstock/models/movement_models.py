from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func

from medstock.core.db import Base


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    type = Column(String(3), nullable=False)
    quantity = Column(Integer, nullable=False)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movement_quantity_positive"),
        CheckConstraint("type IN ('IN', 'OUT')", name="ck_movement_type"),
        Index("ix_movement_product_date", "product_id", "date"),
    )

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self):
        return f"<Movement id={self.id} product_id={self.product_id} type={self.type} qty={self.quantity}>"

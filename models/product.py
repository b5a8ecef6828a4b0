from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from db.base import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False)  # whole sums, compared against the webhook amount
    created_at = Column(DateTime(timezone=True), server_default=func.now())

from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, DateTime, DECIMAL
from sqlalchemy.sql import func
from db.base import Base
from core.enums import TransactionState, CLICK_PROVIDER

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    click_trans_id = Column(String(64), nullable=False, index=True)
    merchant_trans_id = Column(String(64), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    state = Column(Integer, nullable=False, default=int(TransactionState.Pending), index=True)
    amount = Column(DECIMAL(12, 2), nullable=False)
    # Epoch milliseconds; prepare_id doubles as the token echoed back on complete
    create_time = Column(BigInteger, nullable=False)
    prepare_id = Column(BigInteger, nullable=False, index=True)
    perform_time = Column(BigInteger, nullable=True)
    cancel_time = Column(BigInteger, nullable=True)
    provider = Column(String(32), nullable=False, default=CLICK_PROVIDER, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

"""SQLAlchemy ORM models for the hosted MaxControl schema"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class AccountsPayable(Base):
    """Bill or single installment of a parceled debt"""

    __tablename__ = "accounts_payable"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=False, default="")
    series_id = Column(String(64), nullable=True, index=True)
    total_installments_in_series = Column(Integer, nullable=True)
    installment_number_of_series = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Quote(Base):
    """Priced quote with totals frozen at save time"""

    __tablename__ = "quotes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    quote_number = Column(Text, nullable=False, unique=True)
    client_name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="draft")
    discount_type = Column(Text, nullable=False, default="none")
    discount_value = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False)
    discount_amount_calculated = Column(Float, nullable=False)
    subtotal_after_discount = Column(Float, nullable=False)
    total_cash = Column(Float, nullable=False)
    total_card = Column(Float, nullable=False)
    down_payment_applied = Column(Float, nullable=False, default=0.0)
    selected_payment_method = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    items = relationship("QuoteItem", back_populates="quote", cascade="all, delete-orphan")


class QuoteItem(Base):
    """Line item of a quote"""

    __tablename__ = "quote_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    quote_id = Column(Uuid, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Text, nullable=True)
    product_name = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    pricing_model = Column(Text, nullable=False)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    item_count_for_area_calc = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    quote = relationship("Quote", back_populates="items")

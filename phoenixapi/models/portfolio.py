import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from phoenixapi.models.base import BaseModel, IdType


class TradeTypeEnum(str, enum.Enum):
    STOCK = "stock"
    OPTION = "option"


class OptionTypeEnum(str, enum.Enum):
    CALL = "call"
    PUT = "put"


class Trade(BaseModel):
    """Position recorded by an admin on behalf of a user."""

    __tablename__ = "user_trades"
    __table_args__ = (
        Index("idx_user_trades_user_id", "user_id"),
        Index("idx_user_trades_symbol", "symbol"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    trade_type: Mapped[TradeTypeEnum] = mapped_column(Enum(TradeTypeEnum), nullable=False)
    symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(16, 4), nullable=False)
    cost_basis: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    current_price: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    option_expiration: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    option_type: Mapped[Optional[OptionTypeEnum]] = mapped_column(
        Enum(OptionTypeEnum), nullable=True
    )
    strike_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 4), nullable=True)
    break_even_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 4), nullable=True)
    added_by: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)


class PortfolioGoal(BaseModel):
    __tablename__ = "portfolio_goals"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), unique=True, nullable=False
    )
    starting_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    target_date: Mapped[date] = mapped_column(Date, nullable=False)


class PlaidItem(BaseModel):
    """A brokerage connection created by exchanging a Plaid public token."""

    __tablename__ = "plaid_items"
    __table_args__ = (Index("idx_plaid_items_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    item_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    institution_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    institution_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_sync: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Holding(BaseModel):
    __tablename__ = "portfolio_holdings"
    __table_args__ = (Index("idx_portfolio_holdings_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    plaid_item_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("plaid_items.id", ondelete="CASCADE"), nullable=False
    )
    security_id: Mapped[str] = mapped_column(String(255), nullable=False)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    cost_basis: Mapped[Decimal] = mapped_column(Numeric(16, 4), nullable=False)
    current_price: Mapped[Decimal] = mapped_column(Numeric(16, 4), nullable=False)
    institution_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(16, 4), nullable=True)

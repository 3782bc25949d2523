"""
Portfolio Schemas

Admin-recorded trades, the per-user growth goal and brokerage holdings.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from phoenixapi.models.portfolio import OptionTypeEnum as OptionType
from phoenixapi.models.portfolio import TradeTypeEnum as TradeType


class TradeBase(BaseModel):
    trade_type: TradeType = TradeType.STOCK
    symbol: str = Field(..., min_length=1, max_length=16)
    company_name: str = Field(..., min_length=1, max_length=255)
    quantity: Decimal = Field(..., gt=0)
    cost_basis: Decimal = Field(..., ge=0)
    current_price: Decimal = Field(..., ge=0)
    option_expiration: Optional[date] = None
    option_type: Optional[OptionType] = None
    strike_price: Optional[Decimal] = Field(None, ge=0)
    break_even_price: Optional[Decimal] = Field(None, ge=0)


class TradeCreate(TradeBase):
    user_id: int

    @model_validator(mode="after")
    def option_fields_required(self) -> "TradeCreate":
        self.symbol = self.symbol.strip().upper()
        if self.trade_type == TradeType.OPTION:
            missing = [
                name
                for name in ("option_expiration", "option_type", "strike_price", "break_even_price")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"Option trades require: {', '.join(missing)}")
        return self


class TradeUpdate(BaseModel):
    quantity: Optional[Decimal] = Field(None, gt=0)
    cost_basis: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, ge=0)
    strike_price: Optional[Decimal] = Field(None, ge=0)
    break_even_price: Optional[Decimal] = Field(None, ge=0)
    option_expiration: Optional[date] = None


class TradeSchema(TradeBase):
    id: int
    user_id: int
    added_by: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PortfolioSummary(BaseModel):
    user_id: int
    total_value: float
    total_cost: float
    total_gain: float
    total_gain_pct: float
    position_count: int


class GoalSchema(BaseModel):
    id: int
    user_id: int
    starting_amount: Decimal
    target_amount: Decimal
    target_date: date

    class Config:
        from_attributes = True


class GoalProgress(BaseModel):
    goal: GoalSchema
    current_value: float
    progress_pct: float


class PlaidItemSchema(BaseModel):
    id: int
    user_id: int
    item_id: str
    institution_id: Optional[str] = None
    institution_name: Optional[str] = None
    last_sync: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlaidItemCredentials(PlaidItemSchema):
    """Includes the access token; stays inside the service layer."""

    access_token: str


class HoldingSchema(BaseModel):
    id: int
    user_id: int
    plaid_item_id: int
    security_id: str
    symbol: str
    name: str
    quantity: Decimal
    cost_basis: Decimal
    current_price: Decimal
    institution_value: Optional[Decimal] = None

    class Config:
        from_attributes = True


class LinkTokenResponse(BaseModel):
    link_token: str
    expiration: Optional[str] = None


class PublicTokenExchange(BaseModel):
    public_token: str = Field(..., min_length=1)


class HoldingsSyncResult(BaseModel):
    holdings: List[HoldingSchema]
    synced_items: int
    failed_items: List[str] = Field(default_factory=list)

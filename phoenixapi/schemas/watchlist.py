"""
Watchlist Schemas

Published entries, user submissions and the admin review payloads.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from phoenixapi.models.watchlist import SubmissionStatusEnum as SubmissionStatus
from phoenixapi.models.watchlist import TermEnum as Term

SECTORS = [
    "Technology",
    "Healthcare",
    "Finance",
    "Energy",
    "Consumer Discretionary",
    "Consumer Staples",
    "Industrials",
    "Materials",
    "Real Estate",
    "Utilities",
    "Communication Services",
]


class EntryDraft(BaseModel):
    """Fields a user proposes (or an admin adds) for a watchlist stock."""

    symbol: str = Field(..., max_length=16, description="Stock ticker symbol")
    company_name: str = Field(..., max_length=255)
    sector: str = Field("Technology", description="One of SECTORS")
    term: Term = Term.LONG
    notes: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("company_name")
    @classmethod
    def strip_company_name(cls, v: str) -> str:
        return v.strip()


class AdminEntryCreate(EntryDraft):
    current_price: Optional[Decimal] = Field(None, ge=0)
    target_price: Optional[Decimal] = Field(None, ge=0)


class EntryUpdate(BaseModel):
    """Admin edit of notes and prices; omitted fields are left unchanged."""

    notes: Optional[str] = None
    current_price: Optional[Decimal] = Field(None, ge=0)
    target_price: Optional[Decimal] = Field(None, ge=0)


class WatchlistEntrySchema(BaseModel):
    id: int
    symbol: str
    company_name: str
    sector: str
    term: Term
    notes: Optional[str] = None
    current_price: Optional[Decimal] = None
    target_price: Optional[Decimal] = None
    added_by: int
    added_at: datetime
    submission_id: Optional[int] = None

    class Config:
        from_attributes = True


class SubmissionSchema(BaseModel):
    id: int
    symbol: str
    company_name: str
    sector: str
    term: Term
    notes: Optional[str] = None
    status: SubmissionStatus
    submitted_by: int
    submitted_at: datetime
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None

    class Config:
        from_attributes = True


class ReviewRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class ReviewResult(BaseModel):
    submission: SubmissionSchema
    entry: Optional[WatchlistEntrySchema] = None


class SectorGroup(BaseModel):
    long: List[WatchlistEntrySchema] = Field(default_factory=list)
    short: List[WatchlistEntrySchema] = Field(default_factory=list)


class GroupedWatchlist(BaseModel):
    sectors: Dict[str, SectorGroup]
    total_count: int

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from phoenixapi.models.base import BaseModel, IdType


class TermEnum(str, enum.Enum):
    LONG = "long"
    SHORT = "short"


class SubmissionStatusEnum(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class WatchlistSubmission(BaseModel):
    """User-proposed watchlist candidate awaiting an admin decision."""

    __tablename__ = "watchlist_submissions"
    __table_args__ = (
        Index("idx_watchlist_submissions_status", "status"),
        Index("idx_watchlist_submissions_submitted_by", "submitted_by"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str] = mapped_column(String(64), nullable=False)
    term: Mapped[TermEnum] = mapped_column(Enum(TermEnum), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[SubmissionStatusEnum] = mapped_column(
        Enum(SubmissionStatusEnum),
        default=SubmissionStatusEnum.PENDING,
        nullable=False,
    )
    submitted_by: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    reviewed_by: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class WatchlistEntry(BaseModel):
    """Published watchlist item.

    ``submission_id`` is set (and unique) when the entry came from an approved
    submission, and null for a direct admin add.
    """

    __tablename__ = "watchlist_entries"
    __table_args__ = (Index("idx_watchlist_entries_sector_symbol", "sector", "symbol"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str] = mapped_column(String(64), nullable=False)
    term: Mapped[TermEnum] = mapped_column(Enum(TermEnum), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    current_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    target_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    added_by: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    submission_id: Mapped[Optional[int]] = mapped_column(
        IdType,
        ForeignKey("watchlist_submissions.id"),
        unique=True,
        nullable=True,
    )

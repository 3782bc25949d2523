from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Article(BaseModel):
    title: str
    url: str
    source: str = "Google News"
    published_at: datetime
    symbol: Optional[str] = None


class NewsFeed(BaseModel):
    articles: List[Article]
    count: int
    failed_symbols: List[str] = Field(default_factory=list)


class PriceQuote(BaseModel):
    symbol: str
    price: Optional[float] = None


class PriceUpdateResult(BaseModel):
    """Outcome of a batch refresh; ``failed`` never aborts the batch."""

    updated: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    timestamp: datetime

    @property
    def total(self) -> int:
        return len(self.updated) + len(self.failed)


class CalendarLink(BaseModel):
    name: str
    url: str


class CalendarResource(BaseModel):
    title: str
    description: str
    links: List[CalendarLink]


class EarningsDate(BaseModel):
    symbol: str
    earnings_date: Optional[date] = None


class WatchlistEarnings(BaseModel):
    earnings: List[EarningsDate]
    failed: List[str] = Field(default_factory=list)

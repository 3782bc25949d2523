from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from phoenixapi.models.community import SentimentEnum as Sentiment


class PostCreate(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=16)
    company_name: Optional[str] = Field(None, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()


class PostSchema(BaseModel):
    id: int
    author_id: int
    symbol: str
    company_name: Optional[str] = None
    title: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentSchema(BaseModel):
    id: int
    post_id: int
    author_id: int
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class LikeSchema(BaseModel):
    id: int
    post_id: int
    user_id: int

    class Config:
        from_attributes = True


class VoteRequest(BaseModel):
    short_term: Sentiment
    long_term: Sentiment


class VoteSchema(BaseModel):
    id: int
    post_id: int
    user_id: int
    short_term_sentiment: Sentiment
    long_term_sentiment: Sentiment

    class Config:
        from_attributes = True


class SentimentBreakdown(BaseModel):
    bullish: int = 0
    bearish: int = 0
    neutral: int = 0
    total: int = 0
    bullish_pct: float = 0.0
    bearish_pct: float = 0.0
    neutral_pct: float = 0.0


class VoteCounts(BaseModel):
    post_id: int
    short_term: SentimentBreakdown
    long_term: SentimentBreakdown


class PostDetail(BaseModel):
    post: PostSchema
    like_count: int
    comment_count: int
    liked_by_me: bool = False
    my_vote: Optional[VoteSchema] = None
    votes: VoteCounts


class PostListResponse(BaseModel):
    posts: List[PostSchema]
    total_count: int


class CommunitySymbol(BaseModel):
    symbol: str
    post_count: int

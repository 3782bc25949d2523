import enum
from typing import Optional

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from phoenixapi.models.base import BaseModel, IdType


class SentimentEnum(str, enum.Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Post(BaseModel):
    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_symbol", "symbol"),
        Index("idx_posts_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )
    symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class Comment(BaseModel):
    __tablename__ = "post_comments"
    __table_args__ = (Index("idx_post_comments_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)


class Like(BaseModel):
    __tablename__ = "post_likes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )


class Vote(BaseModel):
    """One sentiment vote per (post, user), updated in place."""

    __tablename__ = "post_votes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_votes_post_user"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )
    short_term_sentiment: Mapped[SentimentEnum] = mapped_column(
        Enum(SentimentEnum), nullable=False
    )
    long_term_sentiment: Mapped[SentimentEnum] = mapped_column(
        Enum(SentimentEnum), nullable=False
    )

"""
Community Service

Posts, comments, likes and dual-horizon sentiment votes.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from phoenixapi.repositories.post_repository import (
    CommentRepository,
    LikeRepository,
    PostRepository,
)
from phoenixapi.repositories.vote_repository import VoteRepository
from phoenixapi.schemas.community import (
    CommentCreate,
    CommentSchema,
    CommunitySymbol,
    LikeSchema,
    PostCreate,
    PostDetail,
    PostListResponse,
    PostSchema,
    Sentiment,
    SentimentBreakdown,
    VoteCounts,
    VoteSchema,
)
from phoenixapi.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)


def percentage(count: int, total: int) -> float:
    """count/total*100 rounded to 2 places; 0 when total is 0"""
    if total <= 0:
        return 0.0
    return round(count / total * 100, 2)


def breakdown(counts: Dict[str, int]) -> SentimentBreakdown:
    bullish = counts.get(Sentiment.BULLISH.value, 0)
    bearish = counts.get(Sentiment.BEARISH.value, 0)
    neutral = counts.get(Sentiment.NEUTRAL.value, 0)
    total = bullish + bearish + neutral
    return SentimentBreakdown(
        bullish=bullish,
        bearish=bearish,
        neutral=neutral,
        total=total,
        bullish_pct=percentage(bullish, total),
        bearish_pct=percentage(bearish, total),
        neutral_pct=percentage(neutral, total),
    )


class CommunityService:
    def __init__(self, db: Session):
        self.db = db
        self.post_repo = PostRepository(db)
        self.comment_repo = CommentRepository(db)
        self.like_repo = LikeRepository(db)
        self.vote_repo = VoteRepository(db)

    # Posts

    def create_post(self, author_id: int, data: PostCreate) -> PostSchema:
        if not data.symbol:
            raise ValidationError("Symbol is required", {"field": "symbol"})
        if not data.title.strip() or not data.content.strip():
            raise ValidationError("Title and content are required")
        post = self.post_repo.create(
            author_id=author_id,
            symbol=data.symbol,
            company_name=data.company_name,
            title=data.title.strip(),
            content=data.content.strip(),
        )
        logger.info(f"User {author_id} posted about {data.symbol} (post {post.id})")
        return post

    def get_post(self, post_id: int) -> PostSchema:
        post = self.post_repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError(f"Post not found: {post_id}", {"post_id": post_id})
        return post

    def get_post_detail(self, post_id: int, viewer_id: Optional[int] = None) -> PostDetail:
        post = self.get_post(post_id)
        return PostDetail(
            post=post,
            like_count=self.like_repo.count({"post_id": post_id}),
            comment_count=self.comment_repo.count({"post_id": post_id}),
            liked_by_me=(
                viewer_id is not None
                and self.like_repo.get_like(post_id, viewer_id) is not None
            ),
            my_vote=self.vote_repo.get_vote(post_id, viewer_id) if viewer_id else None,
            votes=self.count_votes(post_id),
        )

    def list_posts(
        self, symbol: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> PostListResponse:
        posts, total = self.post_repo.list_posts(symbol=symbol, limit=limit, offset=offset)
        return PostListResponse(posts=posts, total_count=total)

    def delete_post(self, post_id: int, user: UserSchema) -> None:
        post = self.get_post(post_id)
        if post.author_id != user.id and not user.is_admin:
            raise PermissionDeniedError("Only the author or an admin can delete this post")
        self.post_repo.delete_with_children(post_id)
        logger.info(f"User {user.id} deleted post {post_id}")

    def community_symbols(self, limit: Optional[int] = None) -> List[CommunitySymbol]:
        return [
            CommunitySymbol(symbol=symbol, post_count=count)
            for symbol, count in self.post_repo.symbol_counts(limit=limit)
        ]

    # Comments

    def add_comment(self, post_id: int, author_id: int, data: CommentCreate) -> CommentSchema:
        self.get_post(post_id)
        content = data.content.strip()
        if not content:
            raise ValidationError("Comment cannot be empty", {"field": "content"})
        return self.comment_repo.create(post_id=post_id, author_id=author_id, content=content)

    def list_comments(self, post_id: int) -> List[CommentSchema]:
        self.get_post(post_id)
        return self.comment_repo.list_for_post(post_id)

    def delete_comment(self, comment_id: int, user: UserSchema) -> None:
        comment = self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError(f"Comment not found: {comment_id}", {"comment_id": comment_id})
        if comment.author_id != user.id and not user.is_admin:
            raise PermissionDeniedError("Only the author or an admin can delete this comment")
        self.comment_repo.delete(comment_id)

    # Likes

    def like(self, post_id: int, user_id: int) -> LikeSchema:
        self.get_post(post_id)
        if self.like_repo.get_like(post_id, user_id):
            raise ConflictError("Post already liked", {"post_id": post_id})
        try:
            return self.like_repo.create(post_id=post_id, user_id=user_id)
        except IntegrityError:
            raise ConflictError("Post already liked", {"post_id": post_id})

    def unlike(self, post_id: int, user_id: int) -> None:
        like = self.like_repo.get_like(post_id, user_id)
        if like is None:
            raise NotFoundError("Like not found", {"post_id": post_id})
        self.like_repo.delete(like.id)

    def like_count(self, post_id: int) -> int:
        return self.like_repo.count({"post_id": post_id})

    # Votes

    def vote(
        self, post_id: int, user_id: int, short_term: Sentiment, long_term: Sentiment
    ) -> VoteSchema:
        """Upsert: one vote row per (post, user), last write wins"""
        self.get_post(post_id)
        return self.vote_repo.upsert(post_id, user_id, short_term, long_term)

    def count_votes(self, post_id: int) -> VoteCounts:
        tally = self.vote_repo.tally(post_id)
        return VoteCounts(
            post_id=post_id,
            short_term=breakdown(tally["short_term"]),
            long_term=breakdown(tally["long_term"]),
        )

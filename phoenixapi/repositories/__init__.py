# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .follow_repository import FollowRepository
from .watchlist_repository import SubmissionRepository, WatchlistEntryRepository
from .post_repository import CommentRepository, LikeRepository, PostRepository
from .vote_repository import VoteRepository
from .message_repository import MessageRepository
from .portfolio_repository import (
    GoalRepository,
    HoldingRepository,
    PlaidItemRepository,
    TradeRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "FollowRepository",
    "SubmissionRepository",
    "WatchlistEntryRepository",
    "CommentRepository",
    "LikeRepository",
    "PostRepository",
    "VoteRepository",
    "MessageRepository",
    "GoalRepository",
    "HoldingRepository",
    "PlaidItemRepository",
    "TradeRepository",
]

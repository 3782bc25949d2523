from phoenixapi.models.base import Base
from phoenixapi.models.user import User
from phoenixapi.models.watchlist import WatchlistEntry, WatchlistSubmission
from phoenixapi.models.community import Comment, Like, Post, Vote
from phoenixapi.models.social import Follow, Message
from phoenixapi.models.portfolio import Holding, PlaidItem, PortfolioGoal, Trade

__all__ = [
    "Base",
    "User",
    "WatchlistEntry",
    "WatchlistSubmission",
    "Post",
    "Comment",
    "Like",
    "Vote",
    "Follow",
    "Message",
    "Trade",
    "PortfolioGoal",
    "PlaidItem",
    "Holding",
]

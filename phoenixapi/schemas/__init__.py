from .auth import BaseResponse, Error, LoginRequest, SessionToken, SignupRequest
from .user import User, UserProfile
from .watchlist import SECTORS, SubmissionSchema, WatchlistEntrySchema
from .community import PostSchema, VoteCounts
from .messaging import MessageSchema
from .market import Article, PriceUpdateResult
from .portfolio import TradeSchema

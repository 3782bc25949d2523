from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.containers import Container
from phoenixapi.database.session import get_db
from phoenixapi.providers.brokerage.plaid import PlaidClient
from phoenixapi.providers.news.google_news import GoogleNewsClient
from phoenixapi.providers.prices.yahoo_finance import YahooFinanceClient

# Services
from phoenixapi.services.approval_service import ApprovalService
from phoenixapi.services.auth_service import AuthService
from phoenixapi.services.calendar_service import CalendarService
from phoenixapi.services.community_service import CommunityService
from phoenixapi.services.messaging_service import MessagingService
from phoenixapi.services.news_service import NewsService
from phoenixapi.services.plaid_service import PlaidService
from phoenixapi.services.portfolio_service import PortfolioService
from phoenixapi.services.price_service import PriceService
from phoenixapi.services.user_service import UserService
from phoenixapi.services.watchlist_service import WatchlistService


@inject
def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> AuthService:
    return AuthService(db=db, settings=settings)


@inject
def get_user_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> UserService:
    return UserService(db=db, settings=settings)


def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db=db)


def get_approval_service(db: Session = Depends(get_db)) -> ApprovalService:
    return ApprovalService(db=db)


def get_community_service(db: Session = Depends(get_db)) -> CommunityService:
    return CommunityService(db=db)


def get_messaging_service(db: Session = Depends(get_db)) -> MessagingService:
    return MessagingService(db=db)


@inject
def get_portfolio_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
) -> PortfolioService:
    return PortfolioService(db=db, settings=settings)


@inject
def get_news_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
    news_client: GoogleNewsClient = Depends(Provide[Container.clients.news_client]),
) -> NewsService:
    return NewsService(db=db, settings=settings, news_client=news_client)


@inject
def get_price_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(Provide[Container.config.config]),
    price_client: YahooFinanceClient = Depends(Provide[Container.clients.price_client]),
) -> PriceService:
    return PriceService(db=db, settings=settings, price_client=price_client)


@inject
def get_calendar_service(
    db: Session = Depends(get_db),
    price_client: YahooFinanceClient = Depends(Provide[Container.clients.price_client]),
) -> CalendarService:
    return CalendarService(db=db, price_client=price_client)


@inject
def get_plaid_service(
    db: Session = Depends(get_db),
    plaid_client: PlaidClient = Depends(Provide[Container.clients.plaid_client]),
) -> PlaidService:
    return PlaidService(db=db, plaid_client=plaid_client)

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import UpstreamError
from phoenixapi.providers.news.google_news import GoogleNewsClient
from phoenixapi.repositories.post_repository import PostRepository
from phoenixapi.schemas.market import Article, NewsFeed

logger = logging.getLogger(__name__)


def merge_articles(articles: List[Article], limit: int) -> List[Article]:
    """Drop repeated URLs (first occurrence wins), newest first, at most ``limit``"""
    unique: Dict[str, Article] = {}
    for article in articles:
        unique.setdefault(article.url, article)
    ordered = sorted(unique.values(), key=lambda a: a.published_at, reverse=True)
    return ordered[:limit]


class NewsService:
    """Market headlines plus news for the most discussed community symbols"""

    def __init__(self, db: Session, settings: Settings, news_client: GoogleNewsClient):
        self.db = db
        self.settings = settings
        self.news_client = news_client
        self.post_repo = PostRepository(db)

    async def fetch_headlines(self) -> NewsFeed:
        # General feed failure is fatal; per-symbol failures are not
        general = await self.news_client.general_headlines()
        articles = list(general[: self.settings.NEWS_GENERAL_LIMIT])

        failed: List[str] = []
        symbols = [
            symbol
            for symbol, _ in self.post_repo.symbol_counts(limit=self.settings.NEWS_MAX_SYMBOLS)
        ]
        for symbol in symbols:
            try:
                symbol_articles = await self.news_client.symbol_headlines(symbol)
            except UpstreamError as e:
                logger.warning(f"Skipping news for {symbol}: {e.message}")
                failed.append(symbol)
                continue
            articles.extend(symbol_articles[: self.settings.NEWS_SYMBOL_LIMIT])

        merged = merge_articles(articles, self.settings.NEWS_MAX_ARTICLES)
        return NewsFeed(articles=merged, count=len(merged), failed_symbols=failed)

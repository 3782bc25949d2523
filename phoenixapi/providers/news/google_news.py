import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional
from urllib.parse import quote_plus

import httpx

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import UpstreamError
from phoenixapi.schemas.market import Article

logger = logging.getLogger(__name__)


def _parse_pub_date(raw: Optional[str]) -> datetime:
    if raw:
        try:
            parsed = parsedate_to_datetime(raw.strip())
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        except (TypeError, ValueError):
            logger.debug(f"Unparseable pubDate {raw!r}; using now")
    return datetime.now(timezone.utc)


def parse_rss(xml_text: str, symbol: Optional[str] = None) -> List[Article]:
    """Articles from an RSS 2.0 document; items without title or link are skipped"""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise UpstreamError("News feed returned malformed XML", {"reason": str(e)})

    articles = []
    for item in root.iter("item"):
        title = (item.findtext("title") or "").strip()
        link = (item.findtext("link") or "").strip()
        if not title or not link:
            continue
        source = (item.findtext("source") or "").strip() or "Google News"
        articles.append(
            Article(
                title=title,
                url=link,
                source=source,
                published_at=_parse_pub_date(item.findtext("pubDate")),
                symbol=symbol,
            )
        )
    return articles


class GoogleNewsClient:
    """Google News RSS search feeds"""

    def __init__(self, settings: Settings):
        self.general_url = settings.NEWS_GENERAL_RSS_URL
        self.symbol_url = settings.NEWS_SYMBOL_RSS_URL
        self.timeout = settings.NEWS_TIMEOUT_SECONDS

    def symbol_feed_url(self, symbol: str) -> str:
        return self.symbol_url.format(query=quote_plus(f"{symbol} stock"))

    async def _fetch(self, url: str, symbol: Optional[str] = None) -> List[Article]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            logger.error(f"News feed timeout: {url}")
            raise UpstreamError("News feed timeout", {"url": url})
        except httpx.HTTPError as e:
            logger.error(f"News feed request failed: {url}: {e}")
            raise UpstreamError("News feed unavailable", {"url": url})

        if response.status_code != 200:
            logger.error(f"News feed {url} returned {response.status_code}")
            raise UpstreamError(
                "News feed returned an error", {"url": url, "status": response.status_code}
            )
        return parse_rss(response.text, symbol=symbol)

    async def general_headlines(self) -> List[Article]:
        return await self._fetch(self.general_url)

    async def symbol_headlines(self, symbol: str) -> List[Article]:
        return await self._fetch(self.symbol_feed_url(symbol), symbol=symbol)

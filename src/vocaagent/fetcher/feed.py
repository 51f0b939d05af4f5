"""RSS/Atom 订阅源读取与正文抓取."""

import logging
from calendar import timegm
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urljoin

import feedparser
import httpx

from vocaagent.core.ports import FeedEntry, FeedReader
from vocaagent.errors import NetworkError, ParseError
from vocaagent.fetcher.extractor import BodyExtractor
from vocaagent.utils.time import utcnow

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class FeedFetcher(FeedReader):
    """使用 httpx 下载、feedparser 解析（支持 RSS / Atom / JSON Feed）."""

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        body_extractor: BodyExtractor | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        self._body_extractor = body_extractor or BodyExtractor()

    async def close(self) -> None:
        """关闭客户端."""
        await self._client.aclose()
        self._body_extractor.close()

    async def fetch_feed(self, url: str) -> list[FeedEntry]:
        """读取订阅源，丢弃没有链接的条目."""
        content = await self._get(url)

        parsed = feedparser.parse(content)
        if parsed.bozo and not parsed.entries:
            msg = f"无法解析订阅源 {url}: {parsed.get('bozo_exception')}"
            raise ParseError(msg)

        entries: list[FeedEntry] = []
        for raw in parsed.entries:
            entry = _parse_entry(raw, url)
            if entry is None:
                logger.debug(f"跳过无链接条目: {raw.get('title')}")
                continue
            entries.append(entry)

        return entries

    async def fetch_body(self, url: str) -> str:
        """抓取网页并提取正文纯文本."""
        response = await self._request(url)
        # 响应头声明了编码时按声明解码，否则交给提取器从 HTML 中识别
        html: str | bytes = (
            response.text if response.charset_encoding else response.content
        )
        return await self._body_extractor.extract_text(html)

    async def _get(self, url: str) -> bytes:
        response = await self._request(url)
        return response.content

    async def _request(self, url: str) -> httpx.Response:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            msg = f"请求失败 {url}: {e}"
            raise NetworkError(msg) from e
        return response


def _parse_entry(raw: Any, feed_url: str) -> FeedEntry | None:
    """feedparser 条目 → FeedEntry."""
    link = raw.get("link")
    if not link:
        return None

    title = (raw.get("title") or "").strip() or "Untitled"

    return FeedEntry(
        url=urljoin(feed_url, link),
        title=title,
        published_at=_parse_published(raw),
    )


def _parse_published(raw: Any) -> datetime:
    """优先 published，其次 updated，都没有时取当前时间."""
    parsed = raw.get("published_parsed") or raw.get("updated_parsed")
    if not parsed:
        return utcnow()
    # feedparser 的时间元组为 UTC
    return datetime.fromtimestamp(timegm(parsed), UTC).replace(tzinfo=None)

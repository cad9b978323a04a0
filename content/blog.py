"""블로그 콘텐츠 모듈 — RSS/Atom 피드에서 최신 글을 가져온다."""

import asyncio
import html
import logging
import re
import xml.etree.ElementTree as ET

from .models import Article, ContentError

logger = logging.getLogger(__name__)

_ATOM = "{http://www.w3.org/2005/Atom}"
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def _clean(value: str | None) -> str:
    """HTML 태그 제거, 엔티티 해제, 공백 정리."""
    if not value:
        return ""
    text = html.unescape(_TAG_RE.sub(" ", value))
    return _SPACE_RE.sub(" ", text).strip()


def parse_feed(text: str) -> Article:
    """피드 문서에서 첫 번째 글의 제목과 요약을 추출한다."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ContentError(f"피드 XML 파싱 실패: {e}") from e

    if root.tag == "rss":
        entry = root.find("channel/item")
        if entry is None:
            raise ContentError("RSS 피드에 item 없음")
        title = entry.findtext("title")
        summary = entry.findtext("description")
    elif root.tag == f"{_ATOM}feed":
        entry = root.find(f"{_ATOM}entry")
        if entry is None:
            raise ContentError("Atom 피드에 entry 없음")
        title = entry.findtext(f"{_ATOM}title")
        summary = entry.findtext(f"{_ATOM}summary") or entry.findtext(f"{_ATOM}content")
    else:
        raise ContentError(f"알 수 없는 피드 형식: <{root.tag}>")

    article = Article(title=_clean(title), summary=_clean(summary))
    if not article.title:
        raise ContentError("최신 글에 제목 없음")
    return article


class BlogProvider:
    """피드 URL이 있으면 피드에서, 없으면 설정의 고정 글을 반환한다."""

    def __init__(self, feed_url: str = "", title: str = "", summary: str = "",
                 timeout_sec: float = 10):
        self._feed_url = feed_url
        self._static = Article(title=title, summary=summary)
        self._timeout_sec = timeout_sec

    async def get_latest_article(self) -> Article:
        if not self._feed_url:
            logger.info("피드 URL 없음, 설정의 글 사용: %s", self._static.title)
            return self._static

        import aiohttp

        timeout = aiohttp.ClientTimeout(total=self._timeout_sec)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self._feed_url) as resp:
                    resp.raise_for_status()
                    text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ContentError(f"피드 요청 실패: {self._feed_url} ({e})") from e

        article = parse_feed(text)
        logger.info("최신 글: %s", article.title)
        return article


def create_blog_provider(config: dict) -> BlogProvider:
    article = config.get("article", {})
    return BlogProvider(
        feed_url=article.get("feed_url", ""),
        title=article.get("title", ""),
        summary=article.get("summary", ""),
        timeout_sec=config.get("network", {}).get("timeout_sec", 10),
    )

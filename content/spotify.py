"""스포티파이 콘텐츠 모듈 — 최근 재생한 트랙을 가져온다."""

import asyncio
import base64
import logging
import re

from .models import ContentError, ContentItem

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
RECENTLY_PLAYED_URL = "https://api.spotify.com/v1/me/player/recently-played"

# "Song (Remix)", "Song [Live]", "Song - Remastered 2011" 같은 꼬리 제거
_SUFFIX_PATTERNS = [
    re.compile(r"\s*[\(\[][^\(\)\[\]]*[\)\]]\s*$"),
    re.compile(r"\s+-\s+.*$"),
]
_ELLIPSIS = "..."


def shape_title(name: str, max_length: int = 24) -> str:
    """트랙 이름에서 괄호/버전 꼬리를 떼고 max_length 이내로 자른다."""
    shaped = name.strip()
    changed = True
    while changed:
        changed = False
        for pattern in _SUFFIX_PATTERNS:
            stripped = pattern.sub("", shaped)
            if stripped and stripped != shaped:
                shaped = stripped
                changed = True
    if max_length and len(shaped) > max_length:
        shaped = shaped[:max(max_length - len(_ELLIPSIS), 1)].rstrip() + _ELLIPSIS
    return shaped


def track_to_item(item: dict, max_length: int = 24) -> ContentItem:
    """recently-played 응답의 항목 하나를 ContentItem으로 변환한다."""
    try:
        track = item["track"]
        name = track["name"]
        artist = track["artists"][0]["name"]
        cover = track["album"]["images"][0]["url"]
    except (KeyError, IndexError, TypeError) as e:
        raise ContentError(f"예상하지 못한 트랙 데이터: {e!r}") from e
    return ContentItem(
        primary_text=shape_title(name, max_length),
        secondary_text=shape_title(artist, max_length),
        image_ref=cover,
    )


class SpotifyProvider:
    """refresh token으로 액세스 토큰을 받아 최근 재생 트랙을 조회한다."""

    def __init__(self, client_id: str, client_secret: str, refresh_token: str,
                 limit: int = 3, max_length: int = 24, timeout_sec: float = 10):
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._limit = limit
        self._max_length = max_length
        self._timeout_sec = timeout_sec

    async def get_recent_tracks(self) -> list[ContentItem]:
        """최근 재생 트랙을 응답 순서 그대로 반환한다."""
        import aiohttp

        if not (self._client_id and self._client_secret and self._refresh_token):
            raise ContentError("스포티파이 인증 정보 없음 (SPOTIFY_CLIENT_ID/SECRET/REFRESH_TOKEN)")

        timeout = aiohttp.ClientTimeout(total=self._timeout_sec)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                token = await self._request_token(session)
                items = await self._fetch_recent(session, token)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ContentError(f"스포티파이 API 호출 실패: {e}") from e

        tracks = [track_to_item(item, self._max_length) for item in items]
        logger.info("최근 트랙 %d개: %s", len(tracks), ", ".join(t.primary_text for t in tracks))
        return tracks

    async def _request_token(self, session) -> str:
        credentials = f"{self._client_id}:{self._client_secret}".encode()
        headers = {
            "Authorization": f"Basic {base64.b64encode(credentials).decode()}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        data = {"grant_type": "refresh_token", "refresh_token": self._refresh_token}

        async with session.post(TOKEN_URL, data=data, headers=headers) as resp:
            resp.raise_for_status()
            result = await resp.json()

        token = result.get("access_token")
        if not token:
            raise ContentError("토큰 응답에 access_token 없음")
        return token

    async def _fetch_recent(self, session, token: str) -> list[dict]:
        headers = {"Authorization": f"Bearer {token}"}
        params = {"limit": self._limit}

        async with session.get(RECENTLY_PLAYED_URL, params=params, headers=headers) as resp:
            resp.raise_for_status()
            result = await resp.json()

        items = result.get("items")
        if not isinstance(items, list):
            raise ContentError("recently-played 응답에 items 없음")
        return items


def create_spotify_provider(config: dict) -> SpotifyProvider:
    """config["spotify"] / config["tracks"] 섹션으로 provider를 만든다."""
    spotify = config.get("spotify", {})
    tracks = config.get("tracks", {})
    return SpotifyProvider(
        client_id=spotify.get("client_id", ""),
        client_secret=spotify.get("client_secret", ""),
        refresh_token=spotify.get("refresh_token", ""),
        limit=tracks.get("limit", 3),
        max_length=tracks.get("max_length", 24),
        timeout_sec=config.get("network", {}).get("timeout_sec", 10),
    )

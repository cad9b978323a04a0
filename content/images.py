"""이미지 바이트 로더 — 로컬 경로 또는 http(s) URL."""

import asyncio
import logging
from pathlib import Path

from .models import ContentError

logger = logging.getLogger(__name__)


def _is_remote(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


async def load_image_bytes(ref: str, timeout_sec: float = 10) -> bytes:
    """참조가 가리키는 원시 이미지 바이트를 반환한다 (디코딩은 하지 않음)."""
    if not _is_remote(ref):
        try:
            return await asyncio.to_thread(Path(ref).read_bytes)
        except OSError as e:
            raise ContentError(f"이미지 파일을 읽을 수 없음: {ref} ({e})") from e

    import aiohttp

    timeout = aiohttp.ClientTimeout(total=timeout_sec)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(ref) as resp:
                resp.raise_for_status()
                data = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ContentError(f"이미지 다운로드 실패: {ref} ({e})") from e

    logger.debug("이미지 다운로드: %s (%d bytes)", ref, len(data))
    return data

"""메인 — 최근 재생 트랙과 최신 글로 헤더 배너를 만든다."""

import asyncio
import logging
import sys
from pathlib import Path

from config import load_config
from content.blog import create_blog_provider
from content.images import load_image_bytes
from content.models import ContentError, ContentItem
from content.spotify import create_spotify_provider
from renderer.canvas import Canvas
from renderer.errors import DecodeError, RenderError
from renderer.font import load_font
from renderer.layout import BannerFonts, BannerLayout, draw_banner
from renderer.resample import decode_image

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)

logger = logging.getLogger("banner")


async def load_fonts(paths: dict) -> BannerFonts:
    """세 폰트를 워커 스레드에서 동시에 로드한다."""
    regular, medium, small = await asyncio.gather(
        asyncio.to_thread(load_font, paths["regular"]),
        asyncio.to_thread(load_font, paths["medium"]),
        asyncio.to_thread(load_font, paths["small"]),
    )
    return BannerFonts(regular=regular, medium=medium, small=small)


async def load_background(ref: str, timeout_sec: float = 10) -> Canvas:
    try:
        data = await load_image_bytes(ref, timeout_sec)
    except ContentError as e:
        raise DecodeError(f"배경 이미지를 불러올 수 없음: {ref}") from e
    return Canvas.from_bytes(data)


async def load_covers(items: list[ContentItem], timeout_sec: float = 10) -> list:
    """항목 순서대로 커버 이미지를 받아 디코딩한다."""
    blobs = await asyncio.gather(*(load_image_bytes(item.image_ref, timeout_sec) for item in items))
    return [decode_image(data) for data in blobs]


async def render(config: dict, spotify=None, blog=None) -> Canvas:
    """입력을 모두 모은 뒤 배너를 그린 캔버스를 반환한다 (저장은 하지 않음).

    spotify/blog는 get_recent_tracks()/get_latest_article()을 가진 객체로 대체할 수 있다.
    """
    spotify = spotify or create_spotify_provider(config)
    blog = blog or create_blog_provider(config)
    timeout_sec = config["network"]["timeout_sec"]

    # 서로 독립적인 로드/요청은 동시에
    fonts, canvas, items, article = await asyncio.gather(
        load_fonts(config["fonts"]),
        load_background(config["background"], timeout_sec),
        spotify.get_recent_tracks(),
        blog.get_latest_article(),
    )
    covers = await load_covers(items, timeout_sec)

    # 이후는 하나의 캔버스에 순서대로 그린다
    layout = BannerLayout.from_config(config["layout"])
    draw_banner(canvas, fonts, items, covers, article, layout)
    return canvas


async def run(config: dict, spotify=None, blog=None) -> Path:
    """배너를 그리고 모든 단계가 성공했을 때만 한 번 저장한다."""
    canvas = await render(config, spotify, blog)
    output = Path(config["output"])
    canvas.save(output)
    return output


def main() -> int:
    config = load_config()
    try:
        output = asyncio.run(run(config))
    except (RenderError, ContentError) as e:
        logger.error("배너 생성 실패: %s", e)
        return 1
    logger.info("배너 생성 완료: %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

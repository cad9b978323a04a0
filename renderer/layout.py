"""배너 레이아웃 모듈 — 각 콘텐츠의 위치를 계산하고 캔버스에 배치한다."""

import logging
from dataclasses import dataclass, field

from PIL import Image

from content.models import Article, ContentItem

from .canvas import Canvas
from .errors import LayoutPreconditionError
from .font import BitmapFont
from .resample import resize
from .text import measure_height

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anchor:
    x: int
    y: int


@dataclass(frozen=True)
class TrackCoordinates:
    """트랙 목록 기준점. i번째 항목은 y에 i * gap이 더해진다."""
    cover: Anchor = Anchor(1990, 203)
    name: Anchor = Anchor(2220, 222)
    artist: Anchor = Anchor(2220, 312)
    gap: int = 257
    cover_size: int = 200


@dataclass(frozen=True)
class ArticleCoordinates:
    """글 제목 기준점. 요약은 제목 높이에 따라 아래에 붙는다."""
    title: Anchor = Anchor(923, 223)
    max_width: int = 909
    spacing: int = 14


@dataclass(frozen=True)
class BannerFonts:
    regular: BitmapFont   # 트랙 이름
    medium: BitmapFont    # 글 제목
    small: BitmapFont     # 아티스트, 글 요약


@dataclass(frozen=True)
class BannerLayout:
    tracks: TrackCoordinates = field(default_factory=TrackCoordinates)
    article: ArticleCoordinates = field(default_factory=ArticleCoordinates)

    @classmethod
    def from_config(cls, config: dict) -> "BannerLayout":
        """config["layout"] 섹션에서 레이아웃을 만든다."""
        tracks = config.get("tracks", {})
        article = config.get("article", {})
        return cls(
            tracks=TrackCoordinates(
                cover=Anchor(*tracks.get("cover", (1990, 203))),
                name=Anchor(*tracks.get("name", (2220, 222))),
                artist=Anchor(*tracks.get("artist", (2220, 312))),
                gap=tracks.get("gap", 257),
                cover_size=tracks.get("cover_size", 200),
            ),
            article=ArticleCoordinates(
                title=Anchor(*article.get("title", (923, 223))),
                max_width=article.get("max_width", 909),
                spacing=article.get("spacing", 14),
            ),
        )

    def _stacked(self, anchor: Anchor, index: int) -> tuple[int, int]:
        return anchor.x, anchor.y + index * self.tracks.gap

    def cover_position(self, index: int) -> tuple[int, int]:
        return self._stacked(self.tracks.cover, index)

    def name_position(self, index: int) -> tuple[int, int]:
        return self._stacked(self.tracks.name, index)

    def artist_position(self, index: int) -> tuple[int, int]:
        return self._stacked(self.tracks.artist, index)

    def summary_y(self, title_height: int) -> int:
        """요약 블록의 y = 제목 y + 제목 높이 + 간격."""
        return self.article.title.y + title_height + self.article.spacing


def draw_banner(
    canvas: Canvas,
    fonts: BannerFonts,
    items: list[ContentItem],
    covers: list[Image.Image],
    article: Article,
    layout: BannerLayout | None = None,
) -> int:
    """트랙 목록과 글 블록을 캔버스에 그린다.

    Args:
        items: 외부에서 받은 순서 그대로의 항목 (재정렬하지 않음)
        covers: items와 같은 순서의 디코딩된 커버 이미지

    Returns:
        그려진 제목 블록의 높이
    """
    layout = layout or BannerLayout()
    if len(items) != len(covers):
        raise LayoutPreconditionError(f"항목 {len(items)}개, 커버 {len(covers)}개로 개수가 다름")

    size = layout.tracks.cover_size
    for index, (item, cover) in enumerate(zip(items, covers)):
        canvas.composite(resize(cover, size, size), *layout.cover_position(index))
        canvas.draw_text(fonts.regular, *layout.name_position(index), item.primary_text)
        canvas.draw_text(fonts.small, *layout.artist_position(index), item.secondary_text)
        logger.info("트랙 %d 배치: %s / %s", index, item.primary_text, item.secondary_text)

    title = layout.article.title
    max_width = layout.article.max_width
    title_height = measure_height(fonts.medium, article.title, max_width)
    canvas.draw_text(fonts.medium, title.x, title.y, article.title, max_width)

    summary_y = layout.summary_y(title_height)
    canvas.draw_text(fonts.small, title.x, summary_y, article.summary, max_width)
    logger.info("글 배치: 제목 높이 %d, 요약 y=%d", title_height, summary_y)
    return title_height

"""pytest 설정 — 로컬 import 경로와 테스트용 비트맵 폰트."""

import os
import sys

import pytest
from PIL import Image


def _ensure_repo_on_path() -> None:
    """저장소 루트를 sys.path에 추가한다."""
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


_ensure_repo_on_path()

from renderer.font import load_font  # noqa: E402

GLYPH_COLOR = (255, 255, 255, 255)
_FIRST_CHAR = 32
_LAST_CHAR = 126
_COLUMNS = 16


def write_font(directory, name: str = "test", advance: int = 30, line_height: int = 56,
               glyph_size: tuple[int, int] = (20, 40), offset: tuple[int, int] = (2, 8),
               skip: str = "") -> str:
    """BMFont 텍스트 디스크립터와 아틀라스를 만들고 .fnt 경로를 반환한다.

    출력 가능한 ASCII 글리프는 모두 glyph_size 크기의 흰 사각형이고,
    공백은 빈 비트맵이다. skip에 있는 문자는 빠진다.
    """
    glyph_w, glyph_h = glyph_size
    codes = [c for c in range(_FIRST_CHAR, _LAST_CHAR + 1) if chr(c) not in skip]
    rows = (len(codes) + _COLUMNS - 1) // _COLUMNS
    atlas = Image.new("RGBA", (_COLUMNS * glyph_w, rows * glyph_h), (0, 0, 0, 0))

    lines = [
        f'info face="{name}" size={line_height} bold=0 italic=0 padding=0,0,0,0',
        f"common lineHeight={line_height} base={line_height - 10} "
        f"scaleW={atlas.width} scaleH={atlas.height} pages=1 packed=0",
        f'page id=0 file="{name}.png"',
        f"chars count={len(codes)}",
    ]
    for index, code in enumerate(codes):
        x = (index % _COLUMNS) * glyph_w
        y = (index // _COLUMNS) * glyph_h
        w, h = (0, 0) if code == 32 else (glyph_w, glyph_h)
        if w:
            atlas.paste(GLYPH_COLOR, (x, y, x + w, y + h))
        lines.append(
            f"char id={code} x={x} y={y} width={w} height={h} "
            f"xoffset={offset[0]} yoffset={offset[1]} xadvance={advance} page=0 chnl=15"
        )

    atlas.save(os.path.join(directory, f"{name}.png"))
    fnt_path = os.path.join(directory, f"{name}.fnt")
    with open(fnt_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return fnt_path


@pytest.fixture
def font_factory(tmp_path):
    """write_font(tmp_path, ...)를 호출하는 팩토리."""
    def factory(**kwargs) -> str:
        return write_font(str(tmp_path), **kwargs)
    return factory


@pytest.fixture
def font_path(font_factory) -> str:
    return font_factory()


@pytest.fixture
def font(font_path):
    """기본 테스트 폰트: advance 30, 줄 높이 56, 글리프 20x40, 오프셋 (2, 8)."""
    return load_font(font_path)

"""Pillow 캔버스 관리 모듈 — 이미지 합성과 비트맵 폰트 텍스트 출력."""

import io
import logging
import os
import tempfile
from pathlib import Path

from PIL import Image

from .font import BitmapFont
from .resample import decode_image
from .text import wrap

logger = logging.getLogger(__name__)


class Canvas:
    """배경 이미지에서 시작하는 RGBA 캔버스 (원점 좌상단, y는 아래로 증가).

    모든 그리기 연산은 캔버스를 제자리에서 변경한다.
    캔버스 밖으로 나가는 픽셀은 조용히 잘린다.
    """

    def __init__(self, image: Image.Image):
        self._image = image.convert("RGBA") if image.mode != "RGBA" else image.copy()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Canvas":
        """배경 이미지 바이트로 캔버스를 만든다 (DecodeError 가능)."""
        return cls(decode_image(data))

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def composite(self, layer: Image.Image, x: int, y: int) -> None:
        """레이어를 (x, y)에 알파 블렌딩한다. 불투명 소스는 대상 픽셀을 덮어쓴다."""
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        clipped = _clip(self._image.size, layer, (x, y))
        if clipped is None:
            return
        part, dest = clipped
        self._image.alpha_composite(part, dest)

    def draw_text(self, font: BitmapFont, x: int, y: int, text: str,
                  max_width: int | None = None) -> int:
        """텍스트를 좌측 정렬, y 상단 기준으로 그리고 그린 높이를 반환한다.

        반환값은 같은 인자의 measure_height() 결과와 같다.
        """
        lines = wrap(font, text, max_width)
        for index, line in enumerate(lines):
            line_y = y + index * font.line_height
            pen_x = x
            for ch in line.text:
                glyph = font.glyph(ch)
                if glyph.width and glyph.height:
                    self.composite(glyph.image, pen_x + glyph.x_offset, line_y + glyph.y_offset)
                pen_x += glyph.advance
        return len(lines) * font.line_height

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()

    def save(self, path: str | Path) -> None:
        """PNG로 저장한다. 임시 파일에 쓴 뒤 교체하므로 실패 시 결과 파일이 남지 않는다."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                self._image.save(f, format="PNG")
            # mkstemp는 0600으로 만들므로 일반 파일 생성과 같은 권한으로 맞춘다
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise
        logger.info("결과 저장: %s (%dx%d)", path, self.width, self.height)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _clip(size: tuple[int, int], layer: Image.Image,
          position: tuple[int, int]) -> tuple[Image.Image, tuple[int, int]] | None:
    """레이어를 캔버스 범위로 잘라 (잘린 레이어, 대상 좌표)를 반환한다.

    겹치는 영역이 없으면 None.
    """
    canvas_w, canvas_h = size
    x, y = position
    left, top = max(x, 0), max(y, 0)
    right, bottom = min(x + layer.width, canvas_w), min(y + layer.height, canvas_h)
    if left >= right or top >= bottom:
        return None
    if (left, top, right, bottom) == (x, y, x + layer.width, y + layer.height):
        return layer, (x, y)
    return layer.crop((left - x, top - y, right - x, bottom - y)), (left, top)

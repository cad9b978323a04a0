"""텍스트 측정 모듈 — 비트맵 폰트 기준 폭 계산과 단어 단위 줄바꿈.

그리기 없이 높이를 구할 수 있어야 하므로 부작용이 없다.
"""

from dataclasses import dataclass

from .errors import LayoutPreconditionError
from .font import BitmapFont


@dataclass(frozen=True)
class Line:
    """줄바꿈 결과 한 줄과 그 렌더링 폭(px)."""
    text: str
    width: int


def text_width(font: BitmapFont, text: str) -> int:
    """글자별 advance 폭의 합 (커닝 없음)."""
    return sum(font.glyph(ch).advance for ch in text)


def wrap(font: BitmapFont, text: str, max_width: int | None = None) -> list[Line]:
    """공백 기준 greedy 줄바꿈.

    max_width가 None이면 앞뒤 공백만 제거한 전체를 한 줄로 반환한다.
    max_width보다 넓은 단어 하나는 그대로 한 줄을 차지한다 (하이픈 처리 없음).
    빈 문자열/공백만 있는 문자열은 0줄이다.
    """
    if max_width is not None and max_width < 0:
        raise LayoutPreconditionError(f"줄 폭은 음수일 수 없음: {max_width}")

    words = text.split()
    if not words:
        return []

    if max_width is None:
        line = text.strip()
        return [Line(line, text_width(font, line))]

    space = text_width(font, " ")
    lines: list[Line] = []
    current: list[str] = []
    current_w = 0

    for word in words:
        word_w = text_width(font, word)
        if current and current_w + space + word_w <= max_width:
            current.append(word)
            current_w += space + word_w
            continue
        if current:
            lines.append(Line(" ".join(current), current_w))
        current = [word]
        current_w = word_w

    lines.append(Line(" ".join(current), current_w))
    return lines


def measure_height(font: BitmapFont, text: str, max_width: int | None = None) -> int:
    """줄바꿈된 텍스트의 전체 높이 = 줄 수 × 줄 높이."""
    return len(wrap(font, text, max_width)) * font.line_height

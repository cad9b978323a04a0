"""비트맵 폰트 모듈 — AngelCode BMFont(.fnt) 디스크립터와 글리프 아틀라스를 로드한다.

텍스트, XML, 바이너리(v3) 세 가지 디스크립터 형식을 모두 읽는다.
로드된 폰트는 불변이며 여러 렌더링 호출에서 공유해도 안전하다.
"""

import logging
import re
import struct
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from PIL import Image, UnidentifiedImageError

from .errors import FontLoadError, GlyphMissingError

logger = logging.getLogger(__name__)

# 글리프가 없는 문자를 대신할 문자
FALLBACK_CHAR = "?"

_BINARY_MAGIC = b"BMF"
_BINARY_CHAR = struct.Struct("<IHHHHhhhBB")
_FIELD_RE = re.compile(r'(\w+)=("[^"]*"|\S+)')


@dataclass(frozen=True)
class Glyph:
    """글리프 하나의 비트맵과 메트릭."""
    codepoint: int
    x_offset: int
    y_offset: int
    advance: int
    image: Image.Image     # RGBA, 아틀라스에서 잘라낸 사본

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@dataclass(frozen=True)
class BitmapFont:
    """줄 높이는 고정, 글자 폭은 가변인 비트맵 폰트."""
    name: str
    size: int
    line_height: int
    base: int
    glyphs: Mapping[int, Glyph]

    def glyph(self, char: str) -> Glyph:
        """문자에 대응하는 글리프를 반환한다. 없으면 '?' 글리프로 대체한다."""
        glyph = self.glyphs.get(ord(char))
        if glyph is not None:
            return glyph
        fallback = self.glyphs.get(ord(FALLBACK_CHAR))
        if fallback is None:
            raise GlyphMissingError(
                f"{self.name}: U+{ord(char):04X} 글리프와 대체 글리프가 모두 없음"
            )
        return fallback


@dataclass
class _Descriptor:
    """디스크립터 파싱 결과 (아틀라스 로드 전)."""
    name: str = ""
    size: int = 0
    line_height: int | None = None
    base: int = 0
    pages: dict[int, str] | None = None
    chars: list[dict[str, int]] | None = None


def measure_glyph(font: BitmapFont, codepoint: int) -> int:
    """글리프의 advance 폭(px)을 반환한다."""
    return font.glyph(chr(codepoint)).advance


def line_height(font: BitmapFont) -> int:
    return font.line_height


def load_font(path: str | Path) -> BitmapFont:
    """BMFont 디스크립터와 그것이 참조하는 아틀라스 페이지를 로드한다.

    Raises:
        FontLoadError: 디스크립터/아틀라스가 없거나 형식이 잘못된 경우
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FontLoadError(f"폰트 디스크립터를 읽을 수 없음: {path} ({e})") from e

    try:
        desc = _parse_descriptor(raw)
    except (ValueError, KeyError, IndexError, TypeError, AttributeError,
            struct.error, ET.ParseError) as e:
        raise FontLoadError(f"폰트 디스크립터 형식 오류: {path} ({e})") from e

    if desc.line_height is None:
        raise FontLoadError(f"common lineHeight 없음: {path}")
    if not desc.pages:
        raise FontLoadError(f"아틀라스 페이지 정의 없음: {path}")

    atlases = {
        page_id: _load_atlas(path.parent / file_name)
        for page_id, file_name in desc.pages.items()
    }

    glyphs: dict[int, Glyph] = {}
    for char in desc.chars or []:
        page = char.get("page", 0)
        if page not in atlases:
            raise FontLoadError(f"{path}: 글리프 {char['id']}가 없는 페이지 {page}를 참조")
        glyphs[char["id"]] = _cut_glyph(atlases[page], char, path)

    font = BitmapFont(
        name=desc.name or path.stem,
        size=abs(desc.size),
        line_height=desc.line_height,
        base=desc.base,
        glyphs=MappingProxyType(glyphs),
    )
    logger.info("폰트 로드: %s (%d글리프, 줄 높이 %d)", font.name, len(glyphs), font.line_height)
    return font


def _load_atlas(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        raise FontLoadError(f"글리프 아틀라스를 읽을 수 없음: {path} ({e})") from e


def _cut_glyph(atlas: Image.Image, char: dict[str, int], path: Path) -> Glyph:
    """아틀라스에서 글리프 영역을 잘라낸다."""
    x, y = char.get("x", 0), char.get("y", 0)
    w, h = char.get("width", 0), char.get("height", 0)
    if x < 0 or y < 0 or w < 0 or h < 0 or x + w > atlas.width or y + h > atlas.height:
        raise FontLoadError(f"{path}: 글리프 {char['id']} 영역이 아틀라스 밖에 있음")
    return Glyph(
        codepoint=char["id"],
        x_offset=char.get("xoffset", 0),
        y_offset=char.get("yoffset", 0),
        advance=char.get("xadvance", 0),
        image=atlas.crop((x, y, x + w, y + h)),
    )


# ---------------------------------------------------------------------------
# 디스크립터 파서
# ---------------------------------------------------------------------------

def _parse_descriptor(raw: bytes) -> _Descriptor:
    if raw.startswith(_BINARY_MAGIC):
        return _parse_binary(raw)
    text = raw.decode("utf-8-sig")
    if text.lstrip().startswith("<"):
        return _parse_xml(text)
    return _parse_text(text)


def _to_int(value: str) -> int:
    return int(value.strip())


def _char_fields(fields: dict[str, str]) -> dict[str, int]:
    """char 항목의 속성을 정수로 변환한다. id가 없으면 ValueError."""
    if "id" not in fields:
        raise ValueError(f"id 없는 char 항목: {fields}")
    return {k: _to_int(v) for k, v in fields.items() if k != "letter"}


def _parse_text(text: str) -> _Descriptor:
    """텍스트 형식: 'tag key=value key="quoted value" ...' 줄의 나열."""
    desc = _Descriptor(pages={}, chars=[])
    for line in text.splitlines():
        tag, _, rest = line.strip().partition(" ")
        if not tag:
            continue
        fields = {key: value.strip('"') for key, value in _FIELD_RE.findall(rest)}
        if tag == "info":
            desc.name = fields.get("face", "")
            desc.size = _to_int(fields.get("size", "0"))
        elif tag == "common":
            desc.line_height = _to_int(fields["lineHeight"])
            desc.base = _to_int(fields.get("base", "0"))
        elif tag == "page":
            desc.pages[_to_int(fields["id"])] = fields["file"]
        elif tag == "char":
            desc.chars.append(_char_fields(fields))
        # chars count / kernings / kerning 줄은 무시
    return desc


def _parse_xml(text: str) -> _Descriptor:
    root = ET.fromstring(text)
    if root.tag != "font":
        raise ValueError(f"루트 요소가 <font>가 아님: <{root.tag}>")
    desc = _Descriptor(pages={}, chars=[])
    info = root.find("info")
    if info is not None:
        desc.name = info.get("face", "")
        desc.size = _to_int(info.get("size", "0"))
    common = root.find("common")
    if common is not None and common.get("lineHeight") is not None:
        desc.line_height = _to_int(common.get("lineHeight"))
        desc.base = _to_int(common.get("base", "0"))
    for page in root.iterfind("pages/page"):
        desc.pages[_to_int(page.attrib["id"])] = page.attrib["file"]
    for char in root.iterfind("chars/char"):
        desc.chars.append(_char_fields(char.attrib))
    return desc


def _parse_binary(raw: bytes) -> _Descriptor:
    """바이너리 형식 v3: 'BMF' + 버전 바이트, 이후 (타입 1B, 크기 4B) 블록의 나열."""
    version = raw[3]
    if version != 3:
        raise ValueError(f"지원하지 않는 바이너리 BMFont 버전: {version}")

    desc = _Descriptor(pages={}, chars=[])
    pos = 4
    while pos < len(raw):
        block_type, block_size = struct.unpack_from("<BI", raw, pos)
        pos += 5
        block = raw[pos:pos + block_size]
        if len(block) != block_size:
            raise ValueError("블록이 파일 끝에서 잘림")
        pos += block_size

        if block_type == 1:
            desc.size = struct.unpack_from("<h", block, 0)[0]
            desc.name = block[14:].split(b"\0", 1)[0].decode("utf-8")
        elif block_type == 2:
            desc.line_height, desc.base = struct.unpack_from("<HH", block, 0)
        elif block_type == 3:
            names = block.split(b"\0")[:-1]
            desc.pages = {i: name.decode("utf-8") for i, name in enumerate(names)}
        elif block_type == 4:
            for offset in range(0, block_size, _BINARY_CHAR.size):
                (cid, x, y, w, h, xoff, yoff, xadv, page, _chnl) = _BINARY_CHAR.unpack_from(block, offset)
                desc.chars.append({
                    "id": cid, "x": x, "y": y, "width": w, "height": h,
                    "xoffset": xoff, "yoffset": yoff, "xadvance": xadv, "page": page,
                })
        # 5: 커닝 쌍은 사용하지 않음
    return desc

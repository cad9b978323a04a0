"""이미지 디코딩/리사이즈 모듈 — 커버 썸네일 준비용."""

import io

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, LayoutPreconditionError


def decode_image(data: bytes) -> Image.Image:
    """원시 바이트를 RGBA 이미지로 디코딩한다."""
    if not data:
        raise DecodeError("빈 이미지 데이터")
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"이미지 디코딩 실패: {e}") from e


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """비율을 무시하고 정확히 width x height로 늘려 새 이미지를 반환한다."""
    if width <= 0 or height <= 0:
        raise LayoutPreconditionError(f"리사이즈 대상 크기가 잘못됨: {width}x{height}")
    return image.resize((width, height), Image.Resampling.BILINEAR)

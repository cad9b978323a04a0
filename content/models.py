"""외부 콘텐츠 데이터 모델."""

from dataclasses import dataclass


class ContentError(Exception):
    """외부 콘텐츠(스포티파이, 블로그 피드, 이미지)를 가져오지 못했을 때."""


@dataclass(frozen=True)
class ContentItem:
    """배너에 쌓이는 항목 하나 (예: 최근 재생 트랙)."""
    primary_text: str     # 트랙 이름 (이미 다듬어진 상태)
    secondary_text: str   # 아티스트 이름
    image_ref: str        # 커버 이미지 URL 또는 로컬 경로


@dataclass(frozen=True)
class Article:
    """제목 + 요약 블록."""
    title: str
    summary: str

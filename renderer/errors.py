"""렌더러 예외 정의 모듈."""


class RenderError(Exception):
    """렌더링 파이프라인의 모든 예외의 기반 클래스."""


class FontLoadError(RenderError):
    """폰트 디스크립터 또는 글리프 아틀라스를 읽을 수 없을 때."""


class DecodeError(RenderError):
    """이미지 바이트가 유효한 래스터가 아닐 때."""


class GlyphMissingError(RenderError):
    """글리프도 대체 글리프('?')도 없는 문자를 그리려 할 때."""


class LayoutPreconditionError(RenderError):
    """음수 줄 폭, 0 크기 리사이즈 등 잘못된 레이아웃 인자."""

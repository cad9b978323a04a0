"""설정 파일 로더 모듈."""

import copy
import json
import os
from pathlib import Path

from dotenv import load_dotenv

# 기본 설정 경로
_CONFIG_PATH = Path(__file__).parent / "config.json"

# 기본값 — config.json에 누락된 키가 있을 때 사용
_DEFAULTS = {
    "spotify": {
        "client_id": "",
        "client_secret": "",
        "refresh_token": "",
    },
    "tracks": {
        "limit": 3,
        "max_length": 24,
    },
    "article": {
        "feed_url": "",
        "title": "Mastering data fetching with React Query and Next.js",
        "summary": (
            "Learn how React Query simplifies data fetching and caching for you "
            "and how it works in tandem with the Next.js pre-rendering methods"
        ),
    },
    "fonts": {
        "regular": "fonts/cabin_regular_56/cabin-regular-56.ttf.fnt",
        "medium": "fonts/cabin_medium_56/cabin-medium-56.ttf.fnt",
        "small": "fonts/cabin_regular_48/cabin-regular-48.ttf.fnt",
    },
    "background": "header.png",
    "output": "result.png",
    "network": {
        "timeout_sec": 10,
    },
    "layout": {
        "tracks": {
            "cover": [1990, 203],
            "name": [2220, 222],
            "artist": [2220, 312],
            "gap": 257,
            "cover_size": 200,
        },
        "article": {
            "title": [923, 223],
            "max_width": 909,
            "spacing": 14,
        },
    },
}

# 환경 변수 → (섹션, 키). 비밀 값은 config.json보다 환경 변수가 우선한다.
_ENV_OVERRIDES = {
    "SPOTIFY_CLIENT_ID": ("spotify", "client_id"),
    "SPOTIFY_CLIENT_SECRET": ("spotify", "client_secret"),
    "SPOTIFY_REFRESH_TOKEN": ("spotify", "refresh_token"),
}


def _deep_merge(base: dict, override: dict) -> dict:
    """base 딕셔너리에 override 값을 병합한다 (깊은 병합)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env(config: dict) -> dict:
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            config.setdefault(section, {})[key] = value
    return config


def load_config(path: Path | None = None, env_file: Path | None = None) -> dict:
    """설정 파일을 읽어 딕셔너리로 반환한다.

    파일이 없으면 기본값을 사용한다. .env 파일의 값은 환경 변수로 로드된다.
    """
    load_dotenv(env_file)
    config_path = path or _CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            user_config = json.load(f)
        config = _deep_merge(copy.deepcopy(_DEFAULTS), user_config)
    else:
        config = copy.deepcopy(_DEFAULTS)
    return _apply_env(config)

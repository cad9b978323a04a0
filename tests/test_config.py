"""설정 로더 테스트."""

import json

import pytest

from config import load_config

_SECRETS = ("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET", "SPOTIFY_REFRESH_TOKEN")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """테스트 중 .env로 설정된 값도 종료 후 제거되도록 한다."""
    for name in _SECRETS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.json", env_file=tmp_path / ".env")
    assert config["tracks"]["limit"] == 3
    assert config["layout"]["tracks"]["gap"] == 257
    assert config["layout"]["article"]["max_width"] == 909
    assert config["spotify"]["client_id"] == ""


def test_file_is_deep_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "layout": {"tracks": {"gap": 300}},
        "spotify": {"client_id": "from-file"},
    }), encoding="utf-8")
    config = load_config(path, env_file=tmp_path / ".env")
    assert config["layout"]["tracks"]["gap"] == 300
    assert config["layout"]["tracks"]["cover"] == [1990, 203]
    assert config["spotify"]["client_id"] == "from-file"


def test_env_overrides_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "from-env")
    env_file = tmp_path / ".env"
    env_file.write_text("SPOTIFY_CLIENT_SECRET=secret-from-dotenv\n", encoding="utf-8")
    config = load_config(tmp_path / "missing.json", env_file=env_file)
    assert config["spotify"]["client_id"] == "from-env"
    assert config["spotify"]["client_secret"] == "secret-from-dotenv"


def test_defaults_are_not_shared(tmp_path):
    first = load_config(tmp_path / "missing.json", env_file=tmp_path / ".env")
    first["layout"]["tracks"]["gap"] = 1
    second = load_config(tmp_path / "missing.json", env_file=tmp_path / ".env")
    assert second["layout"]["tracks"]["gap"] == 257

from config import Settings, _parse_cors_origins


def test_cors_origins_unset(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    assert _parse_cors_origins() is None


def test_cors_origins_comma_separated(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    assert _parse_cors_origins() == ["http://a.test", "http://b.test"]


def test_cors_origins_json_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["http://a.test", "http://b.test"]')
    assert _parse_cors_origins() == ["http://a.test", "http://b.test"]


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT", "5/minute")
    monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "2")
    settings = Settings()
    assert settings.rate_limit == "5/minute"
    assert settings.max_upload_size_mb == 2
    assert settings.max_text_chars == 50000

from src.api.settings import DEFAULT_CORS_ORIGINS, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PERSISTENCE_BACKEND", "DATABASE_URL", "CORS_ALLOW_ORIGINS", "PORT", "LOG_LEVEL", "LOG_FILE"):
            monkeypatch.delenv(name, raising=False)
        settings = get_settings()
        assert settings.persistence_backend == "memory"
        assert settings.sqlite_db_path == "./data/events.db"
        assert settings.cors_allow_origins == DEFAULT_CORS_ORIGINS
        assert settings.port == 8080
        assert settings.log_level == "INFO"
        assert settings.log_file is None

    def test_default_allow_list(self):
        assert DEFAULT_CORS_ORIGINS == [
            "http://localhost:5173",
            "https://event-calendar-frontend.onrender.com",
        ]

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
        monkeypatch.setenv("DATABASE_URL", "/var/lib/events/events.db")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com/, https://b.example.com")
        monkeypatch.setenv("PORT", "9000")
        settings = get_settings()
        assert settings.persistence_backend == "sqlite"
        assert settings.sqlite_db_path == "/var/lib/events/events.db"
        assert settings.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]
        assert settings.port == 9000

    def test_unknown_backend_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        assert get_settings().persistence_backend == "memory"

    def test_wildcard_origin_is_replaced_by_default_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "*")
        assert get_settings().cors_allow_origins == DEFAULT_CORS_ORIGINS

    def test_invalid_port_falls_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        assert get_settings().port == 8080

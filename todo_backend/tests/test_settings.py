from todo_api.settings import get_settings


def test_defaults(monkeypatch):
    for name in ("PERSISTENCE_BACKEND", "BCRYPT_ROUNDS", "CORS_ALLOW_ORIGINS", "JWT_SECRET", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    s = get_settings()
    assert s.persistence_backend == "memory"
    assert s.bcrypt_rounds == 5
    assert s.cors_allow_origins == ["*"]
    assert s.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "Mongo")
    monkeypatch.setenv("MONGO_URL", "mongodb://db:27017")
    monkeypatch.setenv("MONGO_DB", "todos")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    s = get_settings()
    assert s.persistence_backend == "mongo"
    assert (s.mongo_url, s.mongo_db, s.jwt_secret) == ("mongodb://db:27017", "todos", "s3cret")
    assert s.cors_allow_origins == ["http://a.test", "http://b.test"]


def test_unknown_backend_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "sqlite")
    assert get_settings().persistence_backend == "memory"


def test_bcrypt_rounds_are_clamped(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "1")
    assert get_settings().bcrypt_rounds == 4
    monkeypatch.setenv("BCRYPT_ROUNDS", "99")
    assert get_settings().bcrypt_rounds == 31
    monkeypatch.setenv("BCRYPT_ROUNDS", "lots")
    assert get_settings().bcrypt_rounds == 5

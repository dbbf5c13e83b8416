from sqlalchemy import create_engine
from sqlalchemy.engine import make_url

from app.db import engine_connect_args, normalize_database_url


def test_sqlite_file_url_is_kept_intact():
    url = normalize_database_url("sqlite:///./incentives.db")

    assert url == "sqlite:///./incentives.db"
    assert make_url(url).database == "./incentives.db"


def test_in_memory_sqlite_url_is_kept_intact():
    assert normalize_database_url("sqlite://") == "sqlite://"


def test_default_url_builds_an_engine():
    url = normalize_database_url("sqlite:///./incentives.db")
    engine = create_engine(url, connect_args=engine_connect_args(url))
    try:
        assert engine.dialect.name == "sqlite"
    finally:
        engine.dispose()


def test_heroku_postgres_scheme_is_rewritten():
    url = normalize_database_url("postgres://user:pw@db.example.com:5432/incentives")

    assert url == "postgresql://user:pw@db.example.com:5432/incentives"
    assert engine_connect_args(url) == {"options": "-c timezone=utc"}

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv
import urllib.parse

load_dotenv(encoding='utf-8')


def normalize_database_url(url: str) -> str:
    # Heroku-style URLs still use the removed "postgres" scheme name
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    # sqlite URLs carry an empty netloc that urlunparse would drop
    if url.startswith("postgres"):
        try:
            url = urllib.parse.urlunparse(urllib.parse.urlparse(url))
        except ValueError:
            url = url.encode('utf-8', errors='replace').decode('utf-8')
    return url


def engine_connect_args(url: str) -> dict:
    if url.startswith("postgres"):
        return {"options": "-c timezone=utc"}
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./incentives.db"))

engine = create_engine(DATABASE_URL, connect_args=engine_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

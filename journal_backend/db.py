from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine

from journal_backend.settings import get_settings

logger = logging.getLogger(__name__)

_ASYNCPG_PREFIXES = ("postgres://", "postgresql://", "postgresql+psycopg2://")
_LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def normalize_database_url(database_url: str) -> str:
    """Rewrite Postgres URLs for asyncpg, translating ``sslmode`` into ``ssl``."""
    url = str(database_url or "").strip()
    for prefix in _ASYNCPG_PREFIXES:
        if url.startswith(prefix):
            url = "postgresql+asyncpg://" + url[len(prefix) :]
            break
    if not url.startswith("postgresql+asyncpg://"):
        return url

    parsed = urlparse(url)
    clean = []
    ssl_requested = False
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key == "sslmode":
            ssl_requested = value != "disable"
            continue
        if key in {"channel_binding", "ssl"}:
            continue
        clean.append((key, value))
    if ssl_requested:
        clean.append(("ssl", "true"))
    return urlunparse(parsed._replace(query=urlencode(clean)))


def _engine_kwargs(db_url: str) -> dict:
    kwargs: dict = {"pool_pre_ping": True}
    if not db_url.startswith("postgresql+asyncpg://"):
        return kwargs
    kwargs.update({"pool_size": 20, "max_overflow": 10})
    host = urlparse(db_url).hostname or ""
    if host and host not in _LOCAL_HOSTS:
        kwargs["connect_args"] = {"ssl": True}
    return kwargs


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        db_url = normalize_database_url(get_settings().database_url)
        _engine = create_async_engine(db_url, **_engine_kwargs(db_url))
        logger.info("Database engine created for %s", urlparse(db_url).scheme)
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory

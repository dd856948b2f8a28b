"""
Centralized database layer for CommerFlow.

Structure:
- entities/: Database entity models organized by table/business domain
- repositories/: Data access layer organized by table/business domain
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session, repo bundle)
"""

from .base import Base
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    SqlRepoBundle,
    build_sql_repos,
    create_all,
    create_engine,
    create_sessionmaker,
    drop_all,
)

__all__ = [
    "Base",
    "SqlRepoBundle",
    "async_session_maker",
    "build_sql_repos",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "drop_all",
    "engine",
    "get_session",
    "init_db",
]

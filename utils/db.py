# utils/db.py
"""
Database Connection Management

Version: 2.1.0
Features:
- Singleton pattern with thread-safe double-checked locking
- Engine built from DATABASE_URL (SQLite by default)
- Health check utilities
- Query execution helpers
"""

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
import logging
import threading
from typing import Tuple, Optional, Dict, List
from contextlib import contextmanager

from .config import config

logger = logging.getLogger(__name__)

# ==================== SINGLETON ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine():
    """
    Get SQLAlchemy database engine (singleton pattern)

    Thread-safe implementation using double-checked locking.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()

    return _engine


def _create_engine(url: str = None):
    """Create new database engine with configured settings"""
    url = url or config.get_database_url()
    pool_recycle = config.get_app_setting("DB_POOL_RECYCLE", 3600)

    logger.info(f"🔌 Creating database engine: {url.split('://')[0]}://***")

    kwargs = {'pool_pre_ping': True, 'echo': False}
    if url.startswith('sqlite'):
        # Streamlit reruns scripts on worker threads
        kwargs['connect_args'] = {'check_same_thread': False}
    else:
        kwargs['pool_recycle'] = pool_recycle

    engine = create_engine(url, **kwargs)

    logger.info(f"✅ Database engine created (recycle={pool_recycle}s)")

    return engine


# ==================== CONNECTION MANAGEMENT ====================

def check_db_connection(engine=None) -> Tuple[bool, Optional[str]]:
    """
    Check if database connection is healthy

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        engine = engine or get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        error_msg = "Cannot connect to database. Please check DATABASE_URL."
        logger.error(f"❌ Database connection failed: {e}")
        return False, error_msg
    except Exception as e:
        error_msg = f"Database error: {str(e)}"
        logger.error(f"❌ Database error: {e}")
        return False, error_msg


# ==================== CONTEXT MANAGERS ====================

@contextmanager
def get_connection(engine=None):
    """
    Context manager for database connections

    Usage:
        with get_connection() as conn:
            result = conn.execute(text("SELECT * FROM users"))
    """
    engine = engine or get_db_engine()
    conn = engine.connect()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


# ==================== QUERY HELPERS ====================

def execute_query(query: str, params: Dict = None, engine=None) -> List[Dict]:
    """
    Execute SELECT query and return results as list of dicts
    """
    engine = engine or get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(text(query), params or {})
        return [dict(row._mapping) for row in result]


# ==================== EXPORTS ====================

__all__ = [
    'get_db_engine',
    'check_db_connection',
    'get_connection',
    'execute_query',
]

# utils/__init__.py
"""
Shared Utilities Package for the studio dashboards

This package contains common utilities shared across all pages:
- auth: Identity and session management
- config: Configuration management (local + Streamlit Cloud)
- db: Database engine management
- session_store: Session-scoped StudioStore
- studio_performance: Target & revenue attribution engine

Usage:
    # Import specific modules
    from utils.auth import AuthManager
    from utils.db import get_db_engine, execute_query
    from utils.config import config

    # Or import commonly used items directly
    from utils import AuthManager, get_studio_store, config
"""

# Authentication
from .auth import (
    AuthManager,
    USERS_TABLE_DDL,
)

# Configuration
from .config import (
    config,
    Config,
    IS_RUNNING_ON_CLOUD,
    APP_CONFIG,
)

# Database
from .db import (
    get_db_engine,
    check_db_connection,
    get_connection,
    execute_query,
)

# Session
from .session_store import (
    get_studio_store,
    reset_studio_store,
)

__all__ = [
    # Auth
    'AuthManager',
    'USERS_TABLE_DDL',

    # Config
    'config',
    'Config',
    'IS_RUNNING_ON_CLOUD',
    'APP_CONFIG',

    # Database
    'get_db_engine',
    'check_db_connection',
    'get_connection',
    'execute_query',

    # Session
    'get_studio_store',
    'reset_studio_store',
]

__version__ = '2.1.0'

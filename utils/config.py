# utils/config.py
"""
Centralized Configuration Management

Version: 2.1.0
Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- Type-safe getters with defaults
- Environment detection
- Missing settings fall back to defaults (never raises at import)
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from dataclasses import dataclass

# Initialize logger
logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///studio.sqlite3"
DEFAULT_GEMINI_VISION_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_TEXT_MODEL = "gemini-2.5-flash"


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


def _as_number(value: Any, default, cast=int):
    """Parse a numeric setting; a malformed value logs a warning and keeps the default."""
    if value is None or value == '':
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid numeric setting '{value}', using {default}")
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


@dataclass
class DatabaseConfig:
    """Database configuration container"""
    url: str = DEFAULT_DATABASE_URL


@dataclass
class AIConfig:
    """AI estimation service configuration container"""
    api_key: Optional[str] = None
    vision_model: str = DEFAULT_GEMINI_VISION_MODEL
    text_model: str = DEFAULT_GEMINI_TEXT_MODEL
    timeout_seconds: float = 20.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'api_key': self.api_key,
            'vision_model': self.vision_model,
            'text_model': self.text_model,
            'timeout_seconds': self.timeout_seconds
        }

    def is_configured(self) -> bool:
        return bool(self.api_key)


class Config:
    """
    Centralized configuration management

    Usage:
        from utils.config import config

        # Get database URL
        url = config.get_database_url()

        # Get AI config
        ai_config = config.get_ai_config()

        # Get app settings
        months = config.get_app_setting("TRAILING_MONTHS", 6)

        # Check feature flags
        if config.is_feature_enabled("DEMO_LOGIN"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()
        self._initialized = True

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            self._load_cloud_config()
        else:
            self._load_local_config()

        self._load_app_config()
        self._log_config_status()

    def _load_cloud_config(self):
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        # Database
        db_secrets = st.secrets.get("DB_CONFIG", {})
        self._db_config = DatabaseConfig(
            url=db_secrets.get("url", DEFAULT_DATABASE_URL)
        )

        # AI
        ai_secrets = st.secrets.get("AI", {})
        self._ai_config = AIConfig(
            api_key=ai_secrets.get("GEMINI_API_KEY"),
            vision_model=ai_secrets.get("GEMINI_VISION_MODEL", DEFAULT_GEMINI_VISION_MODEL),
            text_model=ai_secrets.get("GEMINI_TEXT_MODEL", DEFAULT_GEMINI_TEXT_MODEL),
            timeout_seconds=_as_number(ai_secrets.get("AI_TIMEOUT_SECONDS"), 20.0, float)
        )

        # App settings are read from the environment; copy top-level secrets in
        for key, value in st.secrets.items():
            if isinstance(value, (str, int, float, bool)):
                os.environ.setdefault(key, str(value))

        logger.info("☁️ Running in STREAMLIT CLOUD")

    def _load_local_config(self):
        """Load configuration from local .env file"""
        # Find and load .env file
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        # Database
        self._db_config = DatabaseConfig(
            url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        )

        # AI
        self._ai_config = AIConfig(
            api_key=os.getenv("GEMINI_API_KEY"),
            vision_model=os.getenv("GEMINI_VISION_MODEL", DEFAULT_GEMINI_VISION_MODEL),
            text_model=os.getenv("GEMINI_TEXT_MODEL", DEFAULT_GEMINI_TEXT_MODEL),
            timeout_seconds=_as_number(os.getenv("AI_TIMEOUT_SECONDS"), 20.0, float)
        )

        logger.info("💻 Running in LOCAL environment")

    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Session
            "SESSION_TIMEOUT_HOURS": _as_number(os.getenv("SESSION_TIMEOUT_HOURS"), 8),

            # Business logic
            "TRAILING_MONTHS": _as_number(os.getenv("TRAILING_MONTHS"), 6),
            "FALLBACK_KCAL_PER_MINUTE": _as_number(os.getenv("FALLBACK_KCAL_PER_MINUTE"), 5),
            "DEFAULT_BODY_WEIGHT_KG": _as_number(os.getenv("DEFAULT_BODY_WEIGHT_KG"), 70.0, float),

            # Database pool
            "DB_POOL_RECYCLE": _as_number(os.getenv("DB_POOL_RECYCLE"), 3600),

            # Logging
            "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),

            # Localization
            "TIMEZONE": os.getenv("TIMEZONE", "Asia/Seoul"),

            # Feature flags
            "ENABLE_DEMO_LOGIN": _as_bool(os.getenv("ENABLE_DEMO_LOGIN"), True),
            "ENABLE_AI_ESTIMATION": _as_bool(os.getenv("ENABLE_AI_ESTIMATION"), True),
        }

    def _log_config_status(self):
        """Log configuration status"""
        logger.info(f"✅ Database: {self._db_config.url.split('://')[0]}")
        logger.info(f"✅ Gemini API: {'Configured' if self._ai_config.is_configured() else 'Missing'}")

    # ==================== PUBLIC GETTERS ====================

    def get_database_url(self) -> str:
        return self._db_config.url

    def get_ai_config(self) -> Dict[str, Any]:
        """Get AI estimation configuration as dictionary"""
        return self._ai_config.to_dict()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)

    # ==================== PROPERTIES ====================

    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()


# ==================== SINGLETON INSTANCE ====================

config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'IS_RUNNING_ON_CLOUD',
    'APP_CONFIG',
]

# utils/auth.py
"""
Identity & Session Manager for the studio dashboards

Version: 2.1.0
Features:
- Identity/profile lookup from the `users` table (no credential handling)
- Role-based access control
- Session management with timeout
- Demo identities when ENABLE_DEMO_LOGIN is on
"""

import streamlit as st
from datetime import datetime, timedelta
from typing import Optional, List
import logging
from sqlalchemy import text
from .db import get_connection, get_db_engine
from .config import config
from .studio_performance.constants import ROLES
from .studio_performance.models import Identity

logger = logging.getLogger(__name__)

USERS_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS users (
        id VARCHAR(64) PRIMARY KEY,
        username VARCHAR(100) NOT NULL UNIQUE,
        display_name VARCHAR(100) NOT NULL DEFAULT '',
        role VARCHAR(20) NOT NULL,
        position VARCHAR(50) NOT NULL DEFAULT '',
        branch_name VARCHAR(100) NOT NULL DEFAULT '',
        member_id VARCHAR(64) NOT NULL DEFAULT '',
        is_active INTEGER NOT NULL DEFAULT 1,
        delete_flag INTEGER NOT NULL DEFAULT 0
    )
"""


class AuthManager:
    """
    Identity manager for Streamlit apps

    Usage:
        auth = AuthManager()
        identity = auth.load_identity('u2')
        if identity:
            auth.login(identity)

        auth.require_role(['admin', 'manager'])
    """

    def __init__(self, engine=None):
        self._engine = engine
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )

    @property
    def engine(self):
        return self._engine or get_db_engine()

    # ==================== PROFILE STORE ====================

    def create_schema(self):
        """Create the users table if missing"""
        with get_connection(self.engine) as conn:
            conn.execute(text(USERS_TABLE_DDL))
        logger.info("users table ready")

    def save_identity(self, identity: Identity, username: str):
        """Insert or replace a user profile row"""
        with get_connection(self.engine) as conn:
            conn.execute(text("DELETE FROM users WHERE id = :id"), {'id': identity.id})
            conn.execute(
                text("""
                    INSERT INTO users
                        (id, username, display_name, role, position, branch_name, member_id)
                    VALUES
                        (:id, :username, :display_name, :role, :position, :branch_name, :member_id)
                """),
                {**identity.to_dict(), 'username': username}
            )
        logger.info(f"Profile saved: {username} ({identity.role})")

    def load_identity(self, user_id: str) -> Optional[Identity]:
        """
        Load the profile of a signed-in user

        Returns:
            Identity, or None when the user is unknown, inactive, has an
            unknown role or the lookup failed
        """
        query = text("""
            SELECT id, display_name, role, position, branch_name, member_id
            FROM users
            WHERE id = :user_id
            AND is_active = 1
            AND delete_flag = 0
        """)

        try:
            with self.engine.connect() as conn:
                result = conn.execute(query, {'user_id': user_id}).fetchone()
        except Exception as e:
            logger.error(f"Identity lookup error: {e}")
            return None

        if not result:
            logger.warning(f"No profile for user: {user_id}")
            return None

        row = dict(result._mapping)
        role = (row['role'] or '').lower()
        if role not in ROLES:
            logger.warning(f"Profile {user_id} has unknown role '{row['role']}'")
            return None

        return Identity(
            id=str(row['id']),
            role=role,
            display_name=row['display_name'] or '',
            position=row['position'] or '',
            branch_name=row['branch_name'] or '',
            member_id=row['member_id'] or '',
        )

    # ==================== SESSION MANAGEMENT ====================

    def check_session(self) -> bool:
        """Check if user session is valid and not expired"""
        if not st.session_state.get('authenticated'):
            return False

        login_time = st.session_state.get('login_time')
        if login_time:
            elapsed = datetime.now() - login_time
            if elapsed > self.session_timeout:
                logger.info(f"Session expired for user: {st.session_state.get('user_id')}")
                self.logout()
                return False

        return True

    def login(self, identity: Identity):
        """Initialize user session for a resolved identity"""
        st.session_state.authenticated = True
        st.session_state.identity = identity
        st.session_state.user_id = identity.id
        st.session_state.user_role = identity.role
        st.session_state.user_fullname = identity.display_name
        st.session_state.login_time = datetime.now()

        logger.info(f"User {identity.id} ({identity.role}) logged in")

    def logout(self):
        """Clear user session"""
        user_id = st.session_state.get('user_id', 'Unknown')

        auth_keys = [
            'authenticated', 'identity', 'user_id', 'user_role',
            'user_fullname', 'login_time', 'studio_store'
        ]

        for key in auth_keys:
            if key in st.session_state:
                del st.session_state[key]

        logger.info(f"User {user_id} logged out")

    # ==================== ACCESS CONTROL ====================

    def require_auth(self) -> bool:
        """
        Require authentication to access a page
        Use at the beginning of each protected page
        """
        if not self.check_session():
            st.warning("⚠️ 로그인이 필요합니다")
            st.stop()
            return False
        return True

    def require_role(self, allowed_roles: List[str]) -> bool:
        """
        Require specific role(s) to access a page

        Usage:
            auth.require_role(['admin', 'manager'])
        """
        if not self.require_auth():
            return False

        current_role = st.session_state.get('user_role', '')

        if current_role not in allowed_roles:
            st.error(f"🚫 접근 권한이 없습니다. 필요 권한: {', '.join(allowed_roles)}")
            st.stop()
            return False

        return True

    # ==================== USER INFO HELPERS ====================

    def get_identity(self) -> Optional[Identity]:
        return st.session_state.get('identity')

    def get_user_display_name(self) -> str:
        identity = self.get_identity()
        if identity and identity.display_name:
            return identity.display_name
        return st.session_state.get('user_id', 'User')


# ==================== MODULE EXPORTS ====================

__all__ = [
    'AuthManager',
    'USERS_TABLE_DDL',
]

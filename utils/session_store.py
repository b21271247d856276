# utils/session_store.py
"""
Session-scoped StudioStore holder

Each Streamlit session owns one StudioStore kept in st.session_state.
Nothing is persisted; the store lives as long as the browser session.
"""

import logging

import streamlit as st

from .studio_performance import StudioStore, build_demo_store

logger = logging.getLogger(__name__)

STORE_KEY = 'studio_store'


def get_studio_store() -> StudioStore:
    """Return the session's store, creating the demo studio on first use."""
    if STORE_KEY not in st.session_state:
        st.session_state[STORE_KEY] = build_demo_store()
        logger.info(f"Session store created: {st.session_state[STORE_KEY]!r}")
    return st.session_state[STORE_KEY]


def reset_studio_store() -> StudioStore:
    """Drop the session's store and start again from the demo data."""
    st.session_state.pop(STORE_KEY, None)
    return get_studio_store()


__all__ = [
    'get_studio_store',
    'reset_studio_store',
]

"""
ui/components/session.py
------------------------
One IncentiveStore per browser session, kept in st.session_state.

Pages call `get_store()` instead of importing a module-level store, so two
open browser tabs never share state.
"""

from __future__ import annotations

import streamlit as st

from core.api_client import IncentiveApi
from core.config import BACKEND_URL
from core.store import IncentiveStore

STORE_KEY = "incentive_store"


def get_store() -> IncentiveStore:
    """Return this session's store, building and loading it on first use."""
    if STORE_KEY not in st.session_state:
        store = IncentiveStore(IncentiveApi(BACKEND_URL))
        store.load_roles()
        store.fetch_products()
        for role in store.roles:
            store.fetch_role_products(role.id)
        st.session_state[STORE_KEY] = store
    return st.session_state[STORE_KEY]


def reset_store() -> None:
    """Drop the session store; the next `get_store()` reloads from the API."""
    st.session_state.pop(STORE_KEY, None)


def identity_sidebar(store: IncentiveStore) -> None:
    """Account switcher: act as administrator or view as a team member."""
    options = [None] + [m.id for m in store.members]

    def label(member_id):
        if member_id is None:
            return "Administrator"
        member = next(m for m in store.members if m.id == member_id)
        role = next((r for r in store.roles if r.id == member.role_id), None)
        return f"{member.name} ({role.title if role else 'no role'})"

    with st.sidebar:
        st.header("Acting as")
        current = store.current_member_id if store.is_impersonating else None
        chosen = st.selectbox("Identity", options, index=options.index(current), format_func=label)
        if chosen != current:
            store.switch_to_member(chosen)
            st.rerun()
        if st.button("Reload data"):
            reset_store()
            st.rerun()

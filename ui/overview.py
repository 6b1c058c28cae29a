"""
SalesRoles — Streamlit Launcher
-------------------------------
Main entrypoint for the incentive console multipage app.
This file ensures Streamlit loads all pages under ui/pages/.

Run with:
    streamlit run ui/overview.py
"""

import os, sys
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

import streamlit as st

from core.metadata import get_metadata
from ui.components.backend_status import render_status_bar
from ui.components.session import get_store, identity_sidebar

st.set_page_config(page_title="SalesRoles", layout="wide")

st.title("Sales Team Roles & Incentives")
st.caption("Roles, products and combined commission plans for your sales team")

store = get_store()
identity_sidebar(store)
render_status_bar()

c1, c2, c3 = st.columns(3)
c1.metric("Roles", store.total_roles)
c2.metric("Products", len(store.products))
c3.metric("Members", len(store.members))

st.markdown("""
Use the sidebar to navigate between pages:
- **Roles** — create, edit, delete and get AI suggestions for roles
- **Incentive Plan** — assign products to roles and compare combined incentives
- **Sales Member** — see what an impersonated member may sell
""")

st.markdown("---")
st.caption(f"{get_metadata()['project']} v{get_metadata()['version']}")

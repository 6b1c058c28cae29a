"""
Incentive Plan

Assign products to roles and compare the combined commission and bonus of
several roles side by side.

Backed by the session IncentiveStore:
- toggle_product_selection / update_role_products (per-role assignment)
- toggle_role_selection + calculate_combined_incentives (comparison)
"""

import os
import sys

import pandas as pd
import streamlit as st

# Ensure project root is on sys.path when running via `streamlit run ui/overview.py`
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from core.types import ViewMode
from ui.components.backend_status import render_status_bar
from ui.components.session import get_store, identity_sidebar
from ui.components.visualizer import combined_incentive_chart, comparison_frame

st.set_page_config(page_title="Incentive Plan", layout="wide")

st.title("Incentive Plan")
st.caption("Which products each role may sell, and what a combination of roles earns")

store = get_store()
identity_sidebar(store)
render_status_bar()

if store.is_impersonating:
    st.info("The incentive plan is managed by administrators. Switch back to Administrator in the sidebar.")
    st.stop()

if not store.roles:
    st.warning("No roles available. Create one on the Roles page.")
    st.stop()

# ---------------------------------------------------------------------------
# Sidebar: role + mode
# ---------------------------------------------------------------------------
with st.sidebar:
    st.header("Plan")
    role_ids = [r.id for r in store.roles]
    titles = {r.id: r.title for r in store.roles}
    role_id = st.selectbox("Role", role_ids, format_func=lambda rid: titles[rid])
    edit = st.toggle("Edit mode", value=store.mode == ViewMode.EDIT)
    store.set_mode(ViewMode.EDIT if edit else ViewMode.VIEW)

tab_plan, tab_compare = st.tabs(["Role products", "Role comparison"])

# ---------------------------------------------------------------------------
# Per-role product assignment
# ---------------------------------------------------------------------------
with tab_plan:
    entry = store.role_incentives.get(role_id)
    assigned = entry.product_ids if entry else {p.id for p in store.get_selected_products_for_role(role_id)}
    if entry is None:
        st.caption("This role has no explicit product configuration yet; defaults are shown.")

    if store.is_loading_products:
        st.info("Loading products…")

    for product in store.products:
        cols = st.columns([1, 4, 2, 2, 2, 2])
        checked = cols[0].checkbox(
            "assigned",
            value=product.id in assigned,
            key=f"assign_{role_id}_{product.id}",
            disabled=store.mode != ViewMode.EDIT,
            label_visibility="collapsed",
        )
        cols[1].write(product.name)
        cols[2].write(product.commission)
        cols[3].write(product.bonus)
        cols[4].write(product.price or "—")
        cols[5].write("Sellable" if product.is_sellable else "Not sellable")

        if checked != (product.id in assigned):
            if not store.toggle_product_selection(product.id, role_id, checked):
                st.toast("Saving failed; assignments reloaded from the server.")
            # let the checkbox re-initialise from the store on the next run
            st.session_state.pop(f"assign_{role_id}_{product.id}", None)
            st.rerun()

    if store.mode == ViewMode.EDIT:
        with st.expander("Bulk select"):
            names = {p.id: p.name for p in store.products}
            chosen = st.multiselect(
                "Products for this role",
                list(names),
                default=sorted(assigned),
                format_func=lambda pid: names[pid],
                key=f"bulk_{role_id}",
            )
            if st.button("Apply selection"):
                result = store.update_role_products(role_id, chosen)
                if not result and chosen:
                    st.toast("Update did not complete; products reloaded.")
                st.rerun()

# ---------------------------------------------------------------------------
# Multi-role comparison
# ---------------------------------------------------------------------------
with tab_compare:
    st.caption("Select multiple roles to see how commissions and bonuses combine.")
    check_cols = st.columns(min(4, len(store.roles)))
    for i, role in enumerate(store.roles):
        col = check_cols[i % len(check_cols)]
        was = role.id in store.selected_roles
        now = col.checkbox(role.title, value=was, key=f"cmp_{role.id}")
        if now != was:
            store.toggle_role_selection(role.id)
            st.rerun()

    combined = store.calculate_combined_incentives()
    if not store.selected_roles:
        st.info("Select at least one role to see comparison data.")
    elif not combined:
        st.info("No products to compare.")
    else:
        selected = [r for r in store.roles if r.id in store.selected_roles]
        df = comparison_frame(store.products, selected, combined)
        st.dataframe(df, use_container_width=True, hide_index=True)
        fig = combined_incentive_chart(store.products, combined)
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)
        st.download_button(
            "Download CSV",
            pd.DataFrame([c.as_dict() for c in combined]).to_csv(index=False),
            file_name="combined_incentives.csv",
            mime="text/csv",
        )

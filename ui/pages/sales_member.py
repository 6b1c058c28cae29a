"""
Sales Member View

What an impersonated team member sees: the products their role may sell
and the incentive earned on each.
"""

import os
import sys

import pandas as pd
import streamlit as st

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from ui.components.backend_status import render_status_bar
from ui.components.session import get_store, identity_sidebar

st.set_page_config(page_title="Sales Member", layout="wide")
st.title("Sales Member View")

store = get_store()
identity_sidebar(store)
render_status_bar()

if not store.is_impersonating:
    st.info("Pick a team member under 'Acting as' in the sidebar to see their view.")
    st.subheader("Members")
    titles = {r.id: r.title for r in store.roles}
    st.dataframe(
        pd.DataFrame(
            [{"Name": m.name, "Email": m.email, "Role": titles.get(m.role_id, "—")} for m in store.members]
        ),
        use_container_width=True,
        hide_index=True,
    )
    st.stop()

member = store.current_member
role = next((r for r in store.roles if r.id == store.current_sales_role_id), None)
st.caption(f"{member.name} · {role.title if role else 'unknown role'}")

available = store.get_available_products_for_sales_member()
combined = {ci.product_id: ci for ci in store.calculate_combined_incentives()}

if not available:
    st.info("No products are available for your role yet.")
else:
    st.subheader("Products you can sell")
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Product": p.name,
                    "Price": p.price or "—",
                    "Commission": combined[p.id].combined_commission if p.id in combined else p.commission,
                    "Bonus": combined[p.id].combined_bonus if p.id in combined else p.bonus,
                }
                for p in available
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

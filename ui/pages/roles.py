# ===============================================================
# Roles: SalesRoles console
# ===============================================================
# Features:
#   • Create / edit roles (title, description, permissions, default)
#   • AI description + permission suggestions (degrade to fallbacks)
#   • AI team-structure recommendations
#   • Delete disabled for the last remaining role
#   • One action menu open at a time (page-owned state)
# ===============================================================

import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../../")))

import json

import streamlit as st

from core.types import PERMISSION_VOCABULARY
from core.ui_helpers import ApiError
from ui.components.backend_status import render_status_bar
from ui.components.session import get_store, identity_sidebar

st.set_page_config(page_title="Roles — SalesRoles", layout="wide")
st.title("Sales Team Roles")
st.caption("Define the roles of your sales team and what each one may do.")

store = get_store()
identity_sidebar(store)
render_status_bar()

# -----------------------------
# Page State
# -----------------------------
defaults = {
    "role_title": "",
    "role_description": "",
    "role_permissions": ["view"],
    "role_is_default": False,
    "editing_role_id": None,
    "open_menu_id": None,
    "form_errors": [],
    "pending_form": None,
}
for k, v in defaults.items():
    if k not in st.session_state:
        st.session_state[k] = v

FORM_KEYS = ("role_title", "role_description", "role_permissions", "role_is_default", "editing_role_id", "form_errors")


def _form_values(role) -> dict:
    return {
        "editing_role_id": role.id,
        "role_title": role.title,
        "role_description": role.description,
        "role_permissions": [p for p in role.permissions if p in PERMISSION_VOCABULARY],
        "role_is_default": role.is_default,
        "form_errors": [],
    }


# ===============================================================
# Pending form update (applied before widgets exist)
# ===============================================================
if st.session_state.pending_form is not None:
    values = {k: defaults[k] for k in FORM_KEYS}
    values.update(st.session_state.pending_form)
    for k, v in values.items():
        st.session_state[k] = v
    st.session_state.pending_form = None


def _validation_errors(err: ApiError) -> list:
    try:
        return json.loads(err.body).get("errors") or [{"field": "", "message": err.body}]
    except ValueError:
        return [{"field": "", "message": err.body}]


# ===============================================================
# Role Form
# ===============================================================
editing = st.session_state.editing_role_id
st.subheader("Edit Role" if editing else "Create Role")

st.text_input("Title", key="role_title", placeholder="e.g., Closer")
c1, c2 = st.columns([3, 1])
with c2:
    if st.button("Generate description", disabled=len(st.session_state.role_title.strip()) < 2):
        st.session_state.role_description = store.api.generate_role_description(st.session_state.role_title)
        st.rerun()
    if st.button("Suggest permissions", disabled=not st.session_state.role_description.strip()):
        st.session_state.role_permissions = store.api.generate_role_permissions(
            st.session_state.role_title, st.session_state.role_description
        )
        st.rerun()
with c1:
    st.text_area("Description", key="role_description", height=100)

st.multiselect("Permissions", list(PERMISSION_VOCABULARY), key="role_permissions")
st.checkbox("Default role", key="role_is_default")

for err in st.session_state.form_errors:
    st.error(f"{err.get('field') or 'request'}: {err.get('message')}")

s1, s2 = st.columns(2)
with s1:
    if st.button("Save role", type="primary"):
        args = (
            st.session_state.role_title,
            st.session_state.role_description,
            st.session_state.role_permissions,
            st.session_state.role_is_default,
        )
        try:
            if editing:
                role = store.update_role(editing, *args)
                st.toast(f"Role '{role.title}' updated.")
            else:
                role = store.create_role(*args)
                st.toast(f"Role '{role.title}' created.")
            st.session_state.pending_form = {}
            st.rerun()
        except ApiError as e:
            st.session_state.form_errors = _validation_errors(e)
            st.rerun()
with s2:
    if editing and st.button("Cancel edit"):
        st.session_state.pending_form = {}
        st.rerun()

st.divider()

# ===============================================================
# Existing Roles
# ===============================================================
st.subheader(f"Roles ({store.total_roles})")
if not store.roles:
    st.info("No roles found.")

for role in store.roles:
    with st.container(border=True):
        head, menu = st.columns([5, 1])
        with head:
            badge = " · default" if role.is_default else ""
            st.markdown(f"**{role.title}**{badge}  \n{role.description}")
            st.caption(f"Permissions: {', '.join(role.permissions) or '—'} · Members: {role.member_count}")
        with menu:
            is_open = st.session_state.open_menu_id == role.id
            if st.button("Close" if is_open else "Actions", key=f"menu_{role.id}"):
                st.session_state.open_menu_id = None if is_open else role.id
                st.rerun()

        if st.session_state.open_menu_id == role.id:
            a1, a2, a3 = st.columns(3)
            if a1.button("Edit", key=f"edit_{role.id}"):
                st.session_state.pending_form = _form_values(role)
                st.session_state.open_menu_id = None
                st.rerun()
            if a2.button("Make default", key=f"default_{role.id}", disabled=role.is_default):
                if not store.set_default_role(role.id):
                    st.toast("Could not change the default role.")
                st.session_state.open_menu_id = None
                st.rerun()
            delete_help = None if store.can_delete_role() else "At least one role must exist."
            if a3.button("Delete", key=f"del_{role.id}", disabled=not store.can_delete_role(), help=delete_help):
                if store.delete_role(role.id):
                    st.toast(f"Role '{role.title}' deleted.")
                else:
                    st.toast("Delete failed; roles reloaded.")
                st.session_state.open_menu_id = None
                st.rerun()

st.divider()

# ===============================================================
# AI Recommendations
# ===============================================================
st.subheader("Team Structure Recommendations")
with st.form("recommend_form"):
    business = st.text_area("Describe your business", placeholder="e.g., Online coaching programs for founders")
    r1, r2 = st.columns(2)
    market = r1.text_input("Target market", value="general")
    goals = r2.text_input("Sales goals", value="growth")
    submitted = st.form_submit_button("Recommend roles")

if submitted and business.strip():
    st.session_state["recommendations"] = store.api.recommend_roles(
        business, [r.title for r in store.roles], market, goals
    )

for i, rec in enumerate(st.session_state.get("recommendations", [])):
    with st.expander(f"{rec.title} — relevance {rec.relevance_score}"):
        st.write(rec.description)
        st.markdown("**Responsibilities:** " + ", ".join(rec.responsibilities))
        st.markdown("**Skills:** " + ", ".join(rec.required_skills))
        if st.button("Use this role", key=f"use_rec_{i}"):
            st.session_state.pending_form = {"role_title": rec.title, "role_description": rec.description}
            st.rerun()
